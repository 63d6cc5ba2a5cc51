"""Query scopes that filter and order translatable records by translated values."""
from sqlalchemy import and_, func, select
from sqlalchemy.orm import aliased

from translatable.exceptions import NotTranslatableAttribute
from translatable.models.translation import Translation


def _ensure_translatable(model, attribute):
    if not model.is_translatable(attribute):
        raise NotTranslatableAttribute(attribute, model)


def where_translatable(model, attribute: str, value, locale: str = None):
    """Query records whose ``attribute`` translated to ``locale`` equals ``value``.

    In the default locale the record's own column is compared instead.
    """
    _ensure_translatable(model, attribute)
    translator = model.get_translator()
    locale = locale or translator.get_locale()

    if translator.is_default_locale(locale):
        return model.query.filter(getattr(model, attribute) == value)

    owner_ids = select(Translation.owner_id).where(
        Translation.owner_type == model.translation_type(),
        Translation.attribute == attribute,
        Translation.locale == locale,
        Translation.value == value,
    )
    return model.query.filter(model.id.in_(owner_ids))


def order_by_translatable(model, attribute: str, direction: str = 'asc', locale: str = None):
    """Query records ordered by the translated value, falling back to the own column."""
    _ensure_translatable(model, attribute)
    translator = model.get_translator()
    locale = locale or translator.get_locale()
    column = getattr(model, attribute)

    if translator.is_default_locale(locale):
        query = model.query
        ordering = column
    else:
        translation = aliased(Translation)
        query = model.query.outerjoin(
            translation,
            and_(
                translation.owner_id == model.id,
                translation.owner_type == model.translation_type(),
                translation.attribute == attribute,
                translation.locale == locale,
            ),
        )
        ordering = func.coalesce(translation.value, column)

    if direction.lower() == 'desc':
        return query.order_by(ordering.desc())
    return query.order_by(ordering.asc())


def resolve_by_translatable(model, attribute: str, value):
    """Find a record by a (possibly translated) key such as a localized slug.

    Tries the active locale's translations first, then the record's own column.
    """
    _ensure_translatable(model, attribute)
    record = where_translatable(model, attribute, value).first()

    if record is None and not model.get_translator().is_default_locale():
        record = model.query.filter(getattr(model, attribute) == value).first()
    return record
