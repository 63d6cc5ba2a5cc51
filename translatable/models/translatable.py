"""Translatable record mixin.

A record lists its translatable attributes in ``__translatable__`` and maps each
of them under a private key, exposing the public name with ``translatable``::

    class Post(HasTranslations, db.Model):
        __tablename__ = 'posts'
        __translatable__ = ('body',)

        id = db.Column(db.Integer, primary_key=True)
        _body = db.Column('body', db.Text)
        body = translatable('_body')

Reading ``post.body`` in a non-default locale returns the stored translation
(or the record's own value when there is none). Writing it stages the value
until the record is flushed. The default locale always reads and writes the
record's own column.
"""
import logging
from datetime import date, datetime

from sqlalchemy import and_, inspect
from sqlalchemy.orm import declared_attr, foreign, object_session, synonym
from sqlalchemy.orm.attributes import flag_dirty

from translatable import db
from translatable.exceptions import NotTranslatableAttribute
from translatable.models.translation import Translation
from translatable.services import queries

logger = logging.getLogger(__name__)

# session.info key holding {id(record): (record, snapshot)} flushed but not yet committed
FLUSHED_KEY = 'translatable_flushed'

_NOT_LOOKED_UP = object()


def translatable(column_key: str):
    """Expose the column mapped at ``column_key`` as a translatable attribute.

    The public name is ``column_key`` without its leading underscores. At class
    level the attribute is a synonym of the column, so it works in queries.
    """
    name = column_key.lstrip('_')

    def fget(record):
        return record.translation_capability.get(name)

    def fset(record, value):
        record.translation_capability.set(name, value)

    return synonym(column_key, descriptor=property(fget, fset, doc=f'Translatable {name}'))


class NativeAttributes:
    """Reads and writes a record's own columns, bypassing translation."""

    def __init__(self, record):
        self.record = record

    def key(self, name: str) -> str:
        """Mapped key of the column behind ``name``."""
        synonyms = inspect(type(self.record)).synonyms
        if name in synonyms:
            return synonyms[name].name
        return name

    def get(self, name: str):
        return getattr(self.record, self.key(name))

    def set(self, name: str, value):
        setattr(self.record, self.key(name), value)

    def cast(self, name: str, value):
        """Run the record's ``@validates`` hook on ``value`` without assigning it."""
        validators = inspect(type(self.record)).validators
        for key in (self.key(name), name):
            if key in validators:
                validator = validators[key]
                if isinstance(validator, tuple):
                    validator = validator[0]
                return validator(self.record, key, value)
        return value


class TranslationCapability:
    """Per-record translation state: resolved cache and pending-write buffer.

    Both maps are ``{locale: {attribute: value}}``. A key present in
    ``resolved`` has been looked up (``None`` meaning no translation); every
    ``pending`` entry is mirrored in ``resolved``. Not thread-safe.
    """

    def __init__(self, record, translator):
        self.record = record
        self.translator = translator
        self.native = NativeAttributes(record)
        self.resolved = {}
        self.pending = {}
        # Locale the ``translations`` collection was prefetched for
        self.eager_locale = None

    @property
    def exists(self) -> bool:
        return inspect(self.record).has_identity

    def _ensure_translatable(self, name: str):
        if not self.record.is_translatable(name):
            raise NotTranslatableAttribute(name, self.record)

    # ------------------------------------------------------------------
    # Implicit attribute access
    # ------------------------------------------------------------------

    def get(self, name: str):
        record = self.record
        if not record.is_translatable(name) or not self.exists:
            return self.native.get(name)
        if not record.auto_load_translations(name):
            return self.native.get(name)
        if self.translator.is_default_locale():
            return self.native.get(name)

        translation = self.get_translation(name)
        if translation is None:
            return self.native.get(name)
        return translation

    def set(self, name: str, value):
        record = self.record
        if not record.is_translatable(name) or not self.exists or not record.auto_save_translations(name):
            self.native.set(name, value)
            return
        if self.translator.is_default_locale():
            self.native.set(name, value)
            return

        self.set_translation(name, value)

    # ------------------------------------------------------------------
    # Explicit translation API
    # ------------------------------------------------------------------

    def set_translation(self, name: str, value, locale: str = None):
        """Stage a translation; the default locale writes the own column instead."""
        self._ensure_translatable(name)
        locale = locale or self.translator.get_locale()

        if self.translator.is_default_locale(locale):
            self.native.set(name, value)
            return

        value = self.native.cast(name, value)
        resolved = self.resolved.setdefault(locale, {})
        if name not in resolved and self.exists:
            # Free when the translations collection is already loaded
            resolved[name] = self.translator.get(self.record, name, locale)
        if resolved.get(name, _NOT_LOOKED_UP) == value:
            return

        self.pending.setdefault(locale, {})[name] = value
        resolved[name] = value
        logger.debug(f"Staged {self.record.translation_type()} {name}[{locale}]")

        if self.exists:
            flag_dirty(self.record)

    def get_raw_translation(self, name: str, locale: str = None):
        self._ensure_translatable(name)
        locale = locale or self.translator.get_locale()

        if self.translator.is_default_locale(locale):
            return self.native.get(name)

        resolved = self.resolved.setdefault(locale, {})
        if name not in resolved:
            if not self.exists:
                return None
            resolved[name] = self.translator.get(self.record, name, locale)
        return resolved[name]

    def get_translation(self, name: str, locale: str = None):
        self._ensure_translatable(name)
        locale = locale or self.translator.get_locale()

        if self.translator.is_default_locale(locale):
            return self.native.get(name)

        value = self.get_raw_translation(name, locale)
        if value is None:
            self.translator.notify_not_found(self.record, name, locale)
        return value

    def get_translations(self, locale: str = None) -> dict:
        return {
            name: self.get_translation(name, locale)
            for name in self.record.get_translatable()
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def flush(self, connection=None) -> int:
        """Forward the pending buffer to the translator in a single call.

        The buffer is only drained once the surrounding transaction commits.
        """
        if not self.pending:
            return 0

        snapshot = {locale: dict(attributes) for locale, attributes in self.pending.items()}
        written = self.translator.save(self.record, snapshot, connection)

        session = object_session(self.record)
        if session is None:
            self.drain(snapshot)
        else:
            session.info.setdefault(FLUSHED_KEY, {})[id(self.record)] = (self.record, snapshot)
        return written

    def drain(self, snapshot: dict):
        """Drop persisted values from the buffer unless they were changed since."""
        for locale, attributes in snapshot.items():
            pending = self.pending.get(locale)
            if not pending:
                continue
            for name, value in attributes.items():
                if name in pending and pending[name] == value:
                    del pending[name]
            if not pending:
                del self.pending[locale]

    def handle_deleted(self, connection=None):
        if self.record.should_delete_translations():
            self.translator.delete_all(self.record, connection)


class HasTranslations:
    """Mixin for models with per-locale attribute translations."""

    # Ordered names of translatable attributes
    __translatable__ = ()
    # Per-attribute overrides, e.g. {'slug': {'auto_load': False}}
    __translatable_options__ = {}
    # Value of translations.owner_type; defaults to the table name
    __translation_type__ = None

    @declared_attr
    def translations(cls):
        return db.relationship(
            Translation,
            primaryjoin=lambda: and_(
                foreign(Translation.owner_id) == cls.id,
                Translation.owner_type == cls.translation_type(),
            ),
            viewonly=True,
            lazy='select',
        )

    @property
    def translation_capability(self) -> TranslationCapability:
        capability = self.__dict__.get('_translation_capability')
        if capability is None:
            capability = TranslationCapability(self, self.get_translator())
            self.__dict__['_translation_capability'] = capability
        return capability

    @classmethod
    def get_translator(cls):
        from translatable.extension import get_translator
        return get_translator()

    @classmethod
    def get_translatable(cls) -> tuple:
        return tuple(cls.__translatable__)

    @classmethod
    def is_translatable(cls, attribute: str) -> bool:
        return attribute in cls.__translatable__

    @classmethod
    def translation_type(cls) -> str:
        return cls.__translation_type__ or cls.__tablename__

    @classmethod
    def auto_load_translations(cls, attribute: str) -> bool:
        options = cls.__translatable_options__.get(attribute, {})
        return options.get('auto_load', cls.get_translator().config.auto_load)

    @classmethod
    def auto_save_translations(cls, attribute: str) -> bool:
        options = cls.__translatable_options__.get(attribute, {})
        return options.get('auto_save', cls.get_translator().config.auto_save)

    # Translation API

    def translate(self, attribute: str, value, locale: str):
        """Save a translation of one attribute right away."""
        self.translation_capability.set_translation(attribute, value, locale)
        self.save()

    def translate_many(self, translations: dict, locale: str):
        """Save translations of several attributes with a single write."""
        capability = self.translation_capability
        for attribute in translations:
            capability._ensure_translatable(attribute)
        for attribute, value in translations.items():
            capability.set_translation(attribute, value, locale)
        self.save()

    def set_translation(self, attribute: str, value, locale: str = None):
        self.translation_capability.set_translation(attribute, value, locale)

    def get_translation(self, attribute: str, locale: str = None):
        return self.translation_capability.get_translation(attribute, locale)

    def get_raw_translation(self, attribute: str, locale: str = None):
        return self.translation_capability.get_raw_translation(attribute, locale)

    def get_translations(self, locale: str = None) -> dict:
        return self.translation_capability.get_translations(locale)

    def get_default_attribute(self, attribute: str):
        """Get the attribute's own value, ignoring translations."""
        return self.translation_capability.native.get(attribute)

    def should_delete_translations(self) -> bool:
        """Whether the delete hook removes the record's translations.

        The hook only runs once the row is gone. Soft deletes keep the row and
        never reach it, so their translations stay for a later restore.
        """
        return True

    def save(self):
        """Add the record to its session and commit, flushing staged translations."""
        capability = self.translation_capability
        if capability.pending and capability.exists:
            flag_dirty(self)
        capability.translator.save_owner(self)

    def to_dict(self):
        """Convert record to dictionary with translated values for the active locale."""
        mapper = inspect(type(self))
        public_names = {prop.name: key for key, prop in mapper.synonyms.items()}

        data = {}
        for column_attr in mapper.column_attrs:
            value = getattr(self, column_attr.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            data[public_names.get(column_attr.key, column_attr.key)] = value

        if inspect(self).has_identity:
            data.update({
                attribute: value
                for attribute, value in self.get_translations().items()
                if value is not None
            })
        return data

    # Query scopes

    @classmethod
    def where_translatable(cls, attribute: str, value, locale: str = None):
        return queries.where_translatable(cls, attribute, value, locale)

    @classmethod
    def order_by_translatable(cls, attribute: str, direction: str = 'asc', locale: str = None):
        return queries.order_by_translatable(cls, attribute, direction, locale)

    @classmethod
    def resolve_by_translatable(cls, attribute: str, value):
        return queries.resolve_by_translatable(cls, attribute, value)
