"""Eager-load policy prefetching translations of the active locale."""
import logging

from sqlalchemy.orm import selectinload

from translatable.models.translation import Translation

logger = logging.getLogger(__name__)

# Execution option recording which locale a query prefetched
LOCALE_OPTION = 'translations_locale'


class TranslationsEagerLoadPolicy:
    """Decides whether a query against a translatable model prefetches translations.

    One ``selectinload`` per query replaces a translation lookup per record.
    Only rows of the active locale are loaded.
    """

    def __init__(self, translator):
        self.translator = translator

    def should_load(self, model) -> bool:
        """True when any translatable attribute auto-loads on read."""
        for attribute in model.get_translatable():
            if model.auto_load_translations(attribute):
                return True
        return False

    def apply(self, statement, model):
        """Return ``statement`` with the prefetch option attached when needed."""
        if self.translator.is_default_locale():
            return statement

        if not self.should_load(model):
            return statement

        locale = self.translator.get_locale()
        logger.debug(f"Eager loading {model.translation_type()} translations for {locale}")
        return statement.options(
            selectinload(model.translations.and_(Translation.locale == locale))
        )
