"""Flask extension wiring the translator into an application."""
import logging

from flask import current_app, has_app_context

from translatable.config import TranslatableConfig
from translatable.services.locale import LocaleResolver
from translatable.services.translator import ModelTranslator

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'translatable'

# Process-wide translator for code running outside an application context
_default_translator = None


class Translations:
    """Registers a ``ModelTranslator`` on ``app.extensions['translatable']``."""

    def __init__(self, app=None, session=None):
        self.session = session
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        config = TranslatableConfig.from_mapping(app.config)
        translator = ModelTranslator(LocaleResolver(config), config, session=self.session)
        app.extensions[EXTENSION_KEY] = translator
        logger.debug(f"Translatable initialised: {config!r}")
        return translator


def get_translator() -> ModelTranslator:
    """Get the current app's translator, or the process-wide default one."""
    if has_app_context() and EXTENSION_KEY in current_app.extensions:
        return current_app.extensions[EXTENSION_KEY]

    global _default_translator
    if _default_translator is None:
        config = TranslatableConfig.from_env()
        _default_translator = ModelTranslator(LocaleResolver(config), config)
    return _default_translator
