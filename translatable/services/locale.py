"""Active/default locale resolution."""
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


class LocaleResolver:
    """Holds the process-wide active locale and answers default-locale checks."""

    def __init__(self, config):
        self.config = config
        self._locale = config.locale

    def get_locale(self) -> str:
        return self._locale or self.config.default_locale

    def set_locale(self, locale: str):
        logger.debug(f"Active locale changed from {self._locale} to {locale}")
        self._locale = locale

    def get_default_locale(self) -> str:
        return self.config.default_locale

    def is_default_locale(self, locale: str = None) -> bool:
        """Check whether ``locale`` (or the active locale) is the default one."""
        return (locale or self.get_locale()) == self.config.default_locale

    @contextmanager
    def using_locale(self, locale: str):
        """Temporarily switch the active locale."""
        previous = self._locale
        self._locale = locale
        try:
            yield locale
        finally:
            self._locale = previous
