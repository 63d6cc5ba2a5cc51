"""Configuration for record translations."""
import os

TRUTHY = ('true', '1', 'yes')


def _flag(value, default: bool) -> bool:
    """Parse a boolean switch coming from the environment or app config."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


class TranslatableConfig:
    """Locale and auto load/save switches shared by the resolver and translator.

    Args:
        default_locale: Locale whose values live in the owner's own columns
        locale: Initially active locale (defaults to ``default_locale``)
        auto_load: Resolve translations on attribute reads
        auto_save: Stage translations on attribute writes
    """

    def __init__(self, default_locale='en', locale=None, auto_load=True, auto_save=True):
        self.default_locale = default_locale
        self.locale = locale or default_locale
        self.auto_load = auto_load
        self.auto_save = auto_save

    @classmethod
    def from_mapping(cls, mapping) -> 'TranslatableConfig':
        """Build from Flask ``app.config`` style keys."""
        default_locale = mapping.get('TRANSLATABLE_DEFAULT_LOCALE') or 'en'
        return cls(
            default_locale=default_locale,
            locale=mapping.get('TRANSLATABLE_LOCALE') or default_locale,
            auto_load=_flag(mapping.get('TRANSLATABLE_AUTO_LOAD'), True),
            auto_save=_flag(mapping.get('TRANSLATABLE_AUTO_SAVE'), True),
        )

    @classmethod
    def from_env(cls) -> 'TranslatableConfig':
        return cls.from_mapping(os.environ)

    def __repr__(self):
        return (
            f'<TranslatableConfig default={self.default_locale} locale={self.locale} '
            f'auto_load={self.auto_load} auto_save={self.auto_save}>'
        )
