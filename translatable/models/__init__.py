"""Database models for record translations."""

from .translation import Translation
from .soft_delete import SoftDeleteMixin
from .translatable import HasTranslations, TranslationCapability, NativeAttributes, translatable

# Registers the lifecycle and eager-load listeners
from translatable.services import events  # noqa: E402,F401

__all__ = [
    'Translation',
    'SoftDeleteMixin',
    'HasTranslations',
    'TranslationCapability',
    'NativeAttributes',
    'translatable',
]
