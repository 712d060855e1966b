"""Shared constants for the application."""

from translation_api.constants.locales import (
    SUPPORTED_LOCALES,
    DEFAULT_TAGS,
)

__all__ = [
    'SUPPORTED_LOCALES',
    'DEFAULT_TAGS',
]
