"""Data access layer: database reads and writes behind the cache."""

from translation_api.repositories.criteria import (
    UNSET,
    TranslationFilters,
    TranslationData,
    TranslationPatch,
    TagData,
    TagPatch,
)
from translation_api.repositories.translation_repository import TranslationRepository
from translation_api.repositories.tag_repository import TagRepository

__all__ = [
    'UNSET',
    'TranslationFilters',
    'TranslationData',
    'TranslationPatch',
    'TagData',
    'TagPatch',
    'TranslationRepository',
    'TagRepository',
]
