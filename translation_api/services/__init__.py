"""Business layer and infrastructure services."""

from translation_api.services.cache import (
    TranslationCache,
    RedisCache,
    MemoryCache,
    NullCache,
    build_cache,
    get_cache,
)
from translation_api.services.translation_service import (
    TranslationService,
    get_translation_service,
    get_tag_repository,
)

__all__ = [
    'TranslationCache',
    'RedisCache',
    'MemoryCache',
    'NullCache',
    'build_cache',
    'get_cache',
    'TranslationService',
    'get_translation_service',
    'get_tag_repository',
]
