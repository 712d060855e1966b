"""Translation use cases on top of the repositories.

Also owns the export cache tier: export payloads are cached under their own
keys (export, export.locale.<locale>, export[.locale.<l>].tags.<t1>.<t2>)
independently of the repository entries they are built from.
"""

import logging

from flask import current_app

from translation_api.repositories import (
    TagRepository,
    TranslationData,
    TranslationFilters,
    TranslationPatch,
    TranslationRepository,
)
from translation_api.services.cache import get_cache

logger = logging.getLogger(__name__)


class TranslationService:
    """Orchestrates translation and tag repositories."""

    def __init__(self, translation_repository, tag_repository, cache, ttl=None):
        self.translation_repository = translation_repository
        self.tag_repository = tag_repository
        self.cache = cache
        self.ttl = ttl

    def get_translation(self, translation_id: int) -> dict | None:
        return self.translation_repository.find(translation_id)

    def get_translation_by_key(self, key: str, locale: str) -> dict | None:
        return self.translation_repository.find_by_key_and_locale(key, locale)

    def list_translations(self, filters: TranslationFilters | None = None):
        return self.translation_repository.list(filters)

    def search_translations(self, filters: TranslationFilters):
        return self.translation_repository.search(filters)

    def get_available_locales(self) -> list[str]:
        return self.translation_repository.get_available_locales()

    def _resolve_tag_ids(self, names) -> list[int]:
        if not names:
            return []
        return [tag['id'] for tag in self.tag_repository.find_or_create_by_names(names)]

    def create_translation(self, data: dict) -> dict:
        """Create a translation; `tags` holds tag names, created on demand."""
        translation = self.translation_repository.create(TranslationData(
            key=data['key'],
            locale=data['locale'],
            content=data['content'],
            tag_ids=self._resolve_tag_ids(data.get('tags')),
        ))

        self._forget_exports(translation)
        return translation

    def update_translation(self, translation_id: int, data: dict) -> bool:
        """Update a translation.

        Tags are only touched when the `tags` key is present: an empty list
        (or null) removes every tag.
        """
        current = self.translation_repository.find(translation_id)
        if current is None:
            return False

        patch = TranslationPatch.from_dict(data)
        if 'tags' in data:
            patch.tag_ids = self._resolve_tag_ids(data['tags'])

        updated = self.translation_repository.update(translation_id, patch)
        if updated:
            self._forget_exports(current, self.translation_repository.find(translation_id))
        return updated

    def delete_translation(self, translation_id: int) -> bool:
        current = self.translation_repository.find(translation_id)
        if current is None:
            return False

        deleted = self.translation_repository.delete(translation_id)
        if deleted:
            self._forget_exports(current)
        return deleted

    def import_translations(self, rows: list[dict]) -> int:
        """Bulk insert translations; returns the number of rows written."""
        self.translation_repository.bulk_insert(rows)
        return len(rows)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @staticmethod
    def build_export_cache_key(locale: str | None = None, tags=None) -> str:
        key = 'export'

        if locale:
            key += f'.locale.{locale}'

        if tags:
            key += '.tags.' + '.'.join(sorted(tags))

        return key

    def export_translations(self, locale: str | None = None, tags=None) -> dict:
        """Export translations as {key: content} or {locale: {key: content}}.

        With tags, translations carrying any of the tags are exported
        (grouped by locale unless a locale is also given). With only a
        locale, that locale is exported. With neither, every locale is.
        """
        cache_key = self.build_export_cache_key(locale, tags)

        # Not atomic: concurrent misses may both rebuild; last write wins
        if self.cache.has(cache_key):
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        if tags:
            export = self._format_for_export(
                self.translation_repository.get_by_tags(tags, locale), locale
            )
        elif locale:
            export = self._format_for_export(
                self.translation_repository.get_by_locale(locale), locale
            )
        else:
            export = self._export_all_locales()

        self.cache.set(cache_key, export, self.ttl)
        return export

    def _export_all_locales(self) -> dict:
        export = {}
        for locale in self.translation_repository.get_available_locales():
            export[locale] = self._flatten(self.translation_repository.get_by_locale(locale))
        return export

    def _format_for_export(self, translations, locale):
        if locale:
            return self._flatten(translations)

        grouped = {}
        for translation in translations:
            grouped.setdefault(translation['locale'], []).append(translation)
        return {loc: self._flatten(items) for loc, items in grouped.items()}

    @staticmethod
    def _flatten(translations) -> dict:
        # Later rows win on duplicate keys
        return {t['key']: t['content'] for t in translations}

    def invalidate_export_cache(self, locale: str | None = None) -> None:
        """Drop one locale's export, or clear the entire cache."""
        if locale:
            self.cache.delete(f'export.locale.{locale}')
        else:
            logger.info("Clearing entire cache for export invalidation")
            self.cache.clear_all()

    def _forget_exports(self, *translations):
        """Drop the export entries the given translation dicts appear in.

        Tag-filtered exports are dropped for the full slug set and for each
        single slug, with and without the locale.
        """
        keys = {'export'}
        for translation in translations:
            if not translation:
                continue
            locale = translation['locale']
            keys.add(self.build_export_cache_key(locale))

            slugs = [tag['slug'] for tag in translation.get('tags', [])]
            if slugs:
                for tag_set in [slugs] + [[slug] for slug in slugs]:
                    keys.add(self.build_export_cache_key(tags=tag_set))
                    keys.add(self.build_export_cache_key(locale, tag_set))

        self.cache.delete(*keys)


def get_translation_service() -> TranslationService:
    """Build a service wired to the current application's cache."""
    cache = get_cache()
    ttl = current_app.config.get('TRANSLATION_CACHE_TTL')
    return TranslationService(
        TranslationRepository(cache, ttl),
        TagRepository(cache, ttl),
        cache,
        ttl,
    )


def get_tag_repository() -> TagRepository:
    return TagRepository(get_cache(), current_app.config.get('TRANSLATION_CACHE_TTL'))
