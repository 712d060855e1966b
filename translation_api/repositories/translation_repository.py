"""Data access for translations with a read-through cache.

Reads check the cache first and fill it on a miss. Writes go to the
database and then drop every cache key the written row can appear under.
Bulk inserts clear the whole cache instead.
"""

from datetime import datetime
import logging

from sqlalchemy import and_, func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from translation_api import db
from translation_api.models import Tag, Translation
from translation_api.repositories.criteria import (
    UNSET,
    TranslationData,
    TranslationFilters,
    TranslationPatch,
)

logger = logging.getLogger(__name__)

BULK_INSERT_BATCH_SIZE = 1000
LOCALES_CACHE_KEY = 'translations.locales'


def tags_cache_key(tags, locale=None) -> str:
    """Cache key for translations carrying any of the given tag slugs."""
    key = 'translations.tags.' + '.'.join(sorted(tags))
    if locale:
        key += f'.{locale}'
    return key


class TranslationRepository:
    """Reads and writes Translation rows through the injected cache."""

    def __init__(self, cache, ttl: int | None = None):
        self.cache = cache
        self.ttl = ttl

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _query(self):
        """Live translations with tags eagerly loaded."""
        return Translation.live().options(selectinload(Translation.tags))

    def _load(self, translation_id):
        return self._query().filter(Translation.id == translation_id).first()

    def _content_predicate(self, term):
        dialect = db.session.get_bind().dialect.name
        if dialect == 'postgresql':
            return func.to_tsvector('simple', Translation.content).op('@@')(
                func.plainto_tsquery('simple', term)
            )
        if dialect == 'mysql':
            # MATCH ... AGAINST over the FULLTEXT index
            return Translation.content.match(term)
        return Translation.content.ilike(f'%{term}%')

    def _filtered(self, filters: TranslationFilters, with_content=False):
        query = self._query()

        if filters.locale:
            query = query.filter(Translation.locale == filters.locale)

        if filters.key_contains:
            query = query.filter(Translation.key.like(f'%{filters.key_contains}%'))

        if filters.tags:
            query = query.filter(Translation.tags.any(
                and_(Tag.slug.in_(filters.tags), Tag.deleted_at.is_(None))
            ))

        if with_content and filters.content:
            query = query.filter(self._content_predicate(filters.content))

        return query.order_by(Translation.created_at.desc(), Translation.id.desc())

    def find(self, translation_id: int) -> dict | None:
        """Get a translation with its tags, or None."""
        def load():
            translation = self._load(translation_id)
            return translation.to_dict() if translation else None

        return self.cache.remember(f'translation.{translation_id}', load, self.ttl)

    def find_by_key_and_locale(self, key: str, locale: str) -> dict | None:
        def load():
            translation = self._query().filter(
                Translation.key == key,
                Translation.locale == locale
            ).first()
            return translation.to_dict() if translation else None

        return self.cache.remember(f'translation.{key}.{locale}', load, self.ttl)

    def search(self, filters: TranslationFilters):
        """Like list(), plus a full-text match on content."""
        return self._filtered(filters, with_content=True).paginate(
            page=filters.page, per_page=filters.per_page, error_out=False
        )

    def get_by_locale(self, locale: str) -> list[dict]:
        def load():
            translations = Translation.live().filter(
                Translation.locale == locale
            ).order_by(Translation.key, Translation.id).all()
            return [t.to_dict(include_tags=False) for t in translations]

        return self.cache.remember(f'translations.locale.{locale}', load, self.ttl)

    def get_by_tags(self, tags: list[str], locale: str | None = None) -> list[dict]:
        def load():
            query = Translation.live().filter(Translation.tags.any(
                and_(Tag.slug.in_(tags), Tag.deleted_at.is_(None))
            ))
            if locale:
                query = query.filter(Translation.locale == locale)
            translations = query.order_by(Translation.locale, Translation.key, Translation.id).all()
            return [t.to_dict(include_tags=False) for t in translations]

        return self.cache.remember(tags_cache_key(tags, locale), load, self.ttl)

    def get_available_locales(self) -> list[str]:
        """Distinct locales among live translations, sorted."""
        def load():
            rows = db.session.query(Translation.locale).filter(
                Translation.deleted_at.is_(None)
            ).distinct().all()
            return sorted(row[0] for row in rows)

        return self.cache.remember(LOCALES_CACHE_KEY, load, self.ttl)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _commit(self):
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise

    def _tags_by_ids(self, tag_ids):
        if not tag_ids:
            return []
        return Tag.live().filter(Tag.id.in_(set(tag_ids))).all()

    def create(self, data: TranslationData) -> dict:
        """Insert a translation and attach tags; returns it freshly loaded."""
        translation = Translation(key=data.key, locale=data.locale, content=data.content)
        if data.tag_ids:
            translation.tags = self._tags_by_ids(data.tag_ids)

        db.session.add(translation)
        self._commit()

        self._forget(translation)
        logger.info(f"Created translation {translation.id} ({translation.key} [{translation.locale}])")

        return self._load(translation.id).to_dict()

    def update(self, translation_id: int, patch: TranslationPatch) -> bool:
        """Merge supplied fields into a translation. False if it doesn't exist."""
        translation = self._load(translation_id)
        if not translation:
            return False

        stale_keys = self.cache_keys_for(translation)

        if patch.key is not UNSET:
            translation.key = patch.key
        if patch.locale is not UNSET:
            translation.locale = patch.locale
        if patch.content is not UNSET:
            translation.content = patch.content
        if patch.tag_ids is not UNSET:
            translation.tags = self._tags_by_ids(patch.tag_ids)

        self._commit()

        self.cache.delete(*(stale_keys | self.cache_keys_for(translation)))
        return True

    def delete(self, translation_id: int) -> bool:
        """Soft-delete a translation. False if it doesn't exist."""
        translation = self._load(translation_id)
        if not translation:
            return False

        # Cache is cleared before the row is marked deleted
        self._forget(translation)

        translation.deleted_at = datetime.utcnow()
        self._commit()
        logger.info(f"Deleted translation {translation_id}")
        return True

    def sync_tags(self, translation_id: int, tag_ids: list[int]) -> bool:
        """Replace the tag set of a translation. No-op if it doesn't exist."""
        translation = self._load(translation_id)
        if not translation:
            return False

        stale_keys = self.cache_keys_for(translation)
        translation.tags = self._tags_by_ids(tag_ids)
        self._commit()

        self.cache.delete(*(stale_keys | self.cache_keys_for(translation)))
        return True

    def bulk_insert(self, rows: list[dict]) -> bool:
        """Insert rows in batches inside a single transaction.

        Any failure rolls back every batch and re-raises. On success the
        whole cache is cleared.
        """
        if not rows:
            return True

        try:
            for start in range(0, len(rows), BULK_INSERT_BATCH_SIZE):
                db.session.execute(insert(Translation), rows[start:start + BULK_INSERT_BATCH_SIZE])
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Bulk insert of {len(rows)} translations rolled back: {e}")
            raise

        self.cache.clear_all()
        logger.info(f"Bulk inserted {len(rows)} translations")
        return True

    # ------------------------------------------------------------------
    # Cache invalidation
    # ------------------------------------------------------------------

    @staticmethod
    def cache_keys_for(translation) -> set[str]:
        """Every cache key a translation can be stored under."""
        keys = {
            f'translation.{translation.id}',
            f'translation.{translation.key}.{translation.locale}',
            f'translations.locale.{translation.locale}',
            LOCALES_CACHE_KEY,
        }

        slugs = translation.tag_slugs()
        if slugs:
            for tag_set in [slugs] + [[slug] for slug in slugs]:
                keys.add(tags_cache_key(tag_set))
                keys.add(tags_cache_key(tag_set, translation.locale))

        return keys

    def _forget(self, translation):
        self.cache.delete(*self.cache_keys_for(translation))

    def list(self, filters: TranslationFilters | None = None):
        """Page through translations, newest first. Not cached."""
        filters = filters or TranslationFilters()
        return self._filtered(filters).paginate(
            page=filters.page, per_page=filters.per_page, error_out=False
        )
