"""Data access for tags with a read-through cache."""

from datetime import datetime
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from translation_api import db
from translation_api.models import Tag, Translation, slugify
from translation_api.repositories.criteria import UNSET, TagData, TagPatch

logger = logging.getLogger(__name__)

ALL_TAGS_CACHE_KEY = 'tags.all'


class TagRepository:
    """Reads and writes Tag rows through the injected cache."""

    def __init__(self, cache, ttl: int | None = None):
        self.cache = cache
        self.ttl = ttl

    def find(self, tag_id: int) -> dict | None:
        def load():
            tag = Tag.live().filter(Tag.id == tag_id).first()
            return tag.to_dict() if tag else None

        return self.cache.remember(f'tag.{tag_id}', load, self.ttl)

    def find_by_slug(self, slug: str) -> dict | None:
        def load():
            tag = Tag.live().filter(Tag.slug == slug).first()
            return tag.to_dict() if tag else None

        return self.cache.remember(f'tag.slug.{slug}', load, self.ttl)

    def list_all(self) -> list[dict]:
        """All live tags ordered by name."""
        def load():
            return [tag.to_dict() for tag in Tag.live().order_by(Tag.name).all()]

        return self.cache.remember(ALL_TAGS_CACHE_KEY, load, self.ttl)

    def _commit(self):
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise

    def _forget(self, tag, *extra_slugs):
        """Drop the tag's own entries, or the whole cache when the tag is
        attached to a live translation."""
        if tag.translations.filter(Translation.deleted_at.is_(None)).first() is not None:
            logger.info(f"Tag {tag.slug} is in use, clearing translation cache")
            self.cache.clear_all()
            return

        keys = {ALL_TAGS_CACHE_KEY, f'tag.{tag.id}', f'tag.slug.{tag.slug}'}
        keys.update(f'tag.slug.{slug}' for slug in extra_slugs)
        self.cache.delete(*keys)

    def create(self, data: TagData) -> dict:
        """Create a tag; the slug is derived from the name when not given."""
        tag = Tag(
            name=data.name,
            slug=data.slug or slugify(data.name),
            description=data.description
        )
        db.session.add(tag)
        self._commit()

        # A brand-new tag has no entries of its own yet
        self.cache.delete(ALL_TAGS_CACHE_KEY)
        logger.info(f"Created tag {tag.slug}")
        return tag.to_dict()

    def update(self, tag_id: int, patch: TagPatch) -> bool:
        tag = Tag.live().filter(Tag.id == tag_id).first()
        if not tag:
            return False

        old_slug = tag.slug
        if patch.name is not UNSET:
            tag.name = patch.name
        if patch.slug is not UNSET:
            tag.slug = patch.slug
        if patch.description is not UNSET:
            tag.description = patch.description

        self._commit()
        self._forget(tag, old_slug)
        return True

    def delete(self, tag_id: int) -> bool:
        """Soft-delete a tag. False if it doesn't exist."""
        tag = Tag.live().filter(Tag.id == tag_id).first()
        if not tag:
            return False

        tag.deleted_at = datetime.utcnow()
        self._commit()
        self._forget(tag)
        return True

    def _restore(self, tag) -> dict:
        tag.deleted_at = None
        self._commit()
        self._forget(tag)
        logger.info(f"Restored tag {tag.slug}")
        return tag.to_dict()

    def _create_or_restore(self, name: str, slug: str) -> dict:
        existing = Tag.query.filter(Tag.slug == slug).first()
        if existing is not None and existing.deleted_at is not None:
            return self._restore(existing)

        try:
            return self.create(TagData(name=name, slug=slug))
        except IntegrityError:
            # Another writer created it first, or the name is taken under another slug
            existing = Tag.query.filter(or_(Tag.slug == slug, Tag.name == name)).first()
            if existing is None:
                raise
            logger.info(f"Tag {slug} already exists, reusing it")
            if existing.deleted_at is not None:
                return self._restore(existing)
            return existing.to_dict()

    def find_or_create_by_names(self, names: list[str]) -> list[dict]:
        """Resolve tag names to tags, creating missing ones.

        Returns one tag per input name, in order; repeated or equivalent
        names ('Mobile', 'mobile') map to the same tag and appear once per
        occurrence.
        """
        tags = []

        for name in names:
            slug = slugify(name)
            tag = self.find_by_slug(slug)

            if tag is None:
                tag = self._create_or_restore(name, slug)

            tags.append(tag)

        return tags
