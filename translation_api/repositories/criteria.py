"""Typed inputs for the repositories.

Patches use the UNSET sentinel so "field not supplied" (leave it alone) is
distinct from "field supplied empty" (e.g. tag_ids=[] clears all tags).
"""

from dataclasses import dataclass, field

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100


class _Unset:
    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass
class TranslationFilters:
    """Filters shared by list() and search(); every field is optional.

    locale: exact match
    key_contains: substring of the key
    tags: translation carries at least one of these tag slugs
    content: full-text match on content (search() only)
    """
    locale: str | None = None
    key_contains: str | None = None
    tags: list[str] = field(default_factory=list)
    content: str | None = None
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE


@dataclass
class TranslationData:
    key: str
    locale: str
    content: str
    tag_ids: list[int] = field(default_factory=list)


@dataclass
class TranslationPatch:
    key: object = UNSET
    locale: object = UNSET
    content: object = UNSET
    tag_ids: object = UNSET

    @classmethod
    def from_dict(cls, data: dict) -> 'TranslationPatch':
        """Build a patch from request data; null scalar fields count as not supplied."""
        patch = cls()
        for name in ('key', 'locale', 'content'):
            if data.get(name) is not None:
                setattr(patch, name, data[name])
        if 'tag_ids' in data:
            patch.tag_ids = list(data['tag_ids'] or [])
        return patch


@dataclass
class TagData:
    name: str
    slug: str | None = None
    description: str | None = None


@dataclass
class TagPatch:
    name: object = UNSET
    slug: object = UNSET
    description: object = UNSET

    @classmethod
    def from_dict(cls, data: dict) -> 'TagPatch':
        patch = cls()
        for name in ('name', 'slug', 'description'):
            if data.get(name) is not None:
                setattr(patch, name, data[name])
        return patch
