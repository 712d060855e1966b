"""Database models for the translation API."""

from .user import User
from .tag import Tag, translation_tags, slugify
from .translation import Translation
from .token_blocklist import TokenBlocklist

__all__ = ['User', 'Tag', 'Translation', 'TokenBlocklist', 'translation_tags', 'slugify']
