"""Tag model and the translation/tag association table."""

from datetime import datetime
import re
import unicodedata
from translation_api import db


translation_tags = db.Table(
    'translation_tags',
    db.Column('translation_id', db.Integer,
              db.ForeignKey('translations.id', ondelete='CASCADE'),
              primary_key=True, index=True),
    db.Column('tag_id', db.Integer,
              db.ForeignKey('tags.id', ondelete='CASCADE'),
              primary_key=True, index=True),
    db.Column('created_at', db.DateTime, default=datetime.utcnow, nullable=False),
)


def slugify(value: str) -> str:
    """Turn a display name into a URL-safe slug.

    'Mobile App!' -> 'mobile-app', 'Café' -> 'cafe'
    """
    text = unicodedata.normalize('NFKD', value or '').encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^a-zA-Z0-9]+', '-', text.lower())
    return text.strip('-')[:100]


class Tag(db.Model):
    """Label used to group translations (e.g. 'mobile', 'web')."""

    __tablename__ = 'tags'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime, nullable=True)

    @classmethod
    def live(cls):
        """Query over tags that are not soft-deleted."""
        return cls.query.filter(cls.deleted_at.is_(None))

    def to_dict(self):
        """Convert tag to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Tag {self.slug}>'
