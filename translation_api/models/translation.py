"""Translation model for localized text keyed by (key, locale)."""

from datetime import datetime
from translation_api import db
from translation_api.models.tag import translation_tags


class Translation(db.Model):
    """One piece of localized content, e.g. key='app.name', locale='en'."""

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(191), nullable=False, index=True)
    locale = db.Column(db.String(10), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime, nullable=True)

    # Only one live row per key + locale; soft-deleted rows don't count.
    # MySQL has no partial indexes: there the index covers soft-deleted rows
    # too, so a deleted key + locale can't be created again.
    __table_args__ = (
        db.Index(
            'uq_translations_key_locale_live', 'key', 'locale',
            unique=True,
            sqlite_where=db.text('deleted_at IS NULL'),
            postgresql_where=db.text('deleted_at IS NULL'),
        ),
        db.Index('ix_translations_key_locale_deleted', 'key', 'locale', 'deleted_at'),
        db.Index('ix_translations_content_fulltext', 'content', mysql_prefix='FULLTEXT').ddl_if(dialect='mysql'),
    )

    tags = db.relationship(
        'Tag',
        secondary=translation_tags,
        backref=db.backref('translations', lazy='dynamic'),
        lazy='select',
        order_by='Tag.name',
    )

    @classmethod
    def live(cls):
        """Query over translations that are not soft-deleted."""
        return cls.query.filter(cls.deleted_at.is_(None))

    @property
    def live_tags(self):
        return [tag for tag in self.tags if tag.deleted_at is None]

    def tag_slugs(self):
        """Slugs of the live tags attached to this translation."""
        return [tag.slug for tag in self.live_tags]

    def to_dict(self, include_tags=True):
        """Convert translation to dictionary."""
        result = {
            'id': self.id,
            'key': self.key,
            'locale': self.locale,
            'content': self.content,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

        if include_tags:
            result['tags'] = [tag.to_dict() for tag in self.live_tags]

        return result

    def __repr__(self):
        return f'<Translation {self.key} [{self.locale}]>'
