"""Revoked access tokens."""

from datetime import datetime
from translation_api import db


class TokenBlocklist(db.Model):
    """JWT ids revoked by logout, kept until the token would have expired."""

    __tablename__ = 'token_blocklist'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @classmethod
    def is_revoked(cls, jti):
        return db.session.query(cls.id).filter(cls.jti == jti).first() is not None

    @classmethod
    def purge_expired(cls, now=None):
        """Delete entries whose tokens have expired; returns how many."""
        return cls.query.filter(cls.expires_at < (now or datetime.utcnow())).delete()

    def __repr__(self):
        return f'<TokenBlocklist {self.jti}>'
