"""Shared authentication utilities.

JWT handling is done by Flask-JWT-Extended; this module adapts it to the
decorator style used by the route modules and records revoked tokens in the
token_blocklist table.
"""

from datetime import datetime, timezone
from functools import wraps
import logging

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from sqlalchemy.exc import SQLAlchemyError

from translation_api import db
from translation_api.models import TokenBlocklist

logger = logging.getLogger(__name__)


def token_required(f):
    """
    Decorator to require a valid JWT access token.

    Passes the authenticated user's id as the first argument to the
    decorated function. Missing, expired or revoked tokens are answered
    with 401 by the JWT error handlers.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        verify_jwt_in_request()
        current_user_id = int(get_jwt_identity())
        return f(current_user_id, *args, **kwargs)
    return decorated


def revoke_current_token():
    """Revoke the token of the current request until its expiry."""
    claims = get_jwt()
    expires_at = datetime.fromtimestamp(claims['exp'], timezone.utc).replace(tzinfo=None)

    TokenBlocklist.purge_expired()
    db.session.add(TokenBlocklist(
        jti=claims['jti'],
        user_id=int(claims['sub']),
        expires_at=expires_at
    ))
    db.session.commit()


def register_token_blocklist(jwt_manager):
    """Wire the revoked-token check into the JWT manager.

    If the blocklist can't be read the token is treated as revoked.
    """

    @jwt_manager.token_in_blocklist_loader
    def is_token_revoked(jwt_header, jwt_payload):
        try:
            return TokenBlocklist.is_revoked(jwt_payload['jti'])
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Token blocklist lookup failed, rejecting token: {e}")
            return True
