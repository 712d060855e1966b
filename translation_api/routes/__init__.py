"""Routes package for the translation API."""

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .translations import translations_bp
    from .tags import tags_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(translations_bp, url_prefix='/api/translations')
    app.register_blueprint(tags_bp, url_prefix='/api/tags')

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        from translation_api import db
        db.session.rollback()
        logger.error(f"Database error: {e}")
        return jsonify({'error': 'Internal server error'}), 500
