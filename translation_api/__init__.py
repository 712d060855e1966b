from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from datetime import timedelta
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
jwt = JWTManager()

logger = logging.getLogger(__name__)


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///translations.db')
    # Heroku/Render style URLs
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def create_app(config_name='development'):
    app = Flask(__name__)

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(
        seconds=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 2592000))
    )
    app.config['REDIS_URL'] = os.getenv('REDIS_URL')
    app.config['CACHE_KEY_PREFIX'] = os.getenv('CACHE_KEY_PREFIX', 'translations:')
    app.config['TRANSLATION_CACHE_TTL'] = int(os.getenv('TRANSLATION_CACHE_TTL', 3600))
    app.config['CDN_ENABLED'] = os.getenv('CDN_ENABLED', 'false').lower() in ('true', '1', 'yes')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['REDIS_URL'] = None

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    CORS(app)

    from translation_api.services.cache import build_cache
    app.extensions['translation_cache'] = build_cache(app)

    from translation_api.utils.auth import register_token_blocklist
    register_token_blocklist(jwt)

    with app.app_context():
        from translation_api import models  # noqa: F401  (register tables)
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    # Register routes
    from translation_api.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
