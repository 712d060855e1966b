"""
Pytest configuration and fixtures for testing the Translation API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from translation_api import create_app, db
from translation_api.models.user import User
from translation_api.repositories import TagRepository, TranslationRepository
from translation_api.services import TranslationService

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def cache(app):
    """The application's translation cache (in-process in tests)."""
    return app.extensions['translation_cache']


@pytest.fixture(scope='function')
def db_session(app, cache):
    """Empty every table and the cache, then hand out the session."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        cache.clear_all()
        yield db.session
        db.session.rollback()


@pytest.fixture
def translation_repository(db_session, cache):
    return TranslationRepository(cache)


@pytest.fixture
def tag_repository(db_session, cache):
    return TagRepository(cache)


@pytest.fixture
def service(translation_repository, tag_repository, cache):
    return TranslationService(translation_repository, tag_repository, cache)


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'name': fake.name(),
        'email': fake.unique.email(),
    }
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    return _create_user()


def _get_token(client, email, password):
    """Login and return the access token."""
    resp = client.post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if not data or not data.get('access_token'):
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={data}")
    return data['access_token']


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers for test user."""
    token = _get_token(client, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def make_translation(service):
    """Create translations through the service with sensible defaults."""
    def _make(key=None, locale='en', content=None, tags=None):
        data = {
            'key': key or f"{fake.word()}.{fake.unique.pystr(min_chars=8, max_chars=8)}",
            'locale': locale,
            'content': content or fake.sentence(),
        }
        if tags is not None:
            data['tags'] = tags
        return service.create_translation(data)
    return _make
