"""
Backend Smoke Test Suite
========================
Walks the main translation flow end to end through the HTTP API.

Run with:
    pytest tests/test_backend_health.py -v
"""

from translation_api.models import Tag, Translation


# ============================================================
#  HEALTH & SMOKE TESTS
# ============================================================

class TestHealthEndpoints:
    """Verify the server boots and responds."""

    def test_root_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_unknown_route(self, client):
        assert client.get('/api/nope').status_code == 404


# ============================================================
#  END TO END
# ============================================================

class TestTranslationFlow:
    """Register, tag, translate, export."""

    def test_full_flow(self, client, db_session):
        resp = client.post('/api/auth/register', json={
            'name': 'Flow Tester',
            'email': 'flow@example.com',
            'password': 'flowpassword1'
        })
        assert resp.status_code == 201
        headers = {'Authorization': f"Bearer {resp.get_json()['access_token']}"}

        for locale, content in [('en', 'Application'), ('fr', 'Appli'), ('de', 'Anwendung')]:
            resp = client.post('/api/translations', json={
                'key': 'app.name',
                'locale': locale,
                'content': content,
                'tags': ['mobile', 'Mobile']
            }, headers=headers)
            assert resp.status_code == 201

        assert Tag.query.count() == 1
        assert Translation.live().count() == 3

        resp = client.get('/api/translations/export?tags=mobile&locale=fr')
        assert resp.get_json()['translations'] == {'app.name': 'Appli'}

        resp = client.get('/api/translations/locales')
        assert resp.get_json()['locales'] == ['de', 'en', 'fr']

        resp = client.post('/api/auth/logout', headers=headers)
        assert resp.status_code == 200
        assert client.get('/api/translations', headers=headers).status_code == 401
