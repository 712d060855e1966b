"""
Tests for the /api/tags endpoints.
"""

import pytest


def _create(client, headers, **data):
    return client.post('/api/tags', json=data, headers=headers)


class TestTags:
    """CRUD over tags."""

    def test_requires_token(self, client, db_session):
        assert client.get('/api/tags').status_code == 401

    def test_create_and_list(self, client, auth_headers):
        response = _create(client, auth_headers, name='Web', description='Browser app')
        _create(client, auth_headers, name='Desktop')

        assert response.status_code == 201
        assert response.json['tag']['slug'] == 'web'

        listing = client.get('/api/tags', headers=auth_headers).json
        assert listing['total'] == 2
        assert [t['name'] for t in listing['tags']] == ['Desktop', 'Web']

    def test_create_duplicate(self, client, auth_headers):
        _create(client, auth_headers, name='Web')

        response = _create(client, auth_headers, name='Web')

        assert response.status_code == 409

    @pytest.mark.parametrize('payload', [
        {},
        {'name': ''},
        {'name': '!!!'},
        {'name': 'Web', 'slug': 'Not A Slug'},
        {'name': 'Web', 'color': 'red'},
    ])
    def test_create_invalid(self, client, auth_headers, payload):
        response = client.post('/api/tags', json=payload, headers=auth_headers)

        assert response.status_code == 400

    def test_get_by_id_and_slug(self, client, auth_headers):
        tag = _create(client, auth_headers, name='Mobile App').json['tag']

        by_id = client.get(f"/api/tags/{tag['id']}", headers=auth_headers)
        by_slug = client.get('/api/tags/slug/mobile-app', headers=auth_headers)

        assert by_id.json['tag']['name'] == 'Mobile App'
        assert by_slug.json['tag']['id'] == tag['id']
        assert client.get('/api/tags/99999', headers=auth_headers).status_code == 404
        assert client.get('/api/tags/slug/nope', headers=auth_headers).status_code == 404

    def test_update(self, client, auth_headers):
        tag = _create(client, auth_headers, name='Web').json['tag']
        client.get(f"/api/tags/{tag['id']}", headers=auth_headers)

        response = client.put(
            f"/api/tags/{tag['id']}",
            json={'name': 'Website', 'slug': 'website'},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json['tag']['name'] == 'Website'
        assert client.get('/api/tags/slug/web', headers=auth_headers).status_code == 404

    def test_update_conflict(self, client, auth_headers):
        _create(client, auth_headers, name='Web')
        other = _create(client, auth_headers, name='Mobile').json['tag']

        response = client.put(f"/api/tags/{other['id']}", json={'slug': 'web'}, headers=auth_headers)

        assert response.status_code == 409

    def test_update_missing(self, client, auth_headers):
        response = client.put('/api/tags/99999', json={'name': 'x'}, headers=auth_headers)

        assert response.status_code == 404

    def test_delete(self, client, auth_headers):
        tag = _create(client, auth_headers, name='Web').json['tag']

        assert client.delete(f"/api/tags/{tag['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/tags/{tag['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/tags/{tag['id']}", headers=auth_headers).status_code == 404

    def test_deleted_tag_hidden_from_translations(self, client, auth_headers):
        created = client.post('/api/translations', json={
            'key': 'app.name', 'locale': 'en', 'content': 'Application', 'tags': ['web']
        }, headers=auth_headers).json['translation']
        tag_id = created['tags'][0]['id']

        client.delete(f'/api/tags/{tag_id}', headers=auth_headers)

        listing = client.get('/api/translations?tags=web', headers=auth_headers).json
        assert listing['total'] == 0

    def test_deleted_tag_removed_from_cached_translation(self, client, auth_headers):
        created = client.post('/api/translations', json={
            'key': 'app.name', 'locale': 'en', 'content': 'Application', 'tags': ['web']
        }, headers=auth_headers).json['translation']
        url = f"/api/translations/{created['id']}"
        assert client.get(url, headers=auth_headers).json['translation']['tags']

        client.delete(f"/api/tags/{created['tags'][0]['id']}", headers=auth_headers)

        assert client.get(url, headers=auth_headers).json['translation']['tags'] == []
