"""
Tests for profile self-service and the wishlist
"""

import pytest
from jerseystore.models import Wishlist

pytestmark = pytest.mark.timeout(30)


class TestProfile:

    def test_get_profile(self, auth_client):
        profile = auth_client.get('/api/profile').get_json()['profile']
        assert profile['email'] == 'fan@example.com'
        assert profile['city'] == 'Ikeja'

    def test_partial_update(self, auth_client):
        response = auth_client.patch('/api/profile', json={'city': 'Abuja', 'state': 'FCT'})
        assert response.status_code == 200
        profile = response.get_json()['profile']
        assert profile['city'] == 'Abuja'
        assert profile['state'] == 'FCT'
        assert profile['full_name'] == 'Ada Obi'

    def test_update_too_long(self, auth_client):
        response = auth_client.patch('/api/profile', json={'phone_number': '0' * 21})
        assert response.status_code == 400
        assert 'phone_number' in response.get_json()['errors']

    def test_cannot_grant_self_admin(self, auth_client):
        auth_client.patch('/api/profile', json={'is_admin': True})
        assert auth_client.get('/api/profile').get_json()['profile']['is_admin'] is False

    def test_requires_login(self, client, db_session):
        assert client.get('/api/profile').status_code == 401


class TestWishlist:

    def test_add_is_idempotent(self, auth_client, jersey):
        assert auth_client.post('/api/wishlist', json={'jersey_id': jersey.id}).status_code == 201
        assert auth_client.post('/api/wishlist', json={'jersey_id': jersey.id}).status_code == 200
        assert Wishlist.query.count() == 1

        entries = auth_client.get('/api/wishlist').get_json()['wishlist']
        assert entries[0]['jersey']['team'] == 'Arsenal'

    def test_remove(self, auth_client, jersey):
        auth_client.post('/api/wishlist', json={'jersey_id': jersey.id})
        assert auth_client.delete(f'/api/wishlist/{jersey.id}').status_code == 200
        assert auth_client.delete(f'/api/wishlist/{jersey.id}').status_code == 404

    def test_unknown_jersey(self, auth_client):
        assert auth_client.post('/api/wishlist', json={'jersey_id': 9999}).status_code == 404
