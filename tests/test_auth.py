"""
Test authentication functionality for Jersey Store
"""

import pytest
from jerseystore.models import User, UserRole
from jerseystore.utils.auth_utils import hash_password, verify_password, authenticate_user
from conftest import TEST_PASSWORD

pytestmark = pytest.mark.timeout(30)


class TestPasswordHashing:

    def test_hash_and_verify(self, app_context):
        password_hash = hash_password('secret123')
        assert password_hash != 'secret123'
        assert verify_password('secret123', password_hash)
        assert not verify_password('wrong-pass', password_hash)

    def test_verify_against_garbage_hash(self):
        assert verify_password('secret123', 'not-a-bcrypt-hash') is False


class TestRegistration:

    def test_register_creates_profile_and_role(self, client, db_session):
        response = client.post('/auth/register', json={
            'email': 'New.Fan@Example.com',
            'password': 'secret123',
            'full_name': 'New Fan'
        })
        assert response.status_code == 201
        data = response.get_json()
        assert data['user']['email'] == 'new.fan@example.com'
        assert data['user']['full_name'] == 'New Fan'
        assert data['user']['is_admin'] is False

        user = User.query.filter_by(email='new.fan@example.com').first()
        assert user.profile.full_name == 'New Fan'
        assert [r.role for r in UserRole.query.filter_by(user_id=user.id)] == ['user']

    def test_register_signs_in(self, client, db_session):
        client.post('/auth/register', json={'email': 'fan2@example.com', 'password': 'secret123'})
        response = client.get('/auth/me')
        assert response.status_code == 200
        assert response.get_json()['user']['email'] == 'fan2@example.com'

    def test_duplicate_email(self, client, test_user):
        response = client.post('/auth/register', json={'email': test_user.email, 'password': 'secret123'})
        assert response.status_code == 409

    def test_invalid_input(self, client, db_session):
        response = client.post('/auth/register', json={'email': 'nope', 'password': '123'})
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'email', 'password'}
        assert User.query.count() == 0


class TestLogin:

    def test_login_and_logout(self, client, test_user):
        response = client.post('/auth/login', json={'email': 'FAN@example.com', 'password': TEST_PASSWORD})
        assert response.status_code == 200
        assert response.get_json()['user']['cart_count'] == 0
        assert test_user.last_login is not None

        assert client.get('/auth/me').status_code == 200
        client.post('/auth/logout')
        assert client.get('/auth/me').status_code == 401

    def test_wrong_password(self, client, test_user):
        response = client.post('/auth/login', json={'email': test_user.email, 'password': 'wrong-pass'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password.'

    def test_missing_fields(self, client, db_session):
        response = client.post('/auth/login', data={'email': ''})
        assert response.status_code == 400

    def test_non_object_json_body(self, client, db_session):
        response = client.post('/auth/login', json=[1])
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Email and password are required.'

    def test_authenticate_unknown_user(self, db_session):
        assert authenticate_user('ghost@example.com', TEST_PASSWORD) is None

    def test_admin_flag_in_summary(self, client, admin_user):
        response = client.post('/auth/login', json={'email': admin_user.email, 'password': TEST_PASSWORD})
        assert response.get_json()['user']['is_admin'] is True


def test_user_rejects_invalid_email(app_context):
    with pytest.raises(ValueError):
        User(email='not-an-email', password_hash='x')
