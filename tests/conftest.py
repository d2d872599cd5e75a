"""
Test configuration and shared fixtures for Jersey Store tests.

This file contains:
- Centralized test configuration
- Shared fixtures used across multiple test files
- Common test utilities
"""

import pytest
from jerseystore import create_app
from jerseystore.models import db, Jersey, AdminSettings
from jerseystore.utils.auth_utils import create_user
from jerseystore.models.user import ROLE_ADMIN
from jerseystore.models import UserRole


# Centralized test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
    'WHATSAPP_DEFAULT_NUMBER': '2348012345678',
    'WHATSAPP_COUNTRY_CODE': '234',
    'MAIL_SERVER': 'localhost',
    'MAIL_PORT': 587,
    'MAIL_USE_TLS': False,
    'MAIL_USE_SSL': False,
    'MAIL_DEFAULT_SENDER': 'test@example.com',
    'MAIL_SUPPRESS_SEND': True,
    'BCRYPT_LOG_ROUNDS': 4
}

TEST_PASSWORD = 'secret123'


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    app = create_app(TEST_CONFIG)
    return app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create an application context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def db_session(app_context):
    """Create a database session and clean up after tests."""
    db.create_all()
    yield db.session
    db.session.remove()
    db.drop_all()


@pytest.fixture
def test_user(db_session):
    """Customer account with a filled-in profile."""
    user = create_user('fan@example.com', TEST_PASSWORD, 'Ada Obi')
    user.profile.phone_number = '08031234567'
    user.profile.delivery_address = '12 Allen Avenue'
    user.profile.city = 'Ikeja'
    user.profile.state = 'Lagos'
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    """Account holding the admin role."""
    user = create_user('admin@example.com', TEST_PASSWORD, 'Store Admin')
    UserRole.grant(user, ROLE_ADMIN)
    db_session.commit()
    return user


@pytest.fixture
def jersey(db_session):
    """Available jersey offered in M and L."""
    jersey = make_jersey(db_session)
    return jersey


@pytest.fixture
def sold_out_jersey(db_session):
    """Jersey marked unavailable."""
    return make_jersey(
        db_session,
        name='Away Kit 2023/24',
        team='Chelsea',
        league='Premier League',
        price_naira=22000,
        is_available=False
    )


@pytest.fixture
def settings(db_session):
    """Saved admin settings with a distinct business number."""
    settings = AdminSettings(
        whatsapp_business_number='2349099999999',
        business_hours={},
        message_templates={'greeting': 'Hello Jersey Store!'},
        notification_preferences={}
    )
    db_session.add(settings)
    db_session.commit()
    return settings


@pytest.fixture
def auth_client(client, test_user):
    """Test client signed in as the customer."""
    login(client, test_user.email)
    return client


@pytest.fixture
def admin_client(client, admin_user):
    """Test client signed in as the admin."""
    login(client, admin_user.email)
    return client


def make_jersey(session, **overrides):
    """Insert a jersey with sensible defaults."""
    fields = {
        'name': 'Home Kit 2024/25',
        'team': 'Arsenal',
        'league': 'Premier League',
        'season': '2024/25',
        'price_naira': 25000,
        'sizes': ['S', 'M', 'L', 'XL'],
        'available_sizes': ['M', 'L'],
        'stock_quantity': 10,
        'is_available': True,
        'is_featured': True
    }
    fields.update(overrides)
    jersey = Jersey(**fields)
    session.add(jersey)
    session.commit()
    return jersey


def login(client, email, password=TEST_PASSWORD):
    """Sign in through the auth endpoint."""
    response = client.post('/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return response
