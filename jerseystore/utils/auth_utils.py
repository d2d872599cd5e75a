"""
Authentication Utilities

This module contains utility functions for authentication and user management.
"""

import bcrypt
from flask import current_app, has_app_context, session
from ..models import db, User, Profile, UserRole
from ..models.user import ROLE_USER


def hash_password(password):
    """Hash a password using bcrypt"""
    rounds = current_app.config.get('BCRYPT_LOG_ROUNDS', 12) if has_app_context() else 12
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password, password_hash):
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_user(email, password, full_name=None):
    """Create a new user with profile and the default role"""
    password_hash = hash_password(password)

    user = User(email=email, password_hash=password_hash)
    db.session.add(user)
    db.session.flush()  # Get the user ID

    db.session.add(Profile(user_id=user.id, full_name=full_name))
    UserRole.grant(user, ROLE_USER)

    db.session.commit()

    return user


def authenticate_user(email, password):
    """Authenticate a user with email and password"""
    user = User.query.filter_by(email=(email or '').strip().lower()).first()

    if user and verify_password(password, user.password_hash):
        return user

    return None


def login_user(user):
    """Start a session for the user"""
    session.clear()
    session['user_id'] = user.user_id
    session['user_email'] = user.email
    session.permanent = True
    user.update_last_login()


def get_current_user():
    """User for the current session, or None"""
    public_id = session.get('user_id')
    if not public_id:
        return None
    return User.query.filter_by(user_id=public_id).first()
