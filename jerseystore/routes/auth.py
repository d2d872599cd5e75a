"""
Authentication Routes

FLOW OVERVIEW
- /auth/register [POST]
  • Validate (email, password, optional full name) → create user + profile + role → start session.
- /auth/login [POST]
  • Authenticate → set session.
- /auth/logout [POST, GET]
  • Clear session.
- /auth/me [GET]
  • Current user summary (profile, admin flag, cart count).
"""

from functools import wraps
from flask import Blueprint, request, jsonify, session, current_app, g
from sqlalchemy.exc import SQLAlchemyError
from ..models import db, User
from ..utils.auth_utils import create_user, authenticate_user, login_user, get_current_user
from ..utils.validators import validate_registration
from ..utils.error_handlers import error_response

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    """Decorator to require user login; exposes the user as g.user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return error_response('Unauthorized. Please sign in.', 401)
        g.user = user
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require an admin account"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return error_response('Unauthorized. Please sign in.', 401)
        if not user.is_admin():
            return error_response("You don't have admin privileges.", 403)
        g.user = user
        return f(*args, **kwargs)
    return decorated_function


def request_data():
    """JSON object body or form fields; any other JSON reads as empty"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def user_summary(user):
    from ..utils.cart import cart_count
    profile = user.profile
    return {
        'user_id': user.user_id,
        'email': user.email,
        'full_name': profile.full_name if profile else None,
        'is_admin': user.is_admin(),
        'cart_count': cart_count(user)
    }


@auth_bp.route('/register', methods=['POST'])
def register():
    """User registration endpoint"""
    data = request_data()

    result = validate_registration(data)
    if not result.is_valid:
        return error_response(result.error_message, 400, result.errors)

    email = result.cleaned['email']
    if User.query.filter_by(email=email).first():
        return error_response('User with this email already exists', 409)

    try:
        user = create_user(email, result.cleaned['password'], result.cleaned.get('full_name'))
        login_user(user)
        current_app.logger.info(f"Registered user {user.user_id}")
        return jsonify({
            'message': 'Account created successfully!',
            'user': user_summary(user)
        }), 201

    except (SQLAlchemyError, ValueError) as e:
        db.session.rollback()
        current_app.logger.error(f"Registration failed for {email}: {e}")
        return error_response('Registration failed. Please try again.', 500)


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login endpoint"""
    data = request_data()
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    if not email or not password:
        return error_response('Email and password are required.', 400)

    user = authenticate_user(email, password)
    if user is None:
        return error_response('Invalid email or password.', 401)

    login_user(user)
    return jsonify({
        'message': f'Welcome back, {user.email}!',
        'user': user_summary(user)
    })


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """User logout endpoint"""
    session.clear()
    return jsonify({'message': 'You have been logged out successfully.'})


@auth_bp.route('/me')
@login_required
def me():
    """Current session user"""
    return jsonify({'user': user_summary(g.user)})
