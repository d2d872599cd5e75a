"""
User Models

This module contains the User, Profile, and UserRole models.
"""

from datetime import datetime
from .database import db
from .utils import generate_user_id

ROLE_ADMIN = 'admin'
ROLE_USER = 'user'
ROLES = (ROLE_ADMIN, ROLE_USER)


class User(db.Model):
    """Store customer account used for sign-in"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(12), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    # Relationships
    profile = db.relationship('Profile', backref='user', uselist=False, lazy=True,
                              cascade='all, delete-orphan')
    roles = db.relationship('UserRole', backref='user', lazy=True, cascade='all, delete-orphan')

    def __init__(self, email, password_hash):
        """Initialize a new user with a validated email"""
        # Import validators here to avoid circular imports
        from ..utils.validators import validate_email

        email_validation = validate_email(email)
        if not email_validation.is_valid:
            raise ValueError(email_validation.error_message)
        if not password_hash:
            raise ValueError("Password hash is required")

        self.email = email_validation.sanitized_value
        self.password_hash = password_hash
        self.user_id = generate_user_id()

    def __repr__(self):
        return f'<User {self.email}>'

    def has_role(self, role):
        """Check membership in user_roles"""
        return any(r.role == role for r in self.roles)

    def is_admin(self):
        """Admins are flagged on the profile or hold the admin role"""
        if self.profile is not None and self.profile.is_admin:
            return True
        return self.has_role(ROLE_ADMIN)

    def update_last_login(self):
        """Update the last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()


class Profile(db.Model):
    """Customer profile holding contact and delivery details"""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    full_name = db.Column(db.String(100))
    phone_number = db.Column(db.String(20))
    delivery_address = db.Column(db.String(500))
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))
    avatar_url = db.Column(db.String(500))
    is_admin = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'user_id': self.user.user_id if self.user else None,
            'email': self.user.email if self.user else None,
            'full_name': self.full_name,
            'phone_number': self.phone_number,
            'delivery_address': self.delivery_address,
            'city': self.city,
            'state': self.state,
            'avatar_url': self.avatar_url,
            'is_admin': bool(self.is_admin),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


class UserRole(db.Model):
    """Role grant for a user (admin or user)"""
    __tablename__ = 'user_roles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'role', name='unique_user_role'),
    )

    @classmethod
    def grant(cls, user, role):
        """Grant a role once; returns the existing row when already granted"""
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        existing = cls.query.filter_by(user_id=user.id, role=role).first()
        if existing:
            return existing
        user_role = cls(user_id=user.id, role=role)
        db.session.add(user_role)
        return user_role
