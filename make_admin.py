#!/usr/bin/env python3
"""
Grant admin access to an existing account
"""
import sys

from jerseystore import create_app
from jerseystore.models import db, User, Profile, UserRole
from jerseystore.models.user import ROLE_ADMIN


def make_admin(email):
    """Give the user with `email` the admin role and profile flag"""
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            print(f"❌ User {email} not found!")
            return False

        if user.profile is None:
            user.profile = Profile(user_id=user.id)
        user.profile.is_admin = True
        UserRole.grant(user, ROLE_ADMIN)
        db.session.commit()
        print(f"✅ User {email} is now an admin")
        print(f"   User ID: {user.user_id}")
        return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python make_admin.py <email>")
        sys.exit(1)

    sys.exit(0 if make_admin(sys.argv[1]) else 1)
