#!/usr/bin/env python3
"""
Jersey Store application entry point.

This module selects configuration based on environment variables, creates the
Flask application via `create_app`, and creates the tables for in-memory and
testing databases. When executed directly, it runs the development server. In
production, a WSGI server should import `app` from this module.

Environment variables of interest:
- FLASK_ENV: if set to 'testing', enables in-memory DB and testing flags.
- DATABASE_URL: database URI; 'sqlite:///:memory:' forces table creation.
- SECRET_KEY, WHATSAPP_DEFAULT_NUMBER, mail settings: consumed by `create_app`.
"""

import os
from jerseystore import create_app
from jerseystore.models import db

if os.getenv('FLASK_ENV') == 'testing':
    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': os.getenv('DATABASE_URL', 'sqlite:///:memory:'),
        'SECRET_KEY': os.getenv('SECRET_KEY', 'test-secret-key'),
        'WHATSAPP_DEFAULT_NUMBER': os.getenv('WHATSAPP_DEFAULT_NUMBER', '2348012345678'),
        'WHATSAPP_COUNTRY_CODE': os.getenv('WHATSAPP_COUNTRY_CODE', '234'),
        'MAIL_SERVER': os.getenv('MAIL_SERVER', 'localhost'),
        'MAIL_PORT': int(os.getenv('MAIL_PORT', 587)),
        'MAIL_USE_TLS': False,
        'MAIL_USE_SSL': False,
        'MAIL_DEFAULT_SENDER': os.getenv('MAIL_DEFAULT_SENDER', 'test@example.com'),
        'MAIL_SUPPRESS_SEND': True,
        'BCRYPT_LOG_ROUNDS': 4
    }
    app = create_app(test_config)
else:
    app = create_app()

print("🚀 Starting Jersey Store server...")
with app.app_context():
    db.create_all()
    if os.getenv('FLASK_ENV') == 'testing' or os.getenv('DATABASE_URL') == 'sqlite:///:memory:':
        print("🧪 In-memory database initialized")
    else:
        print("📊 Database tables ready")

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
