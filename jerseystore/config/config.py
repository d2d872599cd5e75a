"""
Application Configuration

FLOW OVERVIEW
- Config.__init__
  • FLASK_ENV picks the dotenv file: config.env (development), config.prod.env
    (production), none for testing.
- Properties read the environment on access; defaults suit local development.
  • Store: WhatsApp business number/country code, featured jersey count.
  • Flask/SQLAlchemy: secret, database URI, session cookie.
  • Flask-Mail: admin notification transport.
"""

import os
from dotenv import load_dotenv

DOTENV_FILES = {
    'development': 'config.env',
    'production': 'config.prod.env',
}


def _env_flag(name, default):
    return os.getenv(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Environment-backed settings passed to app.config.from_object"""

    def __init__(self):
        self.env = os.getenv('FLASK_ENV', 'development')
        dotenv_file = DOTENV_FILES.get(self.env)
        if dotenv_file:
            load_dotenv(dotenv_file)

    # Store

    @property
    def WHATSAPP_DEFAULT_NUMBER(self):
        """Business number used until an admin saves one in admin_settings"""
        return os.getenv('WHATSAPP_DEFAULT_NUMBER', '2348012345678')

    @property
    def WHATSAPP_COUNTRY_CODE(self):
        """Country code prefixed to local phone numbers"""
        return os.getenv('WHATSAPP_COUNTRY_CODE', '234')

    @property
    def FEATURED_JERSEY_LIMIT(self):
        return int(os.getenv('FEATURED_JERSEY_LIMIT', 8))

    @property
    def LOG_LEVEL(self):
        """Level for the jerseystore.* module loggers"""
        return os.getenv('LOG_LEVEL', 'INFO').upper()

    # Flask / database

    @property
    def SECRET_KEY(self):
        """Signs the session cookie"""
        return os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return os.getenv('DATABASE_URL', 'sqlite:///jerseystore.db')

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self):
        return False

    @property
    def BCRYPT_LOG_ROUNDS(self):
        """Work factor for password hashing"""
        return int(os.getenv('BCRYPT_LOG_ROUNDS', 12))

    @property
    def SESSION_COOKIE_SECURE(self):
        """HTTPS-only cookies outside development"""
        return self.env == 'production'

    @property
    def SESSION_COOKIE_HTTPONLY(self):
        return True

    @property
    def SESSION_COOKIE_SAMESITE(self):
        return 'Lax'

    @property
    def PERMANENT_SESSION_LIFETIME(self):
        """Signed-in session lifetime in seconds (one week)"""
        return int(os.getenv('PERMANENT_SESSION_LIFETIME', 7 * 24 * 3600))

    # Flask-Mail

    @property
    def MAIL_SERVER(self):
        return os.getenv('MAIL_SERVER', 'localhost')

    @property
    def MAIL_PORT(self):
        return int(os.getenv('MAIL_PORT', 587))

    @property
    def MAIL_USE_TLS(self):
        return _env_flag('MAIL_USE_TLS', True)

    @property
    def MAIL_USE_SSL(self):
        return _env_flag('MAIL_USE_SSL', False)

    @property
    def MAIL_USERNAME(self):
        return os.getenv('MAIL_USERNAME')

    @property
    def MAIL_PASSWORD(self):
        return os.getenv('MAIL_PASSWORD')

    @property
    def MAIL_DEFAULT_SENDER(self):
        """From address on admin notification emails"""
        return os.getenv('MAIL_DEFAULT_SENDER', 'no-reply@jerseystore.local')

    @property
    def MAIL_SUPPRESS_SEND(self):
        """Skip SMTP entirely (messages are still dispatched to listeners)"""
        return _env_flag('MAIL_SUPPRESS_SEND', False)
