"""
Jersey Store Application Package

FLOW OVERVIEW
- create_app(test_config=None)
  • Build Flask app, apply config (test dict or env-based Config), init
    extensions (DB, Mail) and the package log level.
  • Register blueprints: auth (/auth), main (/), api (/api), admin (/admin).
  • Register global error handlers and request metrics.
"""

import logging
from flask import Flask
from .models import db
from .routes import auth_bp, main_bp, api_bp, admin_bp
from .config import Config
from .utils.notifications import mail
from .utils.prom_metrics import register_request_metrics


def create_app(test_config=None):
    """Application factory"""
    app = Flask(__name__)

    if test_config:
        app.config.update(test_config)
    else:
        app.config.from_object(Config())

    logging.getLogger(__name__).setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Extensions
    db.init_app(app)
    mail.init_app(app)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/admin')

    from .utils.error_handlers import register_error_handlers
    register_error_handlers(app)
    register_request_metrics(app)

    return app
