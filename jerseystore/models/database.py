"""
Database Configuration

FLOW OVERVIEW
- Provides the global SQLAlchemy instance `db` shared by the store models.
- Bound to the Flask app in the factory (jerseystore/__init__.py).
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
