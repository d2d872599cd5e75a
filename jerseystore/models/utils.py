"""
Model Utilities

This module contains utility functions for the models package.
"""

import secrets
import string
import time
from decimal import Decimal


def generate_user_id():
    """Generate a unique 12-character public user ID"""
    return ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(12))


def generate_order_number(now=None):
    """Generate an inquiry number of the form INQ-<epoch milliseconds>"""
    if now is None:
        now = time.time()
    return f"INQ-{int(now * 1000)}"


def parse_size_list(value):
    """Split a comma separated size string ("S, M, L") into a clean list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(',')
    return [str(s).strip() for s in items if str(s).strip()]


def money(value):
    """Serialize a Numeric column value for JSON responses"""
    return None if value is None else float(value)


def to_decimal(value):
    """Coerce a price to Decimal; freshly assigned values may still be floats"""
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
