"""
Utilities Package

This package contains the store services and helper modules.
"""

from . import auth_utils
from . import validators
from . import error_handlers
from . import whatsapp
from . import status_workflow

__all__ = [
    'auth_utils',
    'validators',
    'error_handlers',
    'whatsapp',
    'status_workflow'
]
