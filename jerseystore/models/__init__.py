"""
Database Models Package

FLOW OVERVIEW
- Centralizes SQLAlchemy DB instance and model imports for convenient usage.
- Exposes: db, User, Profile, UserRole, Jersey, CartItem, Wishlist,
  JerseyRequest, Order, OrderItem, AdminSettings.
"""

from .database import db
from .user import User, Profile, UserRole
from .jersey import Jersey
from .cart_item import CartItem, Wishlist
from .order import Order, OrderItem
from .jersey_request import JerseyRequest
from .admin_settings import AdminSettings

__all__ = [
    'db',
    'User',
    'Profile',
    'UserRole',
    'Jersey',
    'CartItem',
    'Wishlist',
    'Order',
    'OrderItem',
    'JerseyRequest',
    'AdminSettings'
]
