"""
Cart and Wishlist Models

FLOW OVERVIEW
- CartItem: pending selection of jersey + size + quantity tied to a user.
  Unique per (user, jersey, size) by convention only; the cart service
  merges with a lookup before inserting.
- Wishlist: saved jerseys per user.
"""

from datetime import datetime
from .database import db
from .utils import money, to_decimal


class CartItem(db.Model):
    """Line in a user's cart"""
    __tablename__ = 'cart_items'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    jersey_id = db.Column(db.Integer, db.ForeignKey('jerseys.id'), nullable=False)
    size = db.Column(db.String(10), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<CartItem jersey={self.jersey_id} size={self.size} qty={self.quantity}>'

    @property
    def line_total(self):
        return to_decimal(self.jersey.price_naira) * self.quantity

    def to_dict(self):
        """Convert model to dictionary, joined with its jersey."""
        jersey = self.jersey
        return {
            'id': self.id,
            'jersey_id': self.jersey_id,
            'size': self.size,
            'quantity': self.quantity,
            'line_total': money(self.line_total),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'jersey': {
                'id': jersey.id,
                'name': jersey.name,
                'team': jersey.team,
                'league': jersey.league,
                'price': money(jersey.price_naira),
                'image_url': jersey.image_url,
                'is_available': bool(jersey.is_available)
            }
        }


class Wishlist(db.Model):
    """Saved jersey for later"""
    __tablename__ = 'wishlists'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    jersey_id = db.Column(db.Integer, db.ForeignKey('jerseys.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'jersey_id', name='unique_user_wishlist_jersey'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'jersey': self.jersey.to_dict(),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
