"""
Jersey Model

FLOW OVERVIEW
- Catalog product record (team, league, season, price, stock, availability).
- `is_available` gates purchase actions: cart adds, inquiries and checkout.
- `available_sizes` is the subset of `sizes` currently offered for sale.
"""

from datetime import datetime
from .database import db
from .utils import money

DEFAULT_SIZES = ['S', 'M', 'L', 'XL', 'XXL']


class Jersey(db.Model):
    """Sellable jersey in the catalog"""
    __tablename__ = 'jerseys'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    team = db.Column(db.String(100), nullable=False)
    league = db.Column(db.String(100), nullable=False)
    season = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text)
    price_naira = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    image_url = db.Column(db.String(500))
    sizes = db.Column(db.JSON, default=lambda: list(DEFAULT_SIZES))
    available_sizes = db.Column(db.JSON, default=lambda: list(DEFAULT_SIZES))
    stock_quantity = db.Column(db.Integer, default=0)
    is_available = db.Column(db.Boolean, default=True)
    is_featured = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    cart_items = db.relationship('CartItem', backref='jersey', lazy=True, cascade='all, delete-orphan')
    wishlist_entries = db.relationship('Wishlist', backref='jersey', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Jersey {self.name} ({self.team})>'

    def offers_size(self, size):
        """A size is purchasable when listed in available_sizes (or sizes as fallback)"""
        offered = self.available_sizes or self.sizes or []
        return size in offered

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'team': self.team,
            'league': self.league,
            'season': self.season,
            'description': self.description,
            'price': money(self.price_naira),
            'image_url': self.image_url,
            'sizes': list(self.sizes or []),
            'available_sizes': list(self.available_sizes or []),
            'stock_quantity': self.stock_quantity,
            'is_available': bool(self.is_available),
            'is_featured': bool(self.is_featured),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
