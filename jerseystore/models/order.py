"""
Order / Inquiry Models

FLOW OVERVIEW
- Order: a recorded customer contact event (single-jersey inquiry or cart
  checkout) used for admin follow-up. `items` keeps a JSON snapshot of the
  lines as the customer saw them; OrderItem rows itemize the same lines.
- Status moves pending → approved | rejected, approved → fulfilled
  (see utils.status_workflow).
"""

from datetime import datetime
from .database import db
from .utils import generate_order_number, money

INQUIRY_SINGLE = 'single'
INQUIRY_CART = 'cart'

WHATSAPP_CONTACTED = 'contacted'
WHATSAPP_NOT_CONTACTED = 'not_contacted'


class Order(db.Model):
    """Customer inquiry/order awaiting admin follow-up"""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(32), nullable=False, index=True)
    inquiry_type = db.Column(db.String(20), default=INQUIRY_SINGLE)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)

    customer_name = db.Column(db.String(100), nullable=False, default='')
    customer_phone = db.Column(db.String(20), nullable=False, default='')
    customer_email = db.Column(db.String(255))
    delivery_address = db.Column(db.String(500), nullable=False, default='')
    delivery_city = db.Column(db.String(100), nullable=False, default='')
    delivery_state = db.Column(db.String(100), nullable=False, default='')
    notes = db.Column(db.Text)

    items = db.Column(db.JSON, nullable=False, default=list)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    quoted_price = db.Column(db.Numeric(12, 2))

    status = db.Column(db.String(20), default='pending')
    priority_level = db.Column(db.String(20), default='normal')
    admin_notes = db.Column(db.Text)
    whatsapp_status = db.Column(db.String(20), default=WHATSAPP_NOT_CONTACTED)
    whatsapp_sent_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    order_items = db.relationship('OrderItem', backref='order', lazy=True, cascade='all, delete-orphan')
    user = db.relationship('User', backref=db.backref('orders', lazy=True))

    def __init__(self, **kwargs):
        kwargs.setdefault('order_number', generate_order_number())
        super().__init__(**kwargs)

    def __repr__(self):
        return f'<Order {self.order_number} ({self.status})>'

    def add_line(self, jersey, size, quantity):
        """Itemize a jersey line and append it to the JSON snapshot"""
        line = OrderItem(jersey_id=jersey.id, size=size, quantity=quantity, price=jersey.price_naira)
        self.order_items.append(line)
        self.items = list(self.items or []) + [{
            'jersey_id': jersey.id,
            'name': jersey.name,
            'team': jersey.team,
            'size': size,
            'quantity': quantity,
            'price': money(jersey.price_naira)
        }]
        return line

    def to_dict(self, include_customer=True):
        """Convert model to dictionary."""
        data = {
            'id': self.id,
            'order_number': self.order_number,
            'inquiry_type': self.inquiry_type,
            'items': list(self.items or []),
            'total_amount': money(self.total_amount),
            'quoted_price': money(self.quoted_price),
            'status': self.status,
            'whatsapp_status': self.whatsapp_status,
            'whatsapp_sent_at': self.whatsapp_sent_at.isoformat() if self.whatsapp_sent_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_customer:
            data.update({
                'customer_name': self.customer_name,
                'customer_phone': self.customer_phone,
                'customer_email': self.customer_email,
                'delivery_address': self.delivery_address,
                'delivery_city': self.delivery_city,
                'delivery_state': self.delivery_state,
                'notes': self.notes,
                'priority_level': self.priority_level,
                'admin_notes': self.admin_notes
            })
        return data


class OrderItem(db.Model):
    """Itemized line of an order"""
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    jersey_id = db.Column(db.Integer, db.ForeignKey('jerseys.id'), nullable=False)
    size = db.Column(db.String(10), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
