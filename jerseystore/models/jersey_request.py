"""
Jersey Request Model

FLOW OVERVIEW
- Customer-submitted inquiry for a jersey not in the catalog.
- Tracked through `status` (pending → approved | rejected, approved → fulfilled).
- `whatsapp_contacted` / `last_contacted_at` record the messaging hand-off.
"""

from datetime import datetime
from .database import db


class JerseyRequest(db.Model):
    """Request to source a jersey that is not listed"""
    __tablename__ = 'jersey_requests'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    inquiry_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=True)

    full_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(20), nullable=False)
    jersey_name = db.Column(db.String(200), nullable=False)
    team = db.Column(db.String(100), nullable=False)
    league = db.Column(db.String(100))
    size = db.Column(db.String(10), nullable=False)
    additional_notes = db.Column(db.Text)

    status = db.Column(db.String(20), default='pending')
    admin_response = db.Column(db.Text)
    whatsapp_contacted = db.Column(db.Boolean, default=False)
    last_contacted_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<JerseyRequest {self.team} {self.jersey_name} ({self.status})>'

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'full_name': self.full_name,
            'email': self.email,
            'phone_number': self.phone_number,
            'jersey_name': self.jersey_name,
            'team': self.team,
            'league': self.league,
            'size': self.size,
            'additional_notes': self.additional_notes,
            'status': self.status,
            'admin_response': self.admin_response,
            'whatsapp_contacted': bool(self.whatsapp_contacted),
            'last_contacted_at': self.last_contacted_at.isoformat() if self.last_contacted_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
