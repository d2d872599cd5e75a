"""
Admin Settings Model

FLOW OVERVIEW
- Single-row store configuration: WhatsApp business number, business hours,
  message templates and notification preferences.
- get_current(): the saved row, or an unsaved row built from app defaults so
  callers never have to handle "no settings yet".
"""

from datetime import datetime
from flask import current_app
from .database import db

DEFAULT_BUSINESS_HOURS = {
    'monday': {'open': '09:00', 'close': '18:00'},
    'tuesday': {'open': '09:00', 'close': '18:00'},
    'wednesday': {'open': '09:00', 'close': '18:00'},
    'thursday': {'open': '09:00', 'close': '18:00'},
    'friday': {'open': '09:00', 'close': '18:00'},
    'saturday': {'open': '10:00', 'close': '16:00'},
    'sunday': {'closed': True}
}

DEFAULT_GREETING = "Hi! I'd like to inquire about your jerseys."


class AdminSettings(db.Model):
    """Store-wide settings edited from the admin console"""
    __tablename__ = 'admin_settings'

    id = db.Column(db.Integer, primary_key=True)
    whatsapp_business_number = db.Column(db.String(20), nullable=False)
    business_hours = db.Column(db.JSON, nullable=False, default=lambda: dict(DEFAULT_BUSINESS_HOURS))
    message_templates = db.Column(db.JSON, nullable=False, default=dict)
    notification_email = db.Column(db.String(255))
    notification_preferences = db.Column(db.JSON, default=dict)
    auto_response_enabled = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def get_current(cls):
        """Return the saved settings row, or unsaved defaults"""
        settings = cls.query.order_by(cls.id).first()
        if settings is not None:
            return settings
        return cls(
            whatsapp_business_number=current_app.config.get('WHATSAPP_DEFAULT_NUMBER', '2348012345678'),
            business_hours=dict(DEFAULT_BUSINESS_HOURS),
            message_templates={},
            notification_preferences={}
        )

    @classmethod
    def get_or_create(cls):
        """Return the persisted settings row, creating it from defaults"""
        settings = cls.get_current()
        if settings.id is None:
            db.session.add(settings)
            db.session.flush()
        return settings

    def greeting(self):
        """General greeting used by the floating contact button"""
        templates = self.message_templates or {}
        return templates.get('greeting') or DEFAULT_GREETING

    def wants_notification(self, event):
        """Email notifications are on unless explicitly disabled per event"""
        if not self.notification_email:
            return False
        prefs = self.notification_preferences or {}
        return prefs.get(event, True) is not False

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'whatsapp_business_number': self.whatsapp_business_number,
            'business_hours': self.business_hours or {},
            'message_templates': self.message_templates or {},
            'notification_email': self.notification_email,
            'notification_preferences': self.notification_preferences or {},
            'auto_response_enabled': bool(self.auto_response_enabled),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
