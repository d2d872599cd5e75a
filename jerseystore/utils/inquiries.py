"""
Inquiry Workflow

FLOW OVERVIEW
- submit_jersey_request(data, user, contact_via_whatsapp, is_mobile)
  • Validate form → insert jersey_requests row → optional WhatsApp link
    (custom-request template) → optional admin email.
- create_jersey_inquiry(jersey, size, quantity, user, is_mobile)
  • Size required, jersey must be available → log an Order inquiry for
    signed-in users → WhatsApp link (jersey-inquiry template).
- customer_contact_link(record, message, is_mobile)
  • Admin-side link to the customer's phone; marks the record contacted.
- build_whatsapp_link(message, is_mobile)
  • Resolve the business number from admin settings and build the link.
"""

import logging
from datetime import datetime

from flask import current_app

from ..models import db, AdminSettings, JerseyRequest, Order
from ..models.order import INQUIRY_SINGLE, WHATSAPP_CONTACTED
from ..models.utils import to_decimal
from .validators import validate_jersey_request, validate_quantity
from .whatsapp import (
    generate_whatsapp_link, jersey_inquiry_message, custom_request_message
)
from .notifications import send_new_request_notification, send_new_order_notification
from .prom_metrics import observe_inquiry

logger = logging.getLogger(__name__)


class InquiryError(Exception):
    """Inquiry refused; carries the HTTP status and any per-field errors"""

    def __init__(self, message, status_code=400, errors=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


def _country_code():
    return current_app.config.get('WHATSAPP_COUNTRY_CODE', '234')


def build_whatsapp_link(message, is_mobile=False, number=None):
    """Deep link to the business number (or `number`) with `message` pre-filled"""
    if number is None:
        number = AdminSettings.get_current().whatsapp_business_number
    return generate_whatsapp_link(number, message, is_mobile, country_code=_country_code())


def _display_name(user):
    if user is None:
        return None
    if user.profile is not None and user.profile.full_name:
        return user.profile.full_name
    return user.email


def notify_new_order(order):
    """Email the admin about a new inquiry when notifications are configured"""
    return send_new_order_notification(AdminSettings.get_current(), order)


def submit_jersey_request(data, user=None, contact_via_whatsapp=False, is_mobile=False):
    """
    Record a request for a jersey that is not in the catalog

    Args:
        data: Submitted form fields
        user: Signed-in user, if any
        contact_via_whatsapp: Customer chose to continue on WhatsApp
        is_mobile: Pick the app link scheme

    Returns:
        Tuple of (jersey_request, whatsapp_url or None)

    Raises:
        InquiryError: validation failed (no row is written)
    """
    result = validate_jersey_request(data)
    if not result.is_valid:
        raise InquiryError(result.error_message, 400, result.errors)
    fields = result.cleaned

    jersey_request = JerseyRequest(
        user_id=user.id if user else None,
        full_name=fields['full_name'],
        email=fields['email'],
        phone_number=fields['phone_number'],
        jersey_name=fields['jersey_name'],
        team=fields['team'],
        league=fields.get('league'),
        size=fields['size'],
        additional_notes=fields.get('additional_notes'),
        status='pending',
        whatsapp_contacted=bool(contact_via_whatsapp),
        last_contacted_at=datetime.utcnow() if contact_via_whatsapp else None
    )
    db.session.add(jersey_request)
    db.session.commit()
    observe_inquiry('jersey_request', whatsapp=bool(contact_via_whatsapp))
    logger.info(f"Jersey request {jersey_request.id} submitted (whatsapp={bool(contact_via_whatsapp)})")

    settings = AdminSettings.get_current()
    send_new_request_notification(settings, jersey_request)

    whatsapp_url = None
    if contact_via_whatsapp:
        message = custom_request_message(
            jersey_request.team,
            jersey_request.league or '',
            jersey_request.jersey_name,
            jersey_request.size,
            jersey_request.full_name
        )
        whatsapp_url = build_whatsapp_link(message, is_mobile, number=settings.whatsapp_business_number)

    return jersey_request, whatsapp_url


def create_jersey_inquiry(jersey, size, quantity=1, user=None, is_mobile=False):
    """
    Start a WhatsApp inquiry about a catalog jersey

    Returns:
        Tuple of (order or None, whatsapp_url). The order is only recorded
        for signed-in users.

    Raises:
        InquiryError: missing size, bad quantity, or unavailable jersey
    """
    if not jersey.is_available:
        raise InquiryError('This jersey is currently out of stock', 409)

    size = (size or '').strip()
    if not size:
        raise InquiryError('Please select a size', 400, {'size': 'Select a size before contacting us'})
    if not jersey.offers_size(size):
        raise InquiryError(f'Size {size} is not available for this jersey', 400)

    quantity_result = validate_quantity(quantity)
    if not quantity_result.is_valid:
        raise InquiryError(quantity_result.error_message, 400, {'quantity': quantity_result.error_message})
    quantity = quantity_result.sanitized_value

    customer_name = _display_name(user)
    message = jersey_inquiry_message(jersey.name, jersey.team, size, quantity, customer_name)

    order = None
    if user is not None:
        profile = user.profile
        order = Order(
            inquiry_type=INQUIRY_SINGLE,
            user_id=user.id,
            customer_name=customer_name or '',
            customer_phone=(profile.phone_number if profile else None) or '',
            customer_email=user.email,
            delivery_address=(profile.delivery_address if profile else None) or '',
            delivery_city=(profile.city if profile else None) or '',
            delivery_state=(profile.state if profile else None) or '',
            total_amount=to_decimal(jersey.price_naira) * quantity,
            status='pending',
            whatsapp_status=WHATSAPP_CONTACTED,
            whatsapp_sent_at=datetime.utcnow(),
            items=[]
        )
        order.add_line(jersey, size, quantity)
        db.session.add(order)
        db.session.commit()
        logger.info(f"Inquiry {order.order_number} logged for user {user.id}")
        notify_new_order(order)

    observe_inquiry('jersey', whatsapp=True)
    return order, build_whatsapp_link(message, is_mobile)


def _default_customer_message(record):
    if isinstance(record, JerseyRequest):
        message = (
            f"Hi {record.full_name}, this is about your request for the "
            f"{record.team} {record.jersey_name} jersey (size {record.size})."
        )
        if record.admin_response:
            message += f"\n\n{record.admin_response}"
        return message
    greeting = f"Hi {record.customer_name}, " if record.customer_name else 'Hi, '
    return f"{greeting}this is about your inquiry {record.order_number}."


def customer_contact_link(record, message=None, is_mobile=False):
    """
    Link from the admin console to the customer's WhatsApp

    Args:
        record: JerseyRequest or Order
        message: Text to pre-fill (defaults to a status follow-up)

    Returns:
        WhatsApp deep link

    Raises:
        InquiryError: no phone number on the record
    """
    phone = record.phone_number if isinstance(record, JerseyRequest) else record.customer_phone
    if not phone:
        raise InquiryError('No phone number on record for this customer', 400)

    link = generate_whatsapp_link(phone, message or _default_customer_message(record), is_mobile,
                                  country_code=_country_code())

    now = datetime.utcnow()
    if isinstance(record, JerseyRequest):
        record.whatsapp_contacted = True
        record.last_contacted_at = now
    else:
        record.whatsapp_status = WHATSAPP_CONTACTED
        record.whatsapp_sent_at = now
    db.session.commit()
    return link
