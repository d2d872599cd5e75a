"""
Cart Utilities

FLOW OVERVIEW
- get_cart_items(user): joined cart rows, newest first.
- add_to_cart(user, jersey_id, size, quantity)
  • Lookup by (user, jersey, size) → increment existing row, else insert.
  • Unavailable jerseys and sizes not on offer are refused.
- update_quantity / remove_item: owner-scoped single-row writes.
- cart_summary(items): line totals, subtotal, total, checkout readiness.
- cart_count(user): total quantity for the navigation badge.
- checkout(user, details, is_mobile)
  • Snapshot the cart into an itemized Order inquiry, clear the cart,
    return the order and a bulk-inquiry WhatsApp link. Stock is not decremented.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func

from ..models import db, CartItem, Order
from ..models.order import INQUIRY_CART, WHATSAPP_CONTACTED
from ..models.utils import money
from .validators import validate_quantity
from .catalog import get_jersey
from .prom_metrics import observe_cart_mutation, observe_inquiry
from .whatsapp import cart_inquiry_message

SHIPPING_NOTE = 'Calculated at checkout'

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Cart operation refused; carries the HTTP status to report"""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def get_cart_items(user):
    """Cart rows for a user, newest first"""
    return (
        CartItem.query
        .filter_by(user_id=user.id)
        .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        .all()
    )


def _get_owned_item(user, item_id):
    item = CartItem.query.filter_by(id=item_id, user_id=user.id).first()
    if item is None:
        raise CartError('Cart item not found', 404)
    return item


def add_to_cart(user, jersey_id, size, quantity=1):
    """
    Add a jersey/size to the user's cart, merging with an existing line

    Returns:
        Tuple of (cart_item, created)

    Raises:
        CartError: invalid quantity, unknown jersey, unavailable jersey or size
    """
    quantity_result = validate_quantity(quantity)
    if not quantity_result.is_valid:
        raise CartError(quantity_result.error_message)
    quantity = quantity_result.sanitized_value

    jersey = get_jersey(jersey_id)
    if jersey is None:
        raise CartError('Jersey not found', 404)

    if not jersey.is_available:
        raise CartError('This jersey is currently out of stock', 409)

    size = (size or '').strip()
    if not size:
        raise CartError('Please select a size')
    if not jersey.offers_size(size):
        raise CartError(f'Size {size} is not available for this jersey')

    existing = CartItem.query.filter_by(user_id=user.id, jersey_id=jersey.id, size=size).first()
    if existing:
        existing.quantity += quantity
        item, created = existing, False
    else:
        item = CartItem(user_id=user.id, jersey_id=jersey.id, size=size, quantity=quantity)
        db.session.add(item)
        created = True

    db.session.commit()
    observe_cart_mutation('add' if created else 'merge')
    logger.debug(f"Cart {'insert' if created else 'merge'}: user={user.id} jersey={jersey.id} size={size} qty={item.quantity}")
    return item, created


def update_quantity(user, item_id, quantity):
    """Set the quantity of one cart line; quantities below one are refused"""
    quantity_result = validate_quantity(quantity)
    if not quantity_result.is_valid:
        raise CartError(quantity_result.error_message)

    item = _get_owned_item(user, item_id)
    item.quantity = quantity_result.sanitized_value
    db.session.commit()
    observe_cart_mutation('update')
    return item


def remove_item(user, item_id):
    """Delete one cart line"""
    item = _get_owned_item(user, item_id)
    db.session.delete(item)
    db.session.commit()
    observe_cart_mutation('remove')


def cart_summary(items):
    """
    Totals for a list of cart items

    Returns:
        dict with serialized items, item_count, subtotal, total, shipping note,
        can_checkout and the ids of unavailable lines
    """
    subtotal = sum((item.line_total for item in items), Decimal('0'))
    unavailable = [item.id for item in items if not item.jersey.is_available]
    return {
        'items': [item.to_dict() for item in items],
        'line_count': len(items),
        'item_count': sum(item.quantity for item in items),
        'subtotal': money(subtotal),
        'shipping': SHIPPING_NOTE,
        'total': money(subtotal),
        'can_checkout': bool(items) and not unavailable,
        'unavailable_items': unavailable
    }


def cart_count(user):
    """Total quantity across the user's cart"""
    total = (
        db.session.query(func.coalesce(func.sum(CartItem.quantity), 0))
        .filter(CartItem.user_id == user.id)
        .scalar()
    )
    return int(total or 0)


def prefill_checkout_details(user, data):
    """Fill missing customer/delivery fields from the user's profile"""
    details = dict(data or {})
    profile = user.profile
    defaults = {
        'customer_name': profile.full_name if profile else None,
        'customer_phone': profile.phone_number if profile else None,
        'customer_email': user.email,
        'delivery_address': profile.delivery_address if profile else None,
        'delivery_city': profile.city if profile else None,
        'delivery_state': profile.state if profile else None,
    }
    for key, value in defaults.items():
        if not details.get(key) and value:
            details[key] = value
    return details


def checkout(user, details, is_mobile=False):
    """
    Turn the cart into an itemized inquiry and hand off to WhatsApp

    Args:
        user: Cart owner
        details: Validated customer/delivery fields (see validate_checkout_details)
        is_mobile: Pick the app link scheme

    Returns:
        Tuple of (order, whatsapp_url)

    Raises:
        CartError: empty cart or unavailable items
    """
    from .inquiries import build_whatsapp_link, notify_new_order

    items = get_cart_items(user)
    if not items:
        raise CartError('Your cart is empty')
    if any(not item.jersey.is_available for item in items):
        raise CartError('Remove out-of-stock items to continue', 409)

    order = Order(
        inquiry_type=INQUIRY_CART,
        user_id=user.id,
        customer_name=details.get('customer_name') or '',
        customer_phone=details.get('customer_phone') or '',
        customer_email=details.get('customer_email'),
        delivery_address=details.get('delivery_address') or '',
        delivery_city=details.get('delivery_city') or '',
        delivery_state=details.get('delivery_state') or '',
        notes=details.get('notes'),
        status='pending',
        whatsapp_status=WHATSAPP_CONTACTED,
        whatsapp_sent_at=datetime.utcnow(),
        items=[]
    )

    total = Decimal('0')
    for item in items:
        order.add_line(item.jersey, item.size, item.quantity)
        total += item.line_total
    order.total_amount = total

    db.session.add(order)
    for item in items:
        db.session.delete(item)
    db.session.commit()

    observe_cart_mutation('checkout')
    observe_inquiry('cart', whatsapp=True)
    logger.info(f"Checkout {order.order_number}: user={user.id} lines={len(items)} total={total}")

    message = cart_inquiry_message(order.order_number, order.items, float(total), order.customer_name or None)
    notify_new_order(order)
    return order, build_whatsapp_link(message, is_mobile)
