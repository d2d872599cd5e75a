"""
API Routes

Storefront endpoints used by the customer-facing pages. Failures are logged
and returned as `{"error": ...}` payloads for the client to show as a
transient notification; nothing is retried.

FLOW OVERVIEW
- /api/jerseys [GET], /api/jerseys/<id> [GET]
  • Catalog read with search/league/team/availability filters and facets.
- /api/jerseys/<id>/inquiry [POST]
  • WhatsApp inquiry for a catalog jersey; logged as an order when signed in.
- /api/cart [GET, POST], /api/cart/<item_id> [PATCH, DELETE], /api/cart/count [GET]
  • Cart aggregator: merge by (user, jersey, size), quantities, totals.
- /api/cart/checkout [POST]
  • Cart → itemized inquiry → bulk WhatsApp link.
- /api/requests [GET, POST]
  • Request-a-jersey form and the user's own requests.
- /api/profile [GET, PATCH], /api/profile/orders [GET]
- /api/wishlist [GET, POST], /api/wishlist/<jersey_id> [DELETE]
- /api/contact [GET]
  • Floating contact button: greeting link, business hours, response time.
- /api/status [GET], /api/metrics [GET]
"""

import os
from flask import Blueprint, jsonify, request, current_app, g, Response
from sqlalchemy.exc import SQLAlchemyError
from ..models import db, Order, JerseyRequest, Wishlist, AdminSettings
from ..utils.auth_utils import get_current_user
from ..utils.catalog import list_jerseys, get_jersey, filter_jerseys, catalog_facets, ALL
from ..utils.cart import (
    CartError, get_cart_items, add_to_cart, update_quantity, remove_item,
    cart_summary, cart_count, prefill_checkout_details, checkout
)
from ..utils.inquiries import (
    InquiryError, submit_jersey_request, create_jersey_inquiry, build_whatsapp_link
)
from ..utils.validators import validate_profile_update, validate_checkout_details
from ..utils.whatsapp import is_mobile_user_agent, is_business_open, estimated_response_time
from ..utils.error_handlers import error_response
from ..utils.prom_metrics import metrics_latest, CONTENT_TYPE_LATEST
from .auth import login_required, request_data

api_bp = Blueprint('api', __name__)


def client_is_mobile(data=None):
    """Explicit `mobile` flag wins over User-Agent sniffing"""
    if data and 'mobile' in data:
        return str(data.get('mobile')).lower() in ('1', 'true', 'yes')
    return is_mobile_user_agent(request.user_agent.string)


def database_error(action, error):
    db.session.rollback()
    current_app.logger.error(f"Error {action}: {error}")
    return error_response(f'Failed to {action}. Please try again.', 500)


@api_bp.route('/status')
def api_status():
    """API status endpoint"""
    return jsonify({
        'status': 'operational',
        'version': '1.0.0',
        'environment': os.getenv('FLASK_ENV', 'development')
    })


@api_bp.route('/metrics')
def metrics():
    """Prometheus metrics endpoint"""
    return Response(metrics_latest(), mimetype=CONTENT_TYPE_LATEST)


# -----------------------------
# Catalog
# -----------------------------

@api_bp.route('/jerseys')
def jerseys():
    """Catalog listing with client-side style filters"""
    all_jerseys = list_jerseys()
    if request.args.get('featured', '').lower() in ('1', 'true', 'yes'):
        all_jerseys = [j for j in all_jerseys if j.is_featured]

    filtered = filter_jerseys(
        all_jerseys,
        search=request.args.get('search'),
        league=request.args.get('league', ALL),
        team=request.args.get('team', ALL),
        availability=request.args.get('availability', ALL)
    )
    return jsonify({
        'jerseys': [j.to_dict() for j in filtered],
        'count': len(filtered),
        'facets': catalog_facets(all_jerseys)
    })


@api_bp.route('/jerseys/<int:jersey_id>')
def jersey_detail(jersey_id):
    """Single jersey"""
    jersey = get_jersey(jersey_id)
    if jersey is None:
        return error_response('Jersey not found', 404)
    return jsonify({'jersey': jersey.to_dict()})


@api_bp.route('/jerseys/<int:jersey_id>/inquiry', methods=['POST'])
def jersey_inquiry(jersey_id):
    """WhatsApp inquiry about a catalog jersey"""
    jersey = get_jersey(jersey_id)
    if jersey is None:
        return error_response('Jersey not found', 404)

    data = request_data()
    try:
        order, whatsapp_url = create_jersey_inquiry(
            jersey,
            data.get('size'),
            data.get('quantity', 1),
            user=get_current_user(),
            is_mobile=client_is_mobile(data)
        )
    except InquiryError as e:
        return error_response(e.message, e.status_code, e.errors)
    except SQLAlchemyError as e:
        return database_error('open WhatsApp', e)

    return jsonify({
        'message': "We'll respond to your inquiry shortly!",
        'whatsapp_url': whatsapp_url,
        'order': order.to_dict(include_customer=False) if order else None
    }), 201 if order else 200


# -----------------------------
# Cart
# -----------------------------

@api_bp.route('/cart', methods=['GET'])
@login_required
def view_cart():
    """Cart lines with totals"""
    try:
        return jsonify(cart_summary(get_cart_items(g.user)))
    except SQLAlchemyError as e:
        return database_error('load cart items', e)


@api_bp.route('/cart', methods=['POST'])
@login_required
def add_cart_item():
    """Add to cart; repeated jersey/size increments quantity"""
    data = request_data()
    try:
        item, created = add_to_cart(g.user, data.get('jersey_id'), data.get('size'), data.get('quantity', 1))
    except CartError as e:
        return error_response(e.message, e.status_code)
    except SQLAlchemyError as e:
        return database_error('add to cart', e)

    return jsonify({
        'message': 'Added to cart' if created else 'Cart quantity updated',
        'item': item.to_dict(),
        'cart_count': cart_count(g.user)
    }), 201 if created else 200


@api_bp.route('/cart/<int:item_id>', methods=['PATCH'])
@login_required
def update_cart_item(item_id):
    """Change quantity of one line"""
    data = request_data()
    try:
        item = update_quantity(g.user, item_id, data.get('quantity'))
    except CartError as e:
        return error_response(e.message, e.status_code)
    except SQLAlchemyError as e:
        return database_error('update quantity', e)

    return jsonify({'item': item.to_dict(), 'cart_count': cart_count(g.user)})


@api_bp.route('/cart/<int:item_id>', methods=['DELETE'])
@login_required
def delete_cart_item(item_id):
    """Remove one line"""
    try:
        remove_item(g.user, item_id)
    except CartError as e:
        return error_response(e.message, e.status_code)
    except SQLAlchemyError as e:
        return database_error('remove item', e)

    return jsonify({'message': 'Item removed from cart.', 'cart_count': cart_count(g.user)})


@api_bp.route('/cart/count')
@login_required
def cart_badge():
    """Quantity badge for the navigation bar"""
    return jsonify({'count': cart_count(g.user)})


@api_bp.route('/cart/checkout', methods=['POST'])
@login_required
def cart_checkout():
    """Send the whole cart as one inquiry"""
    data = request_data()
    details = validate_checkout_details(prefill_checkout_details(g.user, data))
    if not details.is_valid:
        return error_response(details.error_message, 400, details.errors)

    try:
        order, whatsapp_url = checkout(g.user, details.cleaned, is_mobile=client_is_mobile(data))
    except CartError as e:
        return error_response(e.message, e.status_code)
    except SQLAlchemyError as e:
        return database_error('submit your order', e)

    return jsonify({
        'message': 'Opening WhatsApp to complete your order...',
        'order': order.to_dict(),
        'whatsapp_url': whatsapp_url
    }), 201


# -----------------------------
# Jersey requests
# -----------------------------

@api_bp.route('/requests', methods=['POST'])
def create_request():
    """Request-a-jersey form submission"""
    data = request_data()
    contact_via_whatsapp = str(data.get('contact_via_whatsapp', '')).lower() in ('1', 'true', 'yes')
    try:
        jersey_request, whatsapp_url = submit_jersey_request(
            data,
            user=get_current_user(),
            contact_via_whatsapp=contact_via_whatsapp,
            is_mobile=client_is_mobile(data)
        )
    except InquiryError as e:
        return error_response(e.message, e.status_code, e.errors)
    except SQLAlchemyError as e:
        return database_error('submit request', e)

    message = ('Opening WhatsApp to complete your request...' if contact_via_whatsapp
               else "We'll get back to you soon via email or phone.")
    return jsonify({
        'message': message,
        'request': jersey_request.to_dict(),
        'whatsapp_url': whatsapp_url
    }), 201


@api_bp.route('/requests', methods=['GET'])
@login_required
def my_requests():
    """Requests submitted by the signed-in user"""
    requests_ = (
        JerseyRequest.query
        .filter_by(user_id=g.user.id)
        .order_by(JerseyRequest.created_at.desc(), JerseyRequest.id.desc())
        .all()
    )
    return jsonify({'requests': [r.to_dict() for r in requests_]})


# -----------------------------
# Profile
# -----------------------------

@api_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    """Own profile"""
    return jsonify({'profile': g.user.profile.to_dict()})


@api_bp.route('/profile', methods=['PATCH', 'PUT'])
@login_required
def update_profile():
    """Update own contact and delivery details"""
    result = validate_profile_update(request_data())
    if not result.is_valid:
        return error_response(result.error_message, 400, result.errors)

    profile = g.user.profile
    try:
        for field_name, value in result.cleaned.items():
            setattr(profile, field_name, value)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('update profile', e)

    return jsonify({
        'message': 'Your profile has been successfully updated.',
        'profile': profile.to_dict()
    })


@api_bp.route('/profile/orders')
@login_required
def my_orders():
    """Inquiry history"""
    orders = (
        Order.query
        .filter_by(user_id=g.user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return jsonify({'orders': [o.to_dict(include_customer=False) for o in orders]})


# -----------------------------
# Wishlist
# -----------------------------

@api_bp.route('/wishlist', methods=['GET'])
@login_required
def wishlist():
    entries = Wishlist.query.filter_by(user_id=g.user.id).order_by(Wishlist.created_at.desc()).all()
    return jsonify({'wishlist': [e.to_dict() for e in entries]})


@api_bp.route('/wishlist', methods=['POST'])
@login_required
def add_to_wishlist():
    """Save a jersey; saving twice is a no-op"""
    jersey = get_jersey(request_data().get('jersey_id'))
    if jersey is None:
        return error_response('Jersey not found', 404)

    existing = Wishlist.query.filter_by(user_id=g.user.id, jersey_id=jersey.id).first()
    if existing:
        return jsonify({'entry': existing.to_dict()})

    try:
        entry = Wishlist(user_id=g.user.id, jersey_id=jersey.id)
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('update wishlist', e)

    return jsonify({'entry': entry.to_dict()}), 201


@api_bp.route('/wishlist/<int:jersey_id>', methods=['DELETE'])
@login_required
def remove_from_wishlist(jersey_id):
    entry = Wishlist.query.filter_by(user_id=g.user.id, jersey_id=jersey_id).first()
    if entry is None:
        return error_response('Jersey is not in your wishlist', 404)

    try:
        db.session.delete(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('update wishlist', e)

    return jsonify({'message': 'Removed from wishlist.'})


# -----------------------------
# Contact
# -----------------------------

@api_bp.route('/contact')
def contact():
    """Floating WhatsApp button data"""
    settings = AdminSettings.get_current()
    return jsonify({
        'whatsapp_url': build_whatsapp_link(settings.greeting(), client_is_mobile(request.args)),
        'is_open': is_business_open(settings.business_hours),
        'estimated_response_time': estimated_response_time(settings.business_hours),
        'business_hours': settings.business_hours or {}
    })
