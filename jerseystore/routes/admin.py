"""
Admin Routes

FLOW OVERVIEW
- All endpoints require an admin (profile flag or `admin` role).
- /admin/jerseys [GET, POST], /admin/jerseys/<id> [PUT, PATCH, DELETE]
  • Catalog CRUD.
- /admin/requests [GET], /admin/requests/<id> [PATCH] (alias /status [POST]), /admin/requests/<id>/contact [POST]
  • Jersey request follow-up: optional status move, response text, WhatsApp to customer.
- /admin/orders [GET], /admin/orders/<id> [PATCH] (alias /status [POST]), /admin/orders/<id>/contact [POST]
  • Inquiry follow-up: optional status move, notes, quoted price, priority.
- /admin/settings [GET, PUT]
  • Business number, hours, templates, notification email.
"""

from flask import Blueprint, jsonify, request, current_app, g
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ..models import db, Jersey, JerseyRequest, Order, OrderItem, AdminSettings
from ..models.jersey import DEFAULT_SIZES
from ..utils.validators import (
    validate_jersey_form, validate_email, validate_business_hours, sanitize_input
)
from ..utils.status_workflow import (
    StatusTransitionError, STATUSES, STATUS_PENDING, apply_status, allowed_transitions
)
from ..utils.inquiries import InquiryError, customer_contact_link
from ..utils.error_handlers import error_response
from ..utils.whatsapp import is_mobile_user_agent
from .auth import admin_required, request_data

admin_bp = Blueprint('admin', __name__)


def with_actions(record):
    """Serialize a request/order with the status moves the console offers"""
    data = record.to_dict()
    data['allowed_transitions'] = list(allowed_transitions(record.status))
    return data


def database_error(action, error):
    db.session.rollback()
    current_app.logger.error(f"Admin error {action}: {error}")
    return error_response(f'Failed to {action}.', 500)


def filter_by_status(query, model):
    status = request.args.get('status')
    if status and status != 'all':
        if status not in STATUSES:
            return None
        query = query.filter(model.status == status)
    return query


# -----------------------------
# Jerseys
# -----------------------------

@admin_bp.route('/jerseys', methods=['GET'])
@admin_required
def list_jerseys():
    jerseys = Jersey.query.order_by(Jersey.created_at.desc(), Jersey.id.desc()).all()
    return jsonify({'jerseys': [j.to_dict() for j in jerseys]})


@admin_bp.route('/jerseys', methods=['POST'])
@admin_required
def create_jersey():
    """Add a jersey to the catalog"""
    data = request_data()
    result = validate_jersey_form(data)
    if not result.is_valid:
        return error_response(result.error_message, 400, result.errors)

    fields = result.cleaned
    fields.setdefault('sizes', list(DEFAULT_SIZES))
    fields.setdefault('available_sizes', list(fields['sizes']))
    fields.setdefault('is_available', True)
    fields.setdefault('is_featured', False)

    try:
        jersey = Jersey(**fields)
        db.session.add(jersey)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('save jersey', e)

    current_app.logger.info(f"Jersey {jersey.id} added by {g.user.user_id}")
    return jsonify({'message': 'Jersey added successfully', 'jersey': jersey.to_dict()}), 201


@admin_bp.route('/jerseys/<int:jersey_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_jersey(jersey_id):
    """Edit a jersey; PATCH validates only the submitted fields"""
    jersey = db.session.get(Jersey, jersey_id)
    if jersey is None:
        return error_response('Jersey not found', 404)

    data = request_data()
    result = validate_jersey_form(data, partial=request.method == 'PATCH')
    if not result.is_valid:
        return error_response(result.error_message, 400, result.errors)

    fields = result.cleaned
    sizes = fields.get('sizes', jersey.sizes or [])
    available = fields.get('available_sizes', jersey.available_sizes or [])
    unknown = [s for s in available if s not in sizes]
    if unknown:
        return error_response(f"Available sizes must be listed in sizes: {', '.join(unknown)}", 400)

    try:
        for field_name, value in fields.items():
            setattr(jersey, field_name, value)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('save jersey', e)

    return jsonify({'message': 'Jersey updated successfully', 'jersey': jersey.to_dict()})


@admin_bp.route('/jerseys/<int:jersey_id>', methods=['DELETE'])
@admin_required
def delete_jersey(jersey_id):
    """Delete a jersey with its cart and wishlist rows"""
    jersey = db.session.get(Jersey, jersey_id)
    if jersey is None:
        return error_response('Jersey not found', 404)

    if OrderItem.query.filter_by(jersey_id=jersey.id).first() is not None:
        return error_response('Jersey is referenced by existing orders. Mark it unavailable instead.', 409)

    try:
        db.session.delete(jersey)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return error_response('Jersey is referenced by existing orders. Mark it unavailable instead.', 409)
    except SQLAlchemyError as e:
        return database_error('delete jersey', e)

    current_app.logger.info(f"Jersey {jersey_id} deleted by {g.user.user_id}")
    return jsonify({'message': 'Jersey has been successfully deleted.'})


# -----------------------------
# Jersey requests
# -----------------------------

@admin_bp.route('/requests', methods=['GET'])
@admin_required
def list_requests():
    query = filter_by_status(JerseyRequest.query, JerseyRequest)
    if query is None:
        return error_response('Unknown status filter', 400)
    requests_ = query.order_by(JerseyRequest.created_at.desc(), JerseyRequest.id.desc()).all()
    return jsonify({'requests': [with_actions(r) for r in requests_]})


def status_change(record, data, entity):
    """
    Apply the submitted status when it moves the record

    A missing status, or the record's current one, leaves the lifecycle
    alone so annotations can be saved on their own.

    Returns:
        Error response tuple, or None when the update may proceed
    """
    new_status = data.get('status')
    if new_status in (None, ''):
        return None
    if new_status not in STATUSES:
        return error_response(f"Status must be one of: {', '.join(STATUSES)}", 400)
    if new_status == (record.status or STATUS_PENDING):
        return None
    try:
        apply_status(record, new_status, entity=entity)
    except StatusTransitionError as e:
        return error_response(str(e), 409)
    return None


@admin_bp.route('/requests/<int:request_id>', methods=['PATCH'])
@admin_bp.route('/requests/<int:request_id>/status', methods=['POST'])
@admin_required
def update_request_status(request_id):
    """Update a jersey request: optional status move plus the admin response"""
    jersey_request = db.session.get(JerseyRequest, request_id)
    if jersey_request is None:
        return error_response('Request not found', 404)

    data = request_data()
    error = status_change(jersey_request, data, 'jersey_request')
    if error is not None:
        db.session.rollback()
        return error

    try:
        if data.get('admin_response') is not None:
            jersey_request.admin_response = sanitize_input(data.get('admin_response'), 2000) or None
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('update request', e)

    return jsonify({
        'message': 'Request updated successfully.',
        'request': with_actions(jersey_request)
    })


@admin_bp.route('/requests/<int:request_id>/contact', methods=['POST'])
@admin_required
def contact_requester(request_id):
    """WhatsApp link to the customer who made the request"""
    jersey_request = db.session.get(JerseyRequest, request_id)
    if jersey_request is None:
        return error_response('Request not found', 404)
    return _contact(jersey_request, 'request')


# -----------------------------
# Orders / inquiries
# -----------------------------

@admin_bp.route('/orders', methods=['GET'])
@admin_required
def list_orders():
    query = filter_by_status(Order.query, Order)
    if query is None:
        return error_response('Unknown status filter', 400)
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify({'orders': [with_actions(o) for o in orders]})


@admin_bp.route('/orders/<int:order_id>', methods=['PATCH'])
@admin_bp.route('/orders/<int:order_id>/status', methods=['POST'])
@admin_required
def update_order_status(order_id):
    """Update an inquiry: optional status move plus notes, quote and priority"""
    order = db.session.get(Order, order_id)
    if order is None:
        return error_response('Order not found', 404)

    data = request_data()

    quoted_price = None
    if data.get('quoted_price') not in (None, ''):
        try:
            quoted_price = round(float(data.get('quoted_price')), 2)
        except (TypeError, ValueError):
            return error_response('Quoted price must be a number', 400)
        if quoted_price < 0:
            return error_response('Quoted price cannot be negative', 400)

    error = status_change(order, data, 'order')
    if error is not None:
        db.session.rollback()
        return error

    try:
        if data.get('admin_notes') is not None:
            order.admin_notes = sanitize_input(data.get('admin_notes'), 2000) or None
        if quoted_price is not None:
            order.quoted_price = quoted_price
        if data.get('priority_level'):
            order.priority_level = sanitize_input(data.get('priority_level'), 20)
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('update order', e)

    return jsonify({'message': 'Order updated successfully.', 'order': with_actions(order)})


@admin_bp.route('/orders/<int:order_id>/contact', methods=['POST'])
@admin_required
def contact_customer(order_id):
    """WhatsApp link to the customer behind an inquiry"""
    order = db.session.get(Order, order_id)
    if order is None:
        return error_response('Order not found', 404)
    return _contact(order, 'order')


def _contact(record, label):
    data = request_data()
    message = sanitize_input(data.get('message'), 1000) or None
    try:
        link = customer_contact_link(record, message, is_mobile_user_agent(request.user_agent.string))
    except InquiryError as e:
        return error_response(e.message, e.status_code)
    except SQLAlchemyError as e:
        return database_error(f'contact {label} customer', e)
    return jsonify({'whatsapp_url': link, label: with_actions(record)})


# -----------------------------
# Settings
# -----------------------------

@admin_bp.route('/settings', methods=['GET'])
@admin_required
def get_settings():
    return jsonify({'settings': AdminSettings.get_current().to_dict()})


@admin_bp.route('/settings', methods=['PUT', 'PATCH'])
@admin_required
def update_settings():
    """Update store settings; only submitted keys change"""
    data = request_data()
    errors = {}

    number = data.get('whatsapp_business_number')
    if number is not None:
        digits = ''.join(ch for ch in str(number) if ch.isdigit())
        if not 7 <= len(digits) <= 15:
            errors['whatsapp_business_number'] = 'WhatsApp number must have 7 to 15 digits'

    hours = data.get('business_hours')
    if hours is not None:
        hours_error = validate_business_hours(hours)
        if hours_error:
            errors['business_hours'] = hours_error

    templates = data.get('message_templates')
    if templates is not None and not isinstance(templates, dict):
        errors['message_templates'] = 'Message templates must be an object'

    email = data.get('notification_email')
    if email:
        email_result = validate_email(email)
        if not email_result.is_valid:
            errors['notification_email'] = email_result.error_message
        else:
            email = email_result.sanitized_value

    prefs = data.get('notification_preferences')
    if prefs is not None and not isinstance(prefs, dict):
        errors['notification_preferences'] = 'Notification preferences must be an object'

    if errors:
        return error_response(next(iter(errors.values())), 400, errors)

    try:
        settings = AdminSettings.get_or_create()
        if number is not None:
            settings.whatsapp_business_number = digits
        if hours is not None:
            settings.business_hours = hours
        if templates is not None:
            settings.message_templates = templates
        if 'notification_email' in data:
            settings.notification_email = email or None
        if prefs is not None:
            settings.notification_preferences = prefs
        if 'auto_response_enabled' in data:
            settings.auto_response_enabled = bool(data.get('auto_response_enabled'))
        db.session.commit()
    except SQLAlchemyError as e:
        return database_error('save settings', e)

    return jsonify({'message': 'Settings saved.', 'settings': settings.to_dict()})
