"""
Notification Utilities

Admin email notifications sent through Flask-Mail. A failed send is logged
and reported as False; it never blocks the customer's submission.
"""

import logging
from flask import current_app
from flask_mail import Mail, Message

mail = Mail()

logger = logging.getLogger(__name__)


def send_new_request_notification(settings, jersey_request):
    """Email the store's notification address about a new jersey request"""
    if not settings.wants_notification('new_request'):
        return False

    try:
        msg = Message(
            f'New jersey request: {jersey_request.team} - {jersey_request.jersey_name}',
            recipients=[settings.notification_email],
            sender=current_app.config.get('MAIL_DEFAULT_SENDER'),
            body=(
                f"Customer: {jersey_request.full_name}\n"
                f"Email: {jersey_request.email}\n"
                f"Phone: {jersey_request.phone_number}\n\n"
                f"Team: {jersey_request.team}\n"
                f"League: {jersey_request.league or '-'}\n"
                f"Jersey: {jersey_request.jersey_name}\n"
                f"Size: {jersey_request.size}\n\n"
                f"Notes: {jersey_request.additional_notes or '-'}\n"
                f"Contacted via WhatsApp: {'yes' if jersey_request.whatsapp_contacted else 'no'}"
            )
        )
        mail.send(msg)
        return True

    except Exception as e:
        logger.error(f"Failed to send request notification to {settings.notification_email}: {e}")
        return False


def send_new_order_notification(settings, order):
    """Email the store's notification address about a new inquiry"""
    if not settings.wants_notification('new_order'):
        return False

    try:
        lines = '\n'.join(
            f"- {item.get('name')} ({item.get('team')}) size {item.get('size')} x{item.get('quantity')}"
            for item in (order.items or [])
        )
        msg = Message(
            f'New inquiry {order.order_number}',
            recipients=[settings.notification_email],
            sender=current_app.config.get('MAIL_DEFAULT_SENDER'),
            body=(
                f"Customer: {order.customer_name}\n"
                f"Email: {order.customer_email or '-'}\n"
                f"Phone: {order.customer_phone or '-'}\n\n"
                f"{lines}\n\n"
                f"Total: {float(order.total_amount or 0):,.2f}"
            )
        )
        mail.send(msg)
        return True

    except Exception as e:
        logger.error(f"Failed to send order notification for {order.order_number}: {e}")
        return False
