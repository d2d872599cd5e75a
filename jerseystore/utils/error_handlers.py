"""
Error Handlers

This module contains error handling utilities and functions.
"""

from flask import jsonify, render_template, request

JSON_PREFIXES = ('/api', '/admin', '/auth')


def wants_json():
    """JSON for the API blueprints, HTML pages everywhere else"""
    return request.path.startswith(JSON_PREFIXES) or request.is_json


def render_error_page(title, message, status_code):
    """Render a user-friendly error page"""
    return render_template('error.html', title=title, message=message), status_code


def error_response(message, status_code, errors=None):
    """JSON error payload shown to the customer as a transient notification"""
    payload = {'error': message}
    if errors:
        payload['errors'] = errors
    return jsonify(payload), status_code


def register_error_handlers(app):
    """Register error handlers with the Flask app"""

    @app.errorhandler(404)
    def not_found(error):
        if wants_json():
            return error_response('Not found', 404)
        return render_error_page('Page Not Found',
            'The page you are looking for does not exist.', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', 405)

    @app.errorhandler(500)
    def internal_error(error):
        from ..models import db
        db.session.rollback()
        if wants_json():
            return error_response('Something went wrong on our end. Please try again later.', 500)
        return render_error_page('Internal Server Error',
            'Something went wrong on our end. Please try again later.', 500)
