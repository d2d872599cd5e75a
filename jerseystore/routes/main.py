"""
Main Routes

FLOW OVERVIEW
- / [GET]
  • Landing page with featured jerseys and the WhatsApp contact link.
- /health [GET]
  • JSON health check.
"""

from flask import Blueprint, render_template, jsonify, request, current_app
from datetime import datetime
from ..models import AdminSettings
from ..utils.catalog import featured_jerseys
from ..utils.inquiries import build_whatsapp_link
from ..utils.whatsapp import estimated_response_time, is_mobile_user_agent

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def home():
    """Home page route"""
    settings = AdminSettings.get_current()
    return render_template(
        'index.html',
        jerseys=[j.to_dict() for j in featured_jerseys(limit=current_app.config.get('FEATURED_JERSEY_LIMIT', 8))],
        whatsapp_url=build_whatsapp_link(settings.greeting(), is_mobile_user_agent(request.user_agent.string)),
        response_time=estimated_response_time(settings.business_hours)
    )


@main_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()})
