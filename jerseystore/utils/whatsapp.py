"""
WhatsApp Hand-off Utilities

FLOW OVERVIEW
- format_whatsapp_number(phone) → digits-only international number.
- generate_whatsapp_link(number, message, is_mobile) → deep link with URL-encoded text.
- *_message(...) → templated inquiry texts (single jersey, bulk, custom request).
- is_business_open(hours, now) / estimated_response_time(hours, now) → contact hints.
- is_mobile_user_agent(ua) → pick the app scheme over the web link.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import quote

DEFAULT_COUNTRY_CODE = '234'

WEB_BASE_URL = 'https://wa.me'
MOBILE_BASE_URL = 'whatsapp://send'

DAY_NAMES = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

MOBILE_UA_PATTERN = re.compile(r'Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini', re.IGNORECASE)


def format_whatsapp_number(phone: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Strip non-digits and prefix the country code when it is missing"""
    cleaned = re.sub(r'\D', '', phone or '')
    return cleaned if cleaned.startswith(country_code) else f"{country_code}{cleaned}"


def generate_whatsapp_link(business_number: str, message: str, is_mobile: bool = False,
                           country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Build a WhatsApp deep link with a pre-filled message

    Args:
        business_number: Number to open the chat with
        message: Pre-filled message text
        is_mobile: Use the app scheme instead of the web link

    Returns:
        `{base}?phone={digits}&text={encoded}`
    """
    formatted_number = format_whatsapp_number(business_number, country_code)
    # Same reserved set as JavaScript's encodeURIComponent
    encoded_message = quote(message, safe="-_.!~*'()")
    base_url = MOBILE_BASE_URL if is_mobile else WEB_BASE_URL
    return f"{base_url}?phone={formatted_number}&text={encoded_message}"


def _greeting(customer_name: Optional[str]) -> str:
    return f"Hi, I'm {customer_name}. " if customer_name else 'Hi, '


def jersey_inquiry_message(jersey_name: str, team: str, size: str, quantity: int,
                           customer_name: Optional[str] = None) -> str:
    """Message for an inquiry about a catalog jersey"""
    return (
        f"{_greeting(customer_name)}I'm interested in purchasing:\n\n"
        f"*Jersey:* {jersey_name}\n"
        f"*Team:* {team}\n"
        f"*Size:* {size}\n"
        f"*Quantity:* {quantity}\n\n"
        "Could you please provide more details about availability and total price including delivery?"
    )


def bulk_inquiry_message(item_count: int) -> str:
    """Message for a multi-jersey order"""
    return (
        f"Hi, I'd like to inquire about a bulk order of {item_count} jerseys. "
        "Could you provide pricing and delivery information?"
    )


def cart_inquiry_message(order_number: str, lines: Iterable[Mapping[str, Any]], total: float,
                         customer_name: Optional[str] = None) -> str:
    """Bulk inquiry followed by the itemized cart and the inquiry number"""
    lines = list(lines)
    item_count = sum(int(line.get('quantity', 0)) for line in lines)
    opening = bulk_inquiry_message(item_count)
    if customer_name:
        opening = f"Hi, I'm {customer_name}. " + opening[len('Hi, '):]
    parts = [opening]
    parts.append('')
    for line in lines:
        parts.append(f"- {line.get('name')} ({line.get('team')}) size {line.get('size')} x{line.get('quantity')}")
    parts.append('')
    parts.append(f"*Subtotal:* ₦{total:,.2f}")
    parts.append(f"*Inquiry:* {order_number}")
    return '\n'.join(parts)


def custom_request_message(team: str, league: str, jersey_name: str, size: str,
                           customer_name: Optional[str] = None) -> str:
    """Message for a jersey that is not in the catalog"""
    return (
        f"{_greeting(customer_name)}I'm looking for a custom jersey:\n\n"
        f"*Team:* {team}\n"
        f"*League:* {league}\n"
        f"*Jersey:* {jersey_name}\n"
        f"*Size:* {size}\n\n"
        "Is this available? If so, what's the price and delivery time?"
    )


def is_business_open(business_hours: Optional[Dict[str, Dict[str, Any]]], now: Optional[datetime] = None) -> bool:
    """Check today's open/close window; times are "HH:MM" strings"""
    if not isinstance(business_hours, dict):
        return False
    now = now or datetime.now()
    today = business_hours.get(DAY_NAMES[now.weekday()])
    if not isinstance(today, dict) or today.get('closed'):
        return False

    opens, closes = today.get('open'), today.get('close')
    if not isinstance(opens, str) or not isinstance(closes, str):
        return False
    return opens <= now.strftime('%H:%M') <= closes


def estimated_response_time(business_hours: Optional[Dict[str, Dict[str, Any]]], now: Optional[datetime] = None) -> str:
    """Response-time hint shown next to the contact button"""
    return 'Within 30 minutes' if is_business_open(business_hours, now) else 'Within 24 hours'


def is_mobile_user_agent(user_agent: Optional[str]) -> bool:
    """Detect phones and tablets from the User-Agent header"""
    return bool(user_agent and MOBILE_UA_PATTERN.search(user_agent))
