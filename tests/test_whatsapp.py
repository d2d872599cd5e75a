"""
Tests for the WhatsApp hand-off helpers

Number formatting, deep-link construction, message templates and the
business-hours hints shown next to the contact button.
"""

import pytest
from datetime import datetime
from urllib.parse import unquote

from jerseystore.models.admin_settings import DEFAULT_BUSINESS_HOURS
from jerseystore.utils.whatsapp import (
    format_whatsapp_number, generate_whatsapp_link, jersey_inquiry_message,
    bulk_inquiry_message, cart_inquiry_message, custom_request_message,
    is_business_open, estimated_response_time, is_mobile_user_agent
)

pytestmark = pytest.mark.timeout(30)

MONDAY_MORNING = datetime(2024, 1, 1, 10, 30)
MONDAY_NIGHT = datetime(2024, 1, 1, 21, 0)
SUNDAY_NOON = datetime(2024, 1, 7, 12, 0)


class TestNumberFormatting:

    def test_strips_non_digits(self):
        assert format_whatsapp_number('+234 801-234-5678') == '2348012345678'

    def test_prefixes_missing_country_code(self):
        assert format_whatsapp_number('8012345678') == '2348012345678'

    def test_local_leading_zero_is_kept(self):
        assert format_whatsapp_number('08031234567') == '23408031234567'

    def test_custom_country_code(self):
        assert format_whatsapp_number('7700900123', country_code='44') == '447700900123'


class TestLinkGeneration:

    def test_desktop_link(self):
        link = generate_whatsapp_link('2348012345678', 'Hi there!')
        assert link == 'https://wa.me?phone=2348012345678&text=Hi%20there!'

    def test_mobile_link(self):
        link = generate_whatsapp_link('2348012345678', 'Hi', is_mobile=True)
        assert link.startswith('whatsapp://send?phone=2348012345678&text=')

    def test_message_is_url_encoded(self):
        message = "*Size:* M\nPrice & delivery? ₦25,000"
        link = generate_whatsapp_link('08012345678', message)
        text = link.split('&text=', 1)[1]
        assert '%0A' in text
        assert '%26' in text
        assert ' ' not in text
        assert unquote(text) == message

    def test_unreserved_characters_are_not_encoded(self):
        link = generate_whatsapp_link('2348012345678', "it's (really) *great*!~")
        assert link.endswith("&text=it's%20(really)%20*great*!~")


class TestMessages:

    def test_jersey_inquiry_with_name(self):
        message = jersey_inquiry_message('Home Kit', 'Arsenal', 'M', 2, 'Ada')
        assert message.startswith("Hi, I'm Ada. I'm interested in purchasing:")
        assert '*Jersey:* Home Kit' in message
        assert '*Team:* Arsenal' in message
        assert '*Size:* M' in message
        assert '*Quantity:* 2' in message

    def test_jersey_inquiry_without_name(self):
        message = jersey_inquiry_message('Home Kit', 'Arsenal', 'L', 1)
        assert message.startswith("Hi, I'm interested in purchasing:")

    def test_bulk_inquiry(self):
        assert 'bulk order of 5 jerseys' in bulk_inquiry_message(5)

    def test_cart_inquiry_lists_lines(self):
        lines = [
            {'name': 'Home Kit', 'team': 'Arsenal', 'size': 'M', 'quantity': 2},
            {'name': 'Away Kit', 'team': 'Chelsea', 'size': 'L', 'quantity': 1},
        ]
        message = cart_inquiry_message('INQ-1700000000000', lines, 72000.0, 'Ada')
        assert message.startswith("Hi, I'm Ada.")
        assert 'bulk order of 3 jerseys' in message
        assert '- Home Kit (Arsenal) size M x2' in message
        assert '- Away Kit (Chelsea) size L x1' in message
        assert '₦72,000.00' in message
        assert message.endswith('*Inquiry:* INQ-1700000000000')

    def test_cart_inquiry_greets_once(self):
        lines = [{'name': 'Home Kit', 'team': 'Arsenal', 'size': 'M', 'quantity': 1}]
        message = cart_inquiry_message('INQ-1700000000000', lines, 25000.0, 'Ada')
        assert message.startswith("Hi, I'm Ada. I'd like to inquire about a bulk order of 1 jerseys.")
        assert message.count('Hi,') == 1

        anonymous = cart_inquiry_message('INQ-1700000000000', lines, 25000.0)
        assert anonymous.startswith("Hi, I'd like to inquire")

    def test_custom_request(self):
        message = custom_request_message('Barcelona', 'La Liga', 'Retro 1999', 'XL', 'Tunde')
        assert "I'm Tunde" in message
        assert '*Team:* Barcelona' in message
        assert '*League:* La Liga' in message
        assert '*Jersey:* Retro 1999' in message
        assert '*Size:* XL' in message


class TestBusinessHours:

    def test_open_during_hours(self):
        assert is_business_open(DEFAULT_BUSINESS_HOURS, MONDAY_MORNING)
        assert estimated_response_time(DEFAULT_BUSINESS_HOURS, MONDAY_MORNING) == 'Within 30 minutes'

    def test_closed_after_hours(self):
        assert not is_business_open(DEFAULT_BUSINESS_HOURS, MONDAY_NIGHT)
        assert estimated_response_time(DEFAULT_BUSINESS_HOURS, MONDAY_NIGHT) == 'Within 24 hours'

    def test_closed_day(self):
        assert not is_business_open(DEFAULT_BUSINESS_HOURS, SUNDAY_NOON)

    def test_no_hours_configured(self):
        assert not is_business_open({}, MONDAY_MORNING)
        assert not is_business_open(None, MONDAY_MORNING)

    @pytest.mark.parametrize('hours', [
        {'monday': 'closed'},
        {'monday': {'open': 9, 'close': 18}},
        {'monday': {'open': '09:00'}},
        ['monday'],
    ])
    def test_malformed_hours_read_as_closed(self, hours):
        assert not is_business_open(hours, MONDAY_MORNING)
        assert estimated_response_time(hours, MONDAY_MORNING) == 'Within 24 hours'


@pytest.mark.parametrize('user_agent,expected', [
    ('Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)', True),
    ('Mozilla/5.0 (Linux; Android 14; Pixel 8)', True),
    ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0', False),
    ('', False),
    (None, False),
])
def test_mobile_detection(user_agent, expected):
    assert is_mobile_user_agent(user_agent) is expected
