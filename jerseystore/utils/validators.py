"""
Input Validation Utilities

FLOW OVERVIEW
- validate_email(email)
  • Syntax checks; returns sanitized lowercased value.
- validate_password(password)
  • Enforce 6-100 character length.
- validate_quantity(value)
  • Positive integer cart/inquiry quantity.
- validate_form(data, fields)
  • Trim, enforce required/length rules per field, collect per-field errors.
- validate_registration / validate_jersey_request / validate_profile_update /
  validate_checkout_details / validate_jersey_form / validate_business_hours
  • Form schemas used by the routes. Any error blocks the write before the
    database is touched.
- sanitize_input(input, max_length)
  • Trim, bound length, normalize, and remove null bytes.
"""

import re
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from ..models.utils import parse_size_list
from .whatsapp import DAY_NAMES


@dataclass
class ValidationResult:
    """Result of validation operation"""
    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[Any] = None


@dataclass
class FormValidationResult:
    """Result of validating a whole form"""
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)
    cleaned: Dict[str, Any] = field(default_factory=dict)

    @property
    def error_message(self) -> Optional[str]:
        """First error, for single-line notifications"""
        if not self.errors:
            return None
        return next(iter(self.errors.values()))


@dataclass(frozen=True)
class FieldRule:
    """Trimmed string field with required flag and length bounds"""
    name: str
    label: str
    required: bool = True
    max_length: int = 255
    is_email: bool = False


class InputValidator:
    """Input validation shared by the store forms"""

    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9.!#$%&\'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$'
    )

    XSS_PATTERNS = [
        r'<script[^>]*>.*?</script>',
        r'javascript:',
        r'<iframe[^>]*>',
        r'data:text/html',
        r'vbscript:',
    ]

    @classmethod
    def validate_email(cls, email: str) -> ValidationResult:
        """
        Validate email address

        Args:
            email: Email address to validate

        Returns:
            ValidationResult with validation status and sanitized value
        """
        if not email or not isinstance(email, str):
            return ValidationResult(False, "Invalid email address")

        email = email.strip()
        if email == "":
            return ValidationResult(False, "Invalid email address")

        if len(email) > 255:
            return ValidationResult(False, "Email must be less than 255 characters")

        if not cls.EMAIL_PATTERN.match(email) or '.' not in email.split('@')[-1]:
            return ValidationResult(False, "Invalid email address")

        local_part, domain = email.split('@')
        if local_part.startswith('.') or local_part.endswith('.') or '..' in local_part:
            return ValidationResult(False, "Invalid email address")
        if '..' in domain:
            return ValidationResult(False, "Invalid email address")

        return ValidationResult(True, sanitized_value=email.lower())

    @classmethod
    def validate_password(cls, password: str) -> ValidationResult:
        """Validate password length requirements"""
        if not password or not isinstance(password, str):
            return ValidationResult(False, "Password must be at least 6 characters")
        if len(password) < 6:
            return ValidationResult(False, "Password must be at least 6 characters")
        if len(password) > 100:
            return ValidationResult(False, "Password must be less than 100 characters")
        return ValidationResult(True, sanitized_value=password)

    @classmethod
    def validate_quantity(cls, value: Any) -> ValidationResult:
        """Quantities are whole numbers of at least one"""
        if isinstance(value, bool):
            return ValidationResult(False, "Quantity must be a whole number")
        try:
            quantity = int(value)
        except (TypeError, ValueError):
            return ValidationResult(False, "Quantity must be a whole number")
        if isinstance(value, float) and not value.is_integer():
            return ValidationResult(False, "Quantity must be a whole number")
        if quantity < 1:
            return ValidationResult(False, "Quantity must be at least 1")
        return ValidationResult(True, sanitized_value=quantity)

    @classmethod
    def validate_form(cls, data: Optional[Dict[str, Any]], rules: List[FieldRule],
                      partial: bool = False) -> FormValidationResult:
        """
        Validate a flat form against field rules

        Args:
            data: Submitted form data
            rules: Field rules to apply
            partial: Only validate fields present in data (PATCH semantics)

        Returns:
            FormValidationResult with per-field errors and cleaned values
        """
        data = data or {}
        errors: Dict[str, str] = {}
        cleaned: Dict[str, Any] = {}

        for rule in rules:
            if partial and rule.name not in data:
                continue

            raw = data.get(rule.name)
            value = cls.sanitize_input(raw, max_length=None) if raw is not None else ''

            if value == '':
                if rule.required:
                    errors[rule.name] = f"{rule.label} is required"
                else:
                    cleaned[rule.name] = None
                continue

            if len(value) > rule.max_length:
                errors[rule.name] = f"{rule.label} must be less than {rule.max_length} characters"
                continue

            if rule.is_email:
                email_result = cls.validate_email(value)
                if not email_result.is_valid:
                    errors[rule.name] = email_result.error_message
                    continue
                value = email_result.sanitized_value
            elif cls._contains_xss(value):
                errors[rule.name] = f"{rule.label} contains invalid characters"
                continue

            cleaned[rule.name] = value

        return FormValidationResult(not errors, errors, cleaned)

    @classmethod
    def sanitize_input(cls, input_string: Any, max_length: Optional[int] = 1000) -> str:
        """
        Sanitize user input

        Args:
            input_string: Input string to sanitize
            max_length: Maximum allowed length (None keeps the full value)

        Returns:
            Sanitized string
        """
        if input_string is None:
            return ""

        sanitized = str(input_string).strip()

        if max_length is not None and len(sanitized) > max_length:
            sanitized = sanitized[:max_length]

        sanitized = sanitized.replace('\x00', '')
        sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

        return sanitized

    @classmethod
    def _contains_xss(cls, text: str) -> bool:
        """Check if text contains XSS patterns"""
        for pattern in cls.XSS_PATTERNS:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False


REGISTRATION_FIELDS = [
    FieldRule('email', 'Email', max_length=255, is_email=True),
    FieldRule('full_name', 'Full name', required=False, max_length=100),
]

JERSEY_REQUEST_FIELDS = [
    FieldRule('full_name', 'Full name', max_length=100),
    FieldRule('email', 'Email', max_length=255, is_email=True),
    FieldRule('phone_number', 'Phone number', max_length=20),
    FieldRule('jersey_name', 'Jersey name', max_length=200),
    FieldRule('team', 'Team name', max_length=100),
    FieldRule('league', 'League name', required=False, max_length=100),
    FieldRule('size', 'Size', max_length=10),
    FieldRule('additional_notes', 'Additional notes', required=False, max_length=1000),
]

PROFILE_FIELDS = [
    FieldRule('full_name', 'Full name', required=False, max_length=100),
    FieldRule('phone_number', 'Phone number', required=False, max_length=20),
    FieldRule('delivery_address', 'Delivery address', required=False, max_length=500),
    FieldRule('city', 'City', required=False, max_length=100),
    FieldRule('state', 'State', required=False, max_length=100),
]

CHECKOUT_FIELDS = [
    FieldRule('customer_name', 'Full name', max_length=100),
    FieldRule('customer_phone', 'Phone number', max_length=20),
    FieldRule('customer_email', 'Email', required=False, max_length=255, is_email=True),
    FieldRule('delivery_address', 'Delivery address', max_length=500),
    FieldRule('delivery_city', 'City', max_length=100),
    FieldRule('delivery_state', 'State', max_length=100),
    FieldRule('notes', 'Notes', required=False, max_length=1000),
]

JERSEY_FIELDS = [
    FieldRule('name', 'Name', max_length=200),
    FieldRule('team', 'Team', max_length=100),
    FieldRule('league', 'League', max_length=100),
    FieldRule('season', 'Season', max_length=20),
    FieldRule('description', 'Description', required=False, max_length=5000),
    FieldRule('image_url', 'Image URL', required=False, max_length=500),
]


def validate_email(email: str) -> ValidationResult:
    """Validate email address"""
    return InputValidator.validate_email(email)


def validate_password(password: str) -> ValidationResult:
    """Validate password"""
    return InputValidator.validate_password(password)


def validate_quantity(value: Any) -> ValidationResult:
    """Validate a cart or inquiry quantity"""
    return InputValidator.validate_quantity(value)


def validate_registration(data: Dict[str, Any]) -> FormValidationResult:
    """Validate sign-up form (email, password, optional full name)"""
    result = InputValidator.validate_form(data, REGISTRATION_FIELDS)
    password_result = validate_password((data or {}).get('password'))
    if not password_result.is_valid:
        result.errors['password'] = password_result.error_message
        result.is_valid = False
    else:
        result.cleaned['password'] = password_result.sanitized_value
    return result


def validate_jersey_request(data: Dict[str, Any]) -> FormValidationResult:
    """Validate the request-a-jersey form"""
    return InputValidator.validate_form(data, JERSEY_REQUEST_FIELDS)


def validate_profile_update(data: Dict[str, Any]) -> FormValidationResult:
    """Validate a partial profile update"""
    return InputValidator.validate_form(data, PROFILE_FIELDS, partial=True)


def validate_checkout_details(data: Dict[str, Any]) -> FormValidationResult:
    """Validate customer and delivery details for a cart checkout"""
    return InputValidator.validate_form(data, CHECKOUT_FIELDS)


def validate_jersey_form(data: Dict[str, Any], partial: bool = False) -> FormValidationResult:
    """
    Validate the admin jersey form

    Text fields follow JERSEY_FIELDS; price must be a non-negative number,
    stock a non-negative integer, sizes comma separated lists, flags booleans.
    """
    data = data or {}
    result = InputValidator.validate_form(data, JERSEY_FIELDS, partial=partial)

    if not partial or 'price' in data:
        try:
            price = float(data.get('price'))
            if price < 0:
                result.errors['price'] = "Price cannot be negative"
            else:
                result.cleaned['price_naira'] = round(price, 2)
        except (TypeError, ValueError):
            result.errors['price'] = "Price must be a number"

    if not partial or 'stock_quantity' in data:
        raw_stock = data.get('stock_quantity', 0)
        try:
            stock = int(raw_stock if raw_stock not in (None, '') else 0)
            if stock < 0:
                result.errors['stock_quantity'] = "Stock quantity cannot be negative"
            else:
                result.cleaned['stock_quantity'] = stock
        except (TypeError, ValueError):
            result.errors['stock_quantity'] = "Stock quantity must be a whole number"

    for size_field in ('sizes', 'available_sizes'):
        if size_field in data:
            result.cleaned[size_field] = parse_size_list(data.get(size_field))

    if 'sizes' in result.cleaned and 'available_sizes' in result.cleaned:
        unknown = [s for s in result.cleaned['available_sizes'] if s not in result.cleaned['sizes']]
        if unknown:
            result.errors['available_sizes'] = f"Available sizes must be listed in sizes: {', '.join(unknown)}"

    for flag in ('is_available', 'is_featured'):
        if flag in data:
            result.cleaned[flag] = _as_bool(data.get(flag))

    result.is_valid = not result.errors
    return result


CLOCK_PATTERN = re.compile(r'^\d{2}:\d{2}$')


def validate_business_hours(hours: Any) -> Optional[str]:
    """
    Check a business hours map before it is saved

    Shape: {"monday": {"open": "09:00", "close": "18:00", "closed": false}, ...}
    with any subset of the seven days. Closed days may omit the times.

    Returns:
        Error message, or None when the map is usable
    """
    if not isinstance(hours, dict) or any(day not in DAY_NAMES for day in hours):
        return f"Business hours must be keyed by day: {', '.join(DAY_NAMES)}"

    for day, entry in hours.items():
        if not isinstance(entry, dict):
            return f"{day.capitalize()} hours must be an object"
        closed = entry.get('closed', False)
        if not isinstance(closed, bool):
            return f"{day.capitalize()} closed flag must be true or false"
        if closed:
            continue
        for key in ('open', 'close'):
            value = entry.get(key)
            if not isinstance(value, str) or not CLOCK_PATTERN.match(value):
                return f"{day.capitalize()} {key} time must be HH:MM"
    return None


def sanitize_input(input_string: str, max_length: int = 1000) -> str:
    """Sanitize user input"""
    return InputValidator.sanitize_input(input_string, max_length)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)
