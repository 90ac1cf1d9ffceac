"""
Input Validation & Sanitization Utilities
Provides validation for API requests: generic field checks plus one validator per CRM record type.

The record validators (validate_client, validate_quote, ...) return a cleaned
copy of the input with strings trimmed and numbers coerced, and raise
ValidationError naming the offending field.
"""
import re
from datetime import date, datetime
from typing import Dict, Any, List, Optional, Tuple
import logging

from database.models import (
    SERVICE_TYPES, TICKET_URGENCIES, TICKET_STATUSES, QUOTE_STATUSES,
    PURCHASE_ORDER_STATUSES, PROJECT_STATUSES, PROJECT_PRIORITIES, USER_ROLES
)

logger = logging.getLogger(__name__)

# Regex patterns
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PHONE_PATTERN = re.compile(r'^\+?\d{10,15}$')

MIN_PASSWORD_LENGTH = 6
TICKET_DESCRIPTION_MAX = 500


class ValidationError(Exception):
    """Custom exception for validation errors"""
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate that all required fields are present in the data

    Args:
        data: Dictionary of input data
        required_fields: List of required field names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None or data[field] == '']

    if missing_fields:
        return False, f"Missing required fields: {', '.join(missing_fields)}"

    return True, None


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not isinstance(email, str):
        return False, "Email must be a non-empty string"

    if not EMAIL_PATTERN.match(email):
        return False, "Invalid email format"

    if len(email) > 254:  # RFC 5321
        return False, "Email address too long"

    return True, None


def validate_phone(phone: str) -> Tuple[bool, Optional[str]]:
    """
    Validate phone number format (at least 10 digits)

    Args:
        phone: Phone number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not phone or not isinstance(phone, str):
        return False, "Phone must be a non-empty string"

    # Remove common separators
    cleaned_phone = re.sub(r'[\s\-\(\)\.]', '', phone)

    if not PHONE_PATTERN.match(cleaned_phone):
        return False, "Phone must have at least 10 digits"

    return True, None


def validate_string_length(value: str, min_length: int = 0, max_length: int = 1000) -> Tuple[bool, Optional[str]]:
    """
    Validate string length is within acceptable range

    Args:
        value: String to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "Value must be a string"

    if len(value) < min_length:
        return False, f"Value too short (minimum {min_length} characters)"

    if len(value) > max_length:
        return False, f"Value too long (maximum {max_length} characters)"

    return True, None


def validate_number_range(value: float, min_value: Optional[float] = None, max_value: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate number is within acceptable range

    Args:
        value: Number to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, "Value must be a number"

    if min_value is not None and value < min_value:
        return False, f"Value too small (minimum {min_value})"

    if max_value is not None and value > max_value:
        return False, f"Value too large (maximum {max_value})"

    return True, None


def validate_choice(value: Any, choices) -> Tuple[bool, Optional[str]]:
    """
    Validate value is one of the allowed choices

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value not in choices:
        return False, f"Must be one of: {', '.join(choices)}"
    return True, None


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input by removing potentially dangerous characters

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    # Remove null bytes
    sanitized = value.replace('\x00', '')

    # Trim whitespace
    sanitized = sanitized.strip()

    # Limit length
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


# ============================================================================
# FIELD HELPERS (raise ValidationError)
# ============================================================================

def _check(result: Tuple[bool, Optional[str]], field: str):
    is_valid, error = result
    if not is_valid:
        raise ValidationError(f"Invalid {field}: {error}", field)


def _text(data: Dict[str, Any], field: str, min_length: int = 0,
          max_length: int = 1000, required: bool = True) -> Optional[str]:
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field} is required", field)
        return None
    value = sanitize_string(value, max_length=10000)
    _check(validate_string_length(value, min_length, max_length), field)
    return value


def _number(data: Dict[str, Any], field: str, default=None,
            min_value: Optional[float] = None, max_value: Optional[float] = None,
            required: bool = True) -> Optional[float]:
    value = data.get(field)
    if value is None or value == '':
        if default is not None:
            return float(default)
        if required:
            raise ValidationError(f"{field} is required", field)
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: Value must be a number", field)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: Value must be a number", field)
    _check(validate_number_range(value, min_value, max_value), field)
    return value


def _choice(data: Dict[str, Any], field: str, choices, default=None) -> str:
    value = data.get(field)
    if value in (None, '') and default is not None:
        return default
    _check(validate_choice(value, choices), field)
    return value


def _optional_email(data: Dict[str, Any], field: str = 'email') -> Optional[str]:
    value = data.get(field)
    if value in (None, ''):
        return None
    value = sanitize_string(value).lower()
    _check(validate_email(value), field)
    return value


def _phone(data: Dict[str, Any], field: str = 'phone', required: bool = True) -> Optional[str]:
    value = data.get(field)
    if value in (None, ''):
        if required:
            raise ValidationError(f"{field} is required", field)
        return None
    value = sanitize_string(value, max_length=50)
    _check(validate_phone(value), field)
    return value


def _rfc(data: Dict[str, Any], field: str = 'rfc') -> Optional[str]:
    value = data.get(field)
    if value in (None, ''):
        return None
    return sanitize_string(value, max_length=20).upper()


def _items(data: Dict[str, Any], default_unit: str) -> List[Dict[str, Any]]:
    items = data.get('items')
    if not isinstance(items, list) or not items:
        raise ValidationError("At least one item is required", 'items')

    cleaned = []
    for idx, item in enumerate(items):
        field = f'items[{idx}]'
        if not isinstance(item, dict):
            raise ValidationError(f"{field} must be an object", field)
        description = _text(item, 'description', min_length=1, max_length=1000)
        quantity = _number(item, 'quantity', min_value=1)
        price = _number(item, 'price', min_value=0)
        unit = sanitize_string(item.get('unit') or default_unit, max_length=20)
        line = {
            'description': description,
            'unit': unit,
            'quantity': int(quantity) if quantity.is_integer() else quantity,
            'price': price,
        }
        for ref in ('service_id', 'spare_part_id'):
            if item.get(ref):
                line[ref] = item[ref]
        cleaned.append(line)
    return cleaned


def _copy_optional_text(data: Dict[str, Any], cleaned: Dict[str, Any], fields, max_length=5000):
    for field in fields:
        if field in data:
            value = data.get(field)
            cleaned[field] = sanitize_string(value, max_length) if value not in (None, '') else None


# ============================================================================
# RECORD VALIDATORS
# ============================================================================

def validate_client(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a client record. Raises ValidationError."""
    cleaned = {
        'name': _text(data, 'name', min_length=2, max_length=255),
        'phone': _phone(data),
        'email': _optional_email(data),
        'rfc': _rfc(data),
    }
    _copy_optional_text(data, cleaned, ['address'])
    return cleaned


def validate_supplier(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a supplier record. Raises ValidationError."""
    cleaned = validate_client(data)
    _copy_optional_text(data, cleaned, ['contact_person'], max_length=255)
    return cleaned


def validate_service(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a catalog service. Raises ValidationError."""
    return {
        'title': _text(data, 'title', min_length=5, max_length=255),
        'sku': _text(data, 'sku', min_length=3, max_length=50).upper(),
        'price': _number(data, 'price', min_value=0),
        'description': _text(data, 'description', min_length=20, max_length=5000),
        'service_type': _choice(data, 'service_type', SERVICE_TYPES),
    }


def validate_spare_part(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a spare part. Raises ValidationError."""
    return {
        'name': _text(data, 'name', min_length=3, max_length=255),
        'brand': _text(data, 'brand', min_length=2, max_length=100),
        'sku': _text(data, 'sku', min_length=3, max_length=50).upper(),
        'price': _number(data, 'price', min_value=0),
        'description': _text(data, 'description', min_length=10, max_length=5000),
    }


def validate_quote(data: Dict[str, Any], default_iva: float = 16, default_unit: str = 'PZA') -> Dict[str, Any]:
    """
    Validate a quote.

    Catalog lines must already be resolved into description/price.
    Dates are left as given; the repository parses them.
    """
    cleaned = {
        'client_name': _text(data, 'client_name', min_length=2, max_length=255),
        'client_phone': _phone(data, 'client_phone', required=False),
        'rfc': _rfc(data),
        'status': _choice(data, 'status', QUOTE_STATUSES, default='Borrador'),
        'items': _items(data, default_unit),
        'iva': _number(data, 'iva', default=default_iva, min_value=0, max_value=100),
    }
    _copy_optional_text(data, cleaned, [
        'client_address', 'policies', 'observations', 'payment_terms',
        'service_kind', 'work_kind', 'equipment_location'
    ])
    return cleaned


def validate_purchase_order(data: Dict[str, Any], default_iva: float = 16, default_unit: str = 'PZA') -> Dict[str, Any]:
    """Validate a purchase order. supplier_details must already be resolved."""
    cleaned = {
        'supplier_name': _text(data, 'supplier_name', min_length=1, max_length=255),
        'supplier_details': _text(data, 'supplier_details', min_length=1, max_length=2000),
        'status': _choice(data, 'status', PURCHASE_ORDER_STATUSES, default='Borrador'),
        'items': _items(data, default_unit),
        'discount_percentage': _number(data, 'discount_percentage', default=0, min_value=0, max_value=100),
        'iva': _number(data, 'iva', default=default_iva, min_value=0, max_value=100),
    }
    _copy_optional_text(data, cleaned, [
        'bill_to_details', 'shipping_method', 'payment_method', 'observations'
    ])
    return cleaned


def validate_ticket(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a service ticket. Raises ValidationError."""
    cleaned = {
        'service_type': _choice(data, 'service_type', SERVICE_TYPES),
        'equipment_type': _text(data, 'equipment_type', min_length=3, max_length=255),
        'description': _text(data, 'description', min_length=20, max_length=TICKET_DESCRIPTION_MAX),
        'urgency': _choice(data, 'urgency', TICKET_URGENCIES),
        'status': _choice(data, 'status', TICKET_STATUSES, default='Recibido'),
    }
    if data.get('client_phone'):
        cleaned['client_phone'] = _phone(data, 'client_phone')
    _copy_optional_text(data, cleaned, ['client_name', 'client_address'])
    if data.get('price') not in (None, ''):
        cleaned['price'] = _number(data, 'price', min_value=0)
    return cleaned


def validate_project(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a project. Raises ValidationError."""
    return {
        'client': _text(data, 'client', min_length=2, max_length=255),
        'description': _text(data, 'description', min_length=10, max_length=5000),
        'responsible': _text(data, 'responsible', min_length=2, max_length=255),
        'status': _choice(data, 'status', PROJECT_STATUSES, default='Nuevo'),
        'priority': _choice(data, 'priority', PROJECT_PRIORITIES, default='Media'),
        'programmed_date': parse_date(data.get('programmed_date'), 'programmed_date', required=True),
    }


def parse_date(value: Any, field: str, required: bool = False) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string (or date) into a date.

    Raises:
        ValidationError: If the value is malformed, or missing while required
    """
    if value in (None, ''):
        if required:
            raise ValidationError(f"{field} is required", field)
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field}: must be a date (YYYY-MM-DD)", field)


def validate_status(value: Any, choices) -> str:
    """Validate a status change payload value. Raises ValidationError."""
    _check(validate_choice(value, choices), 'status')
    return value


def validate_credentials(data: Dict[str, Any]) -> Tuple[str, str]:
    """
    Validate signup/login credentials.

    Returns:
        Tuple of (email, password)
    """
    email = sanitize_string(data.get('email') or '').lower()
    _check(validate_email(email), 'email')
    password = data.get('password')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.", 'password'
        )
    return email, password


def validate_role(value: Any) -> str:
    _check(validate_choice(value, USER_ROLES), 'role')
    return value


def format_validation_error(field: str, message: str) -> Dict[str, Any]:
    """
    Format validation error for consistent API responses

    Args:
        field: Field name that failed validation
        message: Error message

    Returns:
        Error response dictionary
    """
    return {
        'success': False,
        'error': 'Validation Error',
        'field': field,
        'message': message
    }


def format_success_response(data: Any, message: str = "Success") -> Dict[str, Any]:
    """
    Format success response for consistent API responses

    Args:
        data: Response data
        message: Success message

    Returns:
        Success response dictionary
    """
    return {
        'success': True,
        'message': message,
        'data': data
    }
