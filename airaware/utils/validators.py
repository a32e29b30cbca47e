"""
Input validation for registration, profile updates, locations and thresholds.
"""
import re
from datetime import datetime, date, timezone
from email_validator import validate_email, EmailNotValidError
from flask import request
from airaware.models.user import CONDITION_TYPES, SENSITIVITY_LEVELS, PROFILE_FIELDS

BODY_REQUIRED = 'Request body is required'

MIN_PASSWORD_LENGTH = 6

AQI_CHOICES = {
    'good': 1,
    'fair': 2,
    'moderate': 3,
    'poor': 4,
    'very_poor': 5,
}

UNKNOWN_CHOICES = {'unknown', "i don't know", 'i dont know'}

SENSITIVITY_ERROR = 'sensitivity must be one of: good, fair, moderate, poor, very_poor, unknown'

_NAME_FIELDS = ['first_name', 'last_name', 'sex_at_birth', 'gender', 'nationality']


def json_body():
    """
    The request's JSON object. A missing body reads as ``{}``;
    anything other than an object (array, string, number) returns None.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def credentials(data: dict):
    """Pull ``(email, password)`` out of a body, or ``(None, None)`` if either is not a string."""
    email = data.get('email') or ''
    password = data.get('password') or ''
    if not isinstance(email, str) or not isinstance(password, str):
        return None, None
    return email.strip().lower(), password


def validate_registration(data: dict) -> list:
    """Validate registration input. Returns list of error strings (empty = valid)."""
    errors = []

    email, password = credentials(data)
    if email is None:
        return ['email and password must be strings']

    if not email or not password:
        return ['email and password are required']

    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        errors.append('Invalid email')

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    return errors


def _parse_datetime(value):
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    raise ValueError(value)


def validate_profile_update(data: dict):
    """
    Validate a profile PATCH body against the allow-list.
    Returns ``(updates, errors)``; keys outside the allow-list are dropped.
    """
    updates = {}
    errors = []

    for key in PROFILE_FIELDS:
        if key not in data:
            continue
        value = data[key]

        if key == 'condition_type':
            c = str(value).lower()
            if c not in CONDITION_TYPES:
                errors.append(f"condition_type must be one of: {', '.join(CONDITION_TYPES)}")
            else:
                updates[key] = c

        elif key == 'sensitivity_level':
            s = str(value).lower()
            if s not in SENSITIVITY_LEVELS:
                errors.append(f"sensitivity_level must be one of: {', '.join(SENSITIVITY_LEVELS)}")
            else:
                updates[key] = s

        elif key in ('accessibility_mode', 'analytics_opt_in'):
            if not isinstance(value, bool):
                errors.append(f'{key} must be a boolean')
            else:
                updates[key] = value

        elif key == 'accepted_disclaimer_at':
            if value is None:
                updates[key] = None
            else:
                try:
                    parsed = _parse_datetime(value)
                except ValueError:
                    errors.append('accepted_disclaimer_at must be a valid datetime or null')
                else:
                    if parsed.tzinfo is not None:
                        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
                    updates[key] = parsed

        elif key == 'date_of_birth':
            if value is None or value == '':
                updates[key] = None
            elif not re.match(r'^\d{4}-\d{2}-\d{2}$', str(value)):
                errors.append('date_of_birth must be in YYYY-MM-DD format')
            else:
                try:
                    parsed = datetime.strptime(str(value), '%Y-%m-%d').date()
                except ValueError:
                    errors.append('date_of_birth is not a valid date')
                else:
                    if parsed > date.today():
                        errors.append('date_of_birth cannot be in the future')
                    else:
                        updates[key] = parsed

        elif key in _NAME_FIELDS:
            if value is None:
                updates[key] = None
                continue
            text = str(value).strip()
            if len(text) > 100:
                errors.append(f'{key} must be 100 characters or fewer')
            else:
                updates[key] = text or None

    return updates, errors


def location_input_error(city, postcode):
    """Exactly one of city/postcode must be supplied."""
    city = (city or '').strip() if isinstance(city, str) else city
    postcode = (postcode or '').strip() if isinstance(postcode, str) else postcode
    if (not city and not postcode) or (city and postcode):
        return 'Provide either a city or a postcode'
    return None


def parse_sensitivity(value):
    """
    Map a sensitivity choice to threshold values.
    Returns ``(fields, error)`` where fields has trigger_aqi and use_default.
    """
    if value is None or str(value).strip() == '':
        return None, 'sensitivity is required'

    choice = str(value).strip().lower()

    if choice in UNKNOWN_CHOICES:
        return {'trigger_aqi': None, 'use_default': True}, None

    if choice in AQI_CHOICES:
        return {'trigger_aqi': AQI_CHOICES[choice], 'use_default': False}, None

    return None, SENSITIVITY_ERROR
