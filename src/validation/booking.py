"""Validation of booking signups."""

import re
from typing import Any, Dict

from .errors import ValidationError

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def validate_email(raw: Any) -> str:
    """Lower-case and trim an email address, then check its shape."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError({'email': "Email is required"})
    email = raw.strip().lower()
    if not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError({'email': "Please provide a valid email address"})
    return email


def validate_event_reference(raw: Any) -> int:
    """Coerce an event reference to an integer id."""
    if raw is None or raw == '':
        raise ValidationError({'eventId': "Event ID is required"})
    if isinstance(raw, bool):
        raise ValidationError({'eventId': "Event ID must be a positive integer"})
    if isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw.strip())
    if not isinstance(raw, int) or raw < 1:
        raise ValidationError({'eventId': "Event ID must be a positive integer"})
    return raw


def prepare_booking(event_id: Any, email: Any) -> Dict[str, Any]:
    """Validate both booking fields, reporting every failure at once."""
    errors: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    try:
        values['event_id'] = validate_event_reference(event_id)
    except ValidationError as e:
        errors.update(e.errors)
    try:
        values['email'] = validate_email(email)
    except ValidationError as e:
        errors.update(e.errors)
    if errors:
        raise ValidationError(errors)
    return values
