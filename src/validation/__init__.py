"""Validation package: normalizers and validators run on the write path."""

from .errors import ValidationError, InvalidSlugError, ReferentialIntegrityError
from .event import (
    derive_slug,
    validate_slug,
    normalize_date,
    normalize_time,
    prepare_event,
    validate_event,
)
from .booking import validate_email, validate_event_reference, prepare_booking

__all__ = [
    'ValidationError',
    'InvalidSlugError',
    'ReferentialIntegrityError',
    'derive_slug',
    'validate_slug',
    'normalize_date',
    'normalize_time',
    'prepare_event',
    'validate_event',
    'validate_email',
    'validate_event_reference',
    'prepare_booking',
]
