"""Validation and normalization of event records.

Normalizers run only for the fields a write actually changes: a new title
re-derives the slug, a new date or time is re-normalized, and everything else
keeps its stored value.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as date_parser

from ..models.event import EVENT_MODES
from .errors import ValidationError, InvalidSlugError

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
TIME_PATTERN = re.compile(r'^(0?[1-9]|1[0-2]):([0-5][0-9])\s?(AM|PM)$', re.IGNORECASE)

DATE_FORMAT_MESSAGE = "Invalid date format. Use YYYY-MM-DD"
TIME_FORMAT_MESSAGE = "Invalid time format. Use HH:MM AM/PM (e.g., 09:00 AM)"

# Writable fields and their "required" messages
TEXT_FIELDS = {
    'title': "Title is required",
    'description': "Description is required",
    'overview': "Overview is required",
    'image': "Image is required",
    'venue': "Venue is required",
    'location': "Location is required",
    'date': "Date is required",
    'time': "Time is required",
    'mode': "Mode is required",
    'audience': "Audience is required",
    'organizer': "Organizer is required",
}
LIST_FIELDS = {
    'agenda': "Agenda must have at least one item",
    'tags': "At least one tag is required",
}
EVENT_FIELDS = tuple(TEXT_FIELDS) + tuple(LIST_FIELDS)

# Stored as given, without trimming
UNTRIMMED_FIELDS = ('image',)

_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2001, 2, 2)


def derive_slug(title: str) -> str:
    """
    Derive the URL-safe slug for a title.

    Example:
        >>> derive_slug("  Re Act -- Conf 2025! ")
        're-act-conf-2025'
    """
    slug = title.lower().strip()
    slug = re.sub(r'[^a-zA-Z0-9_\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def validate_slug(slug: Any) -> str:
    """Check a lookup slug is canonical. Raises InvalidSlugError otherwise."""
    if not isinstance(slug, str) or not SLUG_PATTERN.fullmatch(slug):
        raise InvalidSlugError(slug)
    return slug


def normalize_date(raw: Any) -> str:
    """
    Parse a calendar date and return it as YYYY-MM-DD.

    Accepts ISO dates as well as free-form dates like "January 5, 2025".
    Year, month and day must all be present in the input.
    Time-of-day and offsets in the input are ignored; the calendar date as
    written is what gets stored.
    """
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError({'date': DATE_FORMAT_MESSAGE})

    # A component missing from the input comes out differently under the two
    # defaults, so year, month and day must all be written
    try:
        parsed = date_parser.parse(raw.strip(), default=_FIRST_DEFAULT)
        check = date_parser.parse(raw.strip(), default=_SECOND_DEFAULT)
    except (ValueError, OverflowError) as e:
        raise ValidationError({'date': DATE_FORMAT_MESSAGE}) from e
    if parsed.date() != check.date():
        raise ValidationError({'date': DATE_FORMAT_MESSAGE})
    return parsed.date().isoformat()


def normalize_time(raw: Any) -> str:
    """
    Validate a 12-hour clock time and return it as "H:MM AM" / "HH:MM PM".

    Example:
        >>> normalize_time("9:00am")
        '9:00 AM'
    """
    match = TIME_PATTERN.fullmatch(raw.strip()) if isinstance(raw, str) else None
    if match is None:
        raise ValidationError({'time': TIME_FORMAT_MESSAGE})
    hour, minute, meridiem = match.groups()
    return f"{hour}:{minute} {meridiem.upper()}"


def _clean_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        return None
    return [item.strip() for item in value if item.strip()]


def _changed_fields(changes: Mapping[str, Any], current: Optional[Mapping[str, Any]]) -> List[str]:
    if current is None:
        return list(changes)
    return [name for name, value in changes.items() if current.get(name) != value]


def prepare_event(changes: Mapping[str, Any], current: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate and normalize an event write.

    Args:
        changes: Field values supplied by the caller. For a create this is the
            whole record; for an update only the fields being edited.
        current: The stored record when updating, None when creating

    Returns:
        The normalized values to write. For updates only fields whose value
        changed are included (plus ``slug`` when the title changed).

    Raises:
        ValidationError: With every failing field in ``errors``
    """
    errors: Dict[str, str] = {}

    unknown = [name for name in changes if name not in EVENT_FIELDS]
    for name in unknown:
        if name == 'slug':
            errors['slug'] = "Slug is derived from the title and cannot be set directly"
        else:
            errors[name] = f"Unknown field '{name}'"

    values: Dict[str, Any] = {}
    for name in _changed_fields(changes, current):
        if name in unknown:
            continue
        value = changes[name]

        if name in LIST_FIELDS:
            cleaned = _clean_list(value)
            if cleaned is None:
                errors[name] = f"{name.capitalize()} must be a list of strings"
            else:
                values[name] = cleaned
        elif name == 'date':
            try:
                values[name] = normalize_date(value)
            except ValidationError as e:
                errors.update(e.errors)
        elif name == 'time':
            try:
                values[name] = normalize_time(value)
            except ValidationError as e:
                errors.update(e.errors)
        elif value is None or isinstance(value, str):
            if value is not None and name not in UNTRIMMED_FIELDS:
                value = value.strip()
            values[name] = value
        else:
            errors[name] = f"{name.capitalize()} must be a string"

    if 'title' in values and isinstance(values['title'], str):
        values['slug'] = derive_slug(values['title'])
        if values['title'] and not values['slug']:
            errors['title'] = "Title must contain at least one letter or digit"

    merged = dict(current or {})
    merged.update(values)
    for name, message in validate_event(merged).items():
        errors.setdefault(name, message)

    if errors:
        raise ValidationError(errors)
    return values


def validate_event(record: Mapping[str, Any]) -> Dict[str, str]:
    """Return field -> message for every structural problem in a full record."""
    errors: Dict[str, str] = {}
    for name, message in TEXT_FIELDS.items():
        value = record.get(name)
        if not isinstance(value, str) or not value.strip():
            errors[name] = message
    if 'mode' not in errors and record['mode'] not in EVENT_MODES:
        errors['mode'] = "Mode must be online, offline, or hybrid"
    for name, message in LIST_FIELDS.items():
        if not record.get(name):
            errors[name] = message
    return errors
