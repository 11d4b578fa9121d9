"""Client-input errors raised before anything is written."""

from typing import Dict, Optional, Union

from ..errors import DevEventError


class ValidationError(DevEventError):
    """
    Raised when a record or input fails validation.

    Attributes:
        errors: Mapping of field name to a human readable message
    """

    def __init__(self, errors: Union[Dict[str, str], str], message: Optional[str] = None):
        if isinstance(errors, str):
            errors = {'__all__': errors}
        self.errors = dict(errors)
        if message is None:
            message = '; '.join(self.errors.values())
        super().__init__(message)


class InvalidSlugError(ValidationError):
    """Raised when a lookup slug is not in canonical slug format."""

    def __init__(self, slug: str):
        super().__init__(
            {'slug': "Invalid slug format. Must contain only lowercase letters, numbers, and hyphens."}
        )
        self.slug = slug


class ReferentialIntegrityError(DevEventError):
    """Raised when a booking references an event that does not exist."""

    def __init__(self, event_id):
        super().__init__(f"Event with ID {event_id} does not exist. Cannot create booking.")
        self.event_id = event_id
