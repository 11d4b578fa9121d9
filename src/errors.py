"""Base exception shared by every DevEvent error."""


class DevEventError(Exception):
    """Base class for errors raised deliberately by this application.

    Anything that is not a DevEventError reaching a unit of work is treated as
    unexpected and wrapped before it is surfaced.
    """
    pass
