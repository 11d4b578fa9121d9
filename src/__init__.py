"""DevEvent: developer event listings and email seat booking."""

__version__ = "1.0.0"
