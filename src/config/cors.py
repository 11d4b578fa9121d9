"""CORS configuration for the FastAPI application."""

from .environment import IS_PRODUCTION_ENVIRONMENT

# CORS Origins configuration
ALLOWED_ORIGINS = {
    False: ["*"],  # Development - allow all
    True: [        # Production - restricted
        "https://devevent.app",
        "https://www.devevent.app",
    ]
}

# CORS Methods configuration
ALLOWED_METHODS = [
    "GET",      # Event listing and lookup
    "POST",     # Event creation and bookings
    "PATCH",    # Partial event updates
    "OPTIONS"   # Required for CORS preflight
]

# CORS Headers configuration
ALLOWED_HEADERS = [
    "Content-Type",
    "Accept",
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 3600,
}
