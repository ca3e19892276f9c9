"""
Flask extensions for ChargeLog.

This module initializes Flask extensions that need to be shared
across the application to avoid circular imports.
"""

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .config import Config

STORE_EXTENSION_KEY = "chargelog_store"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per hour", "200 per minute"],
    storage_uri=Config.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    headers_enabled=True,
)


class RateLimits:
    """Common rate limit configurations for different endpoint types."""

    # Expensive operations (exports)
    EXPENSIVE = "20 per minute"

    # Imports and seeding rewrite the store
    VERY_EXPENSIVE = "5 per minute"


def get_store():
    """Get the record store attached to the current app."""
    return current_app.extensions[STORE_EXTENSION_KEY]
