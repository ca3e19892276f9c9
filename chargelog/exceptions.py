"""
Custom exceptions for ChargeLog.

This module provides a hierarchy of exceptions for better error handling
and more informative error messages throughout the application.
"""


class ChargeLogError(Exception):
    """Base exception for all ChargeLog errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class PersistenceError(ChargeLogError):
    """Loading or saving the record snapshot failed."""

    def __init__(self, message: str, storage_key: str = None, backend: str = None):
        details = {}
        if storage_key:
            details['storage_key'] = storage_key
        if backend:
            details['backend'] = backend
        super().__init__(message, details)
        self.storage_key = storage_key
        self.backend = backend


class SeedSourceError(ChargeLogError):
    """The seed CSV could not be read (missing file, HTTP error, ...)."""

    def __init__(self, message: str, source: str = None):
        details = {}
        if source:
            details['source'] = source
        super().__init__(message, details)
        self.source = source


class ConfigurationError(ChargeLogError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str = None):
        details = {}
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, details)
        self.config_key = config_key
