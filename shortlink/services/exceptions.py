"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for short URL errors."""
    pass


class InvalidURLError(URLError):
    """The original URL is missing or not a string."""
    pass


class InvalidValidityError(URLError):
    """The validity window is not a positive number of minutes."""
    pass


class InvalidShortcodeError(URLError):
    """The requested custom shortcode doesn't meet requirements."""
    pass


class ShortcodeConflictError(URLError):
    """The requested custom shortcode is already in use."""
    pass


class GenerationExhaustedError(URLError):
    """No unused shortcode was found within the allowed number of attempts."""
    pass


class ShortURLNotFoundError(URLError):
    """No short URL exists for the given shortcode."""
    pass


class StorageFailureError(ServiceError):
    """The store failed (connectivity, unclassified constraint violation, ...)."""
    pass
