"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ChromecastBgError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(ChromecastBgError):
    """Raised for issues related to settings loading or validation."""
