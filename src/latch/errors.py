"""Latch exception hierarchy.

Credential problems (blank fields, unknown login, wrong password) are
validation errors collected on the session, not exceptions. Exceptions
are reserved for misconfiguration.
"""


class LatchError(Exception):
    """Base for all latch-specific errors."""


class ConfigurationError(LatchError):
    """Raised when a session configuration is invalid.

    Typically raised while building ``SessionConfig``, or on the first
    attempt when a configured lookup/verification method does not exist.
    """
