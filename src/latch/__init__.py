"""Latch — password login sessions with login-history bookkeeping.

Validates a submitted login/password pair against your account model,
reports typed errors, and maintains the account's magic columns
(``login_count``, ``last_request_at``, ``current_login_ip`` ...).

Basic usage::

    from latch import Session, SessionConfig

    USER_SESSION = SessionConfig(account_type=User)

    session = Session(USER_SESSION, {"login": "ben", "password": "s3cr3t"})
    if session.save(controller):
        user = session.record
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "CredentialFields",
    "LatchError",
    "LoginBookkeeper",
    "MagicColumns",
    "PasswordSession",
    "Session",
    "SessionConfig",
    "SessionErrors",
    "set_translator",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import latch`` free of the argon2 import until a session is used.
    """
    if name in ("SessionConfig", "CredentialFields"):
        from latch import config as _config

        return getattr(_config, name)

    if name in ("Session", "PasswordSession", "SessionErrors", "LoginBookkeeper", "MagicColumns"):
        from latch import session as _session

        return getattr(_session, name)

    if name in ("LatchError", "ConfigurationError"):
        from latch import errors as _errors

        return getattr(_errors, name)

    if name == "set_translator":
        from latch.i18n import set_translator

        return set_translator

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
