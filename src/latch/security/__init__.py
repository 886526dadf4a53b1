"""Security utilities — password hashing and audit events.

Password hashing::

    from latch.security import hash_password, verify_password

    hashed = hash_password("my-password")
    ok = verify_password("my-password", hashed)

Audit events::

    from latch.security import set_security_event_sink

    set_security_event_sink(lambda event: log.info("%s", event.name))
"""

from latch.security.audit import (
    LOGIN_FAILURE,
    LOGIN_SUCCESS,
    REQUEST_RECORDED,
    LoginEvent,
    emit_security_event,
    set_security_event_sink,
)
from latch.security.authentic import PasswordAuthentic
from latch.security.passwords import hash_password, needs_rehash, verify_password

__all__ = [
    "LOGIN_FAILURE",
    "LOGIN_SUCCESS",
    "LoginEvent",
    "PasswordAuthentic",
    "REQUEST_RECORDED",
    "emit_security_event",
    "hash_password",
    "needs_rehash",
    "set_security_event_sink",
    "verify_password",
]
