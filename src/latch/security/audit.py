"""Login audit events.

Every explicit login attempt and every recorded request produces a
``LoginEvent``. Applications register a sink to forward them to logs,
metrics, or a SIEM::

    from latch.security.audit import set_security_event_sink

    set_security_event_sink(lambda event: audit_log.info("%s %s", event.name, event.login))

Events carry the submitted login and the error keys, never the password.
"""

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from time import time
from typing import Any, TypeAlias

LOGIN_SUCCESS = "auth.login.success"
LOGIN_FAILURE = "auth.login.failure"
REQUEST_RECORDED = "auth.request.recorded"


@dataclass(frozen=True, slots=True)
class LoginEvent:
    """What happened to one login attempt or authenticated request.

    Attributes:
        name: One of ``LOGIN_SUCCESS``, ``LOGIN_FAILURE``, ``REQUEST_RECORDED``.
        remote_ip: The controller's ``remote_ip``, when a controller was given.
        user_id: ``id`` of the account involved, if one was found.
        login: The submitted login value (failures included).
        error_keys: Message keys of the errors that rejected the attempt.
    """

    name: str
    timestamp: float = field(default_factory=time)
    remote_ip: str | None = None
    user_id: str | None = None
    login: str | None = None
    error_keys: tuple[str, ...] = ()

    @property
    def is_failure(self) -> bool:
        return self.name == LOGIN_FAILURE

    @property
    def invalid_password(self) -> bool:
        """True when the account exists but the password was wrong."""
        return "password_invalid" in self.error_keys


SecurityEventSink: TypeAlias = Callable[[LoginEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Set a process-wide sink for login events.

    Pass ``None`` to disable event delivery.
    """
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    *,
    controller: Any | None = None,
    record: Any | None = None,
    login: Any | None = None,
    error_keys: Iterable[str | None] = (),
) -> None:
    """Build a ``LoginEvent`` from the attempt's pieces and deliver it."""
    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    record_id = getattr(record, "id", None)
    event = LoginEvent(
        name=name,
        remote_ip=getattr(controller, "remote_ip", None),
        user_id=None if record_id is None else str(record_id),
        login=None if login is None else str(login),
        error_keys=tuple(key for key in error_keys if key is not None),
    )
    sink(event)
