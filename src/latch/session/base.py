"""Session — a full login attempt: validate, book-keep, persist, audit.

``Session`` extends ``PasswordSession`` with the steps that surround
validation::

    USER_SESSION = SessionConfig(account_type=User, last_request_at_threshold=60)

    def create(request):
        session = Session(USER_SESSION, {"login": form["login"], "password": form["password"]})
        if session.save(request):
            return session.record
        return session.errors.to_dict()

``save()`` handles explicit logins. Requests authenticated another way
(cookie, session, API token) report in through ``record_request()``.
"""

import logging
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from latch.config import SessionConfig
from latch.i18n import translate
from latch.security.audit import LOGIN_FAILURE, LOGIN_SUCCESS, REQUEST_RECORDED, emit_security_event
from latch.session.errors import BASE
from latch.session.magic_columns import LoginBookkeeper, utcnow
from latch.session.password import PasswordSession

_log = logging.getLogger("latch.session")


@runtime_checkable
class Controller(Protocol):
    """What a session needs from the request layer.

    A controller may also define ``last_request_update_allowed() -> bool``
    to veto ``last_request_at`` updates for specific requests.
    """

    @property
    def remote_ip(self) -> str | None: ...


class Session(PasswordSession):
    """A login attempt with magic column bookkeeping."""

    __slots__ = ("_bookkeeper", "record")

    def __init__(self, config: SessionConfig, credentials: Any = None) -> None:
        super().__init__(config, credentials)
        self._bookkeeper = LoginBookkeeper(config)
        self.record: Any = None

    def is_attempting_authentication(self) -> bool:
        return self.is_attempting_password_auth()

    def save(self, controller: Controller | None = None, now: datetime | None = None) -> bool:
        """Authenticate the submitted credentials.

        On success ``record`` is set and the explicit-login magic columns
        are updated. On a wrong password ``failed_login_count`` is
        increased. Either way the touched account is persisted through
        its ``save()`` method when it has one.
        """
        self.record = None
        if not self.is_attempting_authentication():
            self.errors.clear()
            self.errors.add(
                BASE,
                translate(
                    "error_messages.no_authentication_details",
                    "You did not provide any details for authentication.",
                ),
                key="no_authentication_details",
            )
            emit_security_event(LOGIN_FAILURE, controller=controller, error_keys=self.errors.keys())
            return False

        now = now or utcnow()
        if not self.validate():
            if self.is_invalid_password():
                self._bookkeeper.on_failed_login_attempt(self.attempted_record)
            _save_record(self.attempted_record)
            _log.info("Login failed: %s", ", ".join(str(key) for key in self.errors.keys()))
            emit_security_event(
                LOGIN_FAILURE,
                controller=controller,
                record=self.attempted_record,
                login=self.identifier,
                error_keys=self.errors.keys(),
            )
            return False

        record = self.attempted_record
        self._bookkeeper.on_explicit_login_success(record, now, _remote_ip(controller))
        _save_record(record)
        self.record = record
        emit_security_event(LOGIN_SUCCESS, controller=controller, record=record, login=self.identifier)
        return True

    def record_request(
        self,
        account: Any,
        controller: Controller | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Note an authenticated request for *account* (cookie, session, API).

        Refreshes ``last_request_at`` when allowed by the controller and
        the threshold. Returns whether it was refreshed.
        """
        update_allowed = getattr(controller, "last_request_update_allowed", None)
        if not callable(update_allowed):
            update_allowed = None
        updated = self._bookkeeper.on_any_authenticated_request(account, now, update_allowed)
        if updated:
            _save_record(account)
            emit_security_event(REQUEST_RECORDED, controller=controller, record=account)
        self.record = account
        return updated


def _remote_ip(controller: Controller | None) -> str | None:
    if controller is None:
        return None
    return controller.remote_ip


def _save_record(record: Any) -> None:
    save = getattr(record, "save", None)
    if callable(save):
        save()
