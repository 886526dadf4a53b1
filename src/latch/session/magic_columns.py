"""Magic columns — login history bookkeeping on the account record.

Like ``created_at``/``updated_at`` in an ORM, these optional account
attributes are maintained automatically when the account type declares
them:

* ``login_count`` — increased on every explicit login. Not increased for
  cookie, session or API continuation.
* ``failed_login_count`` — increased for each wrong password, reset to 0
  by an explicit login. Brute-force protection reads this counter.
* ``last_request_at`` — updated on explicit login and, subject to
  ``last_request_at_threshold``, on every authenticated request.
* ``current_login_at`` / ``last_login_at`` — time of this and the
  previous explicit login.
* ``current_login_ip`` / ``last_login_ip`` — IP of this and the previous
  explicit login.

A column the account does not have is skipped silently.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import cache
from typing import Any

from latch.config import SessionConfig

_log = logging.getLogger("latch.session")

MAGIC_COLUMNS = (
    "login_count",
    "failed_login_count",
    "last_request_at",
    "current_login_at",
    "last_login_at",
    "current_login_ip",
    "last_login_ip",
)


@dataclass(frozen=True, slots=True)
class MagicColumns:
    """The magic columns an account type declares."""

    columns: frozenset[str] = frozenset()

    def __contains__(self, name: object) -> bool:
        return name in self.columns

    @classmethod
    def detect(cls, account_type: type) -> MagicColumns:
        """Resolve (once per type) which magic columns *account_type* declares.

        An ORM-style ``column_names`` collection wins. Otherwise dataclass
        fields, annotations, ``__slots__`` and class attributes are read.
        """
        return _detect(account_type)

    @classmethod
    def for_account(cls, account: Any) -> MagicColumns:
        """Columns of *account*: its type's, plus attributes set on the instance."""
        declared = _detect(type(account))
        if account is None or declared.columns == _ALL_COLUMNS:
            return declared
        extra = {name for name in MAGIC_COLUMNS if name not in declared.columns and hasattr(account, name)}
        if not extra:
            return declared
        return cls(columns=declared.columns | extra)


_ALL_COLUMNS = frozenset(MAGIC_COLUMNS)


@cache
def _detect(account_type: type) -> MagicColumns:
    declared = _declared_names(account_type)
    return MagicColumns(columns=frozenset(name for name in MAGIC_COLUMNS if name in declared))


def _declared_names(account_type: type) -> set[str]:
    column_names = getattr(account_type, "column_names", None)
    if callable(column_names):
        column_names = column_names()
    if column_names is not None:
        return set(column_names)

    names: set[str] = set()
    if dataclasses.is_dataclass(account_type):
        names.update(f.name for f in dataclasses.fields(account_type))
    for klass in account_type.__mro__:
        names.update(_annotation_names(klass))
        slots = klass.__dict__.get("__slots__", ())
        names.update((slots,) if isinstance(slots, str) else slots)
    names.update(name for name in MAGIC_COLUMNS if hasattr(account_type, name))
    return names


def _annotation_names(klass: type) -> set[str]:
    try:
        return set(inspect.get_annotations(klass))
    except NameError:
        # Unresolvable forward reference; the instance check still applies.
        return set()


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class LoginBookkeeper:
    """Update an account's magic columns.

    Three entry points, because each trigger updates a different set of
    columns under different rules:

    - ``on_explicit_login_success`` — a login with submitted credentials.
    - ``on_any_authenticated_request`` — any authenticated request,
      including cookie/session/API continuation. Throttled.
    - ``on_failed_login_attempt`` — a wrong password for an existing account.
    """

    __slots__ = ("_config",)

    def __init__(self, config: SessionConfig | None = None) -> None:
        self._config = config or SessionConfig()

    def on_explicit_login_success(
        self,
        account: Any,
        now: datetime | None = None,
        request_ip: str | None = None,
    ) -> None:
        columns = MagicColumns.for_account(account)
        now = now or utcnow()

        if "login_count" in columns:
            account.login_count = (getattr(account, "login_count", None) or 0) + 1

        if "failed_login_count" in columns:
            account.failed_login_count = 0

        if "current_login_at" in columns:
            if "last_login_at" in columns:
                account.last_login_at = getattr(account, "current_login_at", None)
            account.current_login_at = now

        if "current_login_ip" in columns:
            if "last_login_ip" in columns:
                account.last_login_ip = getattr(account, "current_login_ip", None)
            account.current_login_ip = request_ip

        if "last_request_at" in columns:
            account.last_request_at = now

        _log.debug("Recorded explicit login for %s", type(account).__name__)

    def should_update_last_request_at(
        self,
        account: Any,
        now: datetime,
        update_allowed: Callable[[], bool] | None = None,
    ) -> bool:
        """Whether ``last_request_at`` may be refreshed for this request.

        *update_allowed* is the request layer's veto, e.g. to ignore a
        polling endpoint that reports the remaining session time.
        """
        if account is None or "last_request_at" not in MagicColumns.for_account(account):
            return False
        if update_allowed is not None and not update_allowed():
            return False

        last_request_at = getattr(account, "last_request_at", None)
        threshold = self._config.threshold_seconds
        if last_request_at is None or threshold == 0:
            return True
        return (_as_utc(now) - _as_utc(last_request_at)).total_seconds() >= threshold

    def on_any_authenticated_request(
        self,
        account: Any,
        now: datetime | None = None,
        update_allowed: Callable[[], bool] | None = None,
    ) -> bool:
        """Refresh ``last_request_at``. Returns whether it was updated."""
        now = now or utcnow()
        if not self.should_update_last_request_at(account, now, update_allowed):
            return False
        account.last_request_at = now
        return True

    def on_failed_login_attempt(self, account: Any) -> None:
        if "failed_login_count" not in MagicColumns.for_account(account):
            return
        account.failed_login_count = (getattr(account, "failed_login_count", None) or 0) + 1
        _log.debug("failed_login_count is now %d", account.failed_login_count)
