"""Session configuration.

SessionConfig is a frozen dataclass, resolved once per session type and
shared by every attempt. Credential field defaults are derived from the
account type's declared ``login_field`` / ``email_field``::

    class User:
        login_field = "login"

        @classmethod
        def find_by_smart_case_login_field(cls, login: str) -> "User | None": ...

        def valid_password(self, password: str) -> bool: ...

    config = SessionConfig(account_type=User)
    config.fields.login_field     # "login"
    config.fields.password_field  # "password"
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from latch.errors import ConfigurationError

DEFAULT_FIND_BY_LOGIN_METHOD = "find_by_smart_case_login_field"
DEFAULT_VERIFY_PASSWORD_METHOD = "valid_password"
DEFAULT_PASSWORD_FIELD = "password"


@dataclass(frozen=True, slots=True)
class CredentialFields:
    """Which credential fields a session type carries.

    Built once by ``SessionConfig``. A session type without a login field
    never attempts password authentication.
    """

    login_field: str | None = None
    password_field: str | None = None

    @property
    def has_login_field(self) -> bool:
        return bool(self.login_field)

    @property
    def has_password_field(self) -> bool:
        return bool(self.password_field)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Password session configuration. Immutable after creation.

    Attributes:
        account_type: The account class. Looked up with
            ``find_by_login_method`` and consulted for field defaults.
        find_by_login_method: Name of the classmethod on ``account_type``
            that returns the account for a login value, or ``None``.
        generalize_credentials_error_messages: ``True`` collapses
            "login not found" and "password invalid" into one general
            error. A string does the same with a custom message.
        login_field: Credential key carrying the login. Defaults to
            ``account_type.login_field`` or ``account_type.email_field``.
        password_field: Credential key carrying the password. Defaults
            to ``"password"`` when a login field exists.
        verify_password_method: Name of the account method that checks
            a raw password. A trailing ``?`` is accepted and stripped.
        last_request_at_threshold: Minimum seconds (or ``timedelta``)
            between ``last_request_at`` updates on continued sessions.
    """

    account_type: Any = None
    find_by_login_method: str = DEFAULT_FIND_BY_LOGIN_METHOD
    generalize_credentials_error_messages: bool | str = False
    login_field: str | None = None
    password_field: str | None = None
    verify_password_method: str = DEFAULT_VERIFY_PASSWORD_METHOD
    last_request_at_threshold: int | float | timedelta = 0
    fields: CredentialFields = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        login_field = self.login_field
        if login_field is None and self.account_type is not None:
            login_field = getattr(self.account_type, "login_field", None) or getattr(
                self.account_type, "email_field", None
            )

        password_field = self.password_field
        if password_field is None and login_field:
            password_field = DEFAULT_PASSWORD_FIELD
        if password_field and not login_field:
            msg = f"password_field {password_field!r} requires a login_field to be configured."
            raise ConfigurationError(msg)

        if not self.find_by_login_method:
            msg = "find_by_login_method must not be empty."
            raise ConfigurationError(msg)

        verify_method = self.verify_password_method.removesuffix("?")
        if not verify_method:
            msg = "verify_password_method must not be empty."
            raise ConfigurationError(msg)

        if _seconds(self.last_request_at_threshold) < 0:
            msg = "last_request_at_threshold must not be negative."
            raise ConfigurationError(msg)

        object.__setattr__(self, "login_field", login_field)
        object.__setattr__(self, "password_field", password_field)
        object.__setattr__(self, "verify_password_method", verify_method)
        object.__setattr__(
            self, "fields", CredentialFields(login_field=login_field, password_field=password_field)
        )

    @property
    def threshold_seconds(self) -> float:
        """``last_request_at_threshold`` as seconds."""
        return _seconds(self.last_request_at_threshold)


def _seconds(value: int | float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)
