"""Password authentication — resolve, validate and mask credentials.

A ``PasswordSession`` holds one attempt's submitted login and password,
validates them against the configured account type, and records typed
errors. The submitted password is never readable through the public API:
``session.secret`` always returns ``None`` and ``session.credentials``
masks it, so rendering a form or logging a session cannot leak it.

Usage::

    session = PasswordSession(config, {"login": "ben", "password": "s3cr3t"})
    if session.validate():
        user = session.attempted_record
    else:
        session.errors.to_dict()  # {"password": ["is not valid"]}
"""

import logging
from collections.abc import Mapping
from typing import Any

from latch._internal.text import is_blank
from latch.config import SessionConfig
from latch.errors import ConfigurationError
from latch.i18n import translate
from latch.session.errors import SessionErrors
from latch.session.policy import CredentialErrorPolicy

_log = logging.getLogger("latch.session")

PROTECTED = "<protected>"

_E_NOT_A_DICT = (
    "Credentials must be a plain dict, got {type_name}. Request parameter "
    "objects are rejected so unexpected fields cannot be mass-assigned; "
    "convert explicitly, e.g. {{'login': form['login'], 'password': form['password']}}."
)


class PasswordSession:
    """One password authentication attempt."""

    __slots__ = (
        "_config",
        "_error_policy",
        "_identifier",
        "_secret",
        "attempted_record",
        "errors",
        "invalid_password",
    )

    def __init__(self, config: SessionConfig, credentials: Any = None) -> None:
        self._config = config
        self._identifier: Any = None
        self._secret: Any = None
        self._error_policy = CredentialErrorPolicy(
            login_field=config.fields.login_field,
            generalize=config.generalize_credentials_error_messages,
        )
        self.invalid_password: bool | None = None
        self.attempted_record: Any = None
        self.errors = SessionErrors()
        if credentials is not None:
            self.set_credentials(credentials)

    @property
    def config(self) -> SessionConfig:
        return self._config

    # -- Credential fields --

    @property
    def identifier(self) -> Any:
        """The submitted login value."""
        return self._identifier

    @identifier.setter
    def identifier(self, value: Any) -> None:
        self._identifier = value

    @property
    def secret(self) -> None:
        """Always ``None``: the submitted password is write-only."""
        return None

    @secret.setter
    def secret(self, value: Any) -> None:
        self._secret = value

    @property
    def _protected_secret(self) -> Any:
        return self._secret

    # -- Credentials --

    def is_attempting_password_auth(self) -> bool:
        """True when a login field exists and a login or password was submitted."""
        if not self._config.fields.has_login_field:
            return False
        return self._identifier is not None or self._protected_secret is not None

    @property
    def credentials(self) -> dict[str, Any] | list[Any]:
        """The submitted credentials with the password masked."""
        if self.is_attempting_password_auth():
            fields = self._config.fields
            return {fields.login_field: self._identifier, fields.password_field: PROTECTED}
        return []

    @credentials.setter
    def credentials(self, value: Any) -> None:
        self.set_credentials(value)

    def set_credentials(self, value: Any) -> None:
        """Accept ``{login_field: ..., password_field: ...}``.

        Only a plain ``dict`` (or a list/tuple whose first item is one) is
        read. Other mappings raise ``TypeError``; anything else belongs to
        another authentication strategy and is ignored here. Blank values
        never overwrite what is already set.
        """
        if isinstance(value, list | tuple):
            value = value[0] if value else None
        if isinstance(value, Mapping) and type(value) is not dict:
            raise TypeError(_E_NOT_A_DICT.format(type_name=type(value).__name__))
        if not isinstance(value, dict):
            return

        fields = self._config.fields
        if not fields.has_login_field:
            return
        identifier = value.get(fields.login_field)
        if not is_blank(identifier):
            self.identifier = identifier
        if fields.has_password_field:
            secret = value.get(fields.password_field)
            if not is_blank(secret):
                self.secret = secret

    def is_invalid_password(self) -> bool:
        return self.invalid_password is True

    # -- Validation --

    def validate(self) -> bool:
        """Validate the attempt. Returns ``True`` iff there are no errors.

        Lookup and verification exceptions raised by the account type
        propagate to the caller.
        """
        self.errors.clear()
        self.attempted_record = None
        if self.is_attempting_password_auth():
            self._validate_by_password()
        return not self.errors

    def _validate_by_password(self) -> None:
        fields = self._config.fields
        self.invalid_password = False
        self._validate_blank_fields()
        if self.errors:
            return

        self.attempted_record = self._search_for_record(self._identifier)
        if self.attempted_record is None:
            _log.debug("No account found for %s=%r", fields.login_field, self._identifier)
            self._error_policy.add(self.errors, fields.login_field, "login_not_found", "is not valid")
            return

        self._validate_password()

    def _validate_blank_fields(self) -> None:
        fields = self._config.fields
        if is_blank(self._identifier):
            self.errors.add(
                fields.login_field,
                translate("error_messages.login_blank", "cannot be blank"),
                key="login_blank",
            )
        if is_blank(self._protected_secret):
            self.errors.add(
                fields.password_field,
                translate("error_messages.password_blank", "cannot be blank"),
                key="password_blank",
            )

    def _validate_password(self) -> None:
        method = self._config.verify_password_method
        verify = getattr(self.attempted_record, method, None)
        if not callable(verify):
            msg = f"{type(self.attempted_record).__name__} has no password verification method {method!r}."
            raise ConfigurationError(msg)

        if not verify(self._protected_secret):
            _log.debug("Password verification failed for %s=%r", self._config.fields.login_field, self._identifier)
            self.invalid_password = True
            self._error_policy.add(
                self.errors, self._config.fields.password_field, "password_invalid", "is not valid"
            )

    def _search_for_record(self, identifier: Any) -> Any:
        account_type = self._config.account_type
        method = self._config.find_by_login_method
        find = getattr(account_type, method, None) if account_type is not None else None
        if not callable(find):
            owner = getattr(account_type, "__name__", repr(account_type))
            msg = f"{owner} has no login lookup method {method!r}."
            raise ConfigurationError(msg)
        return find(identifier)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(credentials={self.credentials!r})"
