"""Credential error policy — field-specific or generalized messages.

Both "login not found" and "password invalid" go through one policy so the
two cases can never drift apart. In generalized mode they produce the same
single ``BASE`` error, which keeps an attacker from telling an unknown login
from a wrong password.
"""

from dataclasses import dataclass

from latch._internal.text import humanize
from latch.i18n import translate
from latch.session.errors import BASE, SessionErrors

GENERAL_CREDENTIALS_ERROR = "general_credentials_error"


@dataclass(frozen=True, slots=True)
class CredentialErrorPolicy:
    """Decide where a credential error is attached and what it says.

    ``generalize`` mirrors ``SessionConfig.generalize_credentials_error_messages``:
    ``False`` for field errors, ``True`` for the computed general message,
    or a string to use as the general message.
    """

    login_field: str | None
    generalize: bool | str = False

    @property
    def is_generalized(self) -> bool:
        return self.generalize is True or isinstance(self.generalize, str)

    @property
    def general_message(self) -> str:
        if isinstance(self.generalize, str) and self.generalize:
            return self.generalize
        return f"{humanize(self.login_field or '')}/Password combination is not valid"

    def add(self, errors: SessionErrors, field: str, key: str, default: str) -> None:
        if self.is_generalized:
            errors.add(
                BASE,
                translate(f"error_messages.{GENERAL_CREDENTIALS_ERROR}", self.general_message),
                key=GENERAL_CREDENTIALS_ERROR,
            )
            return
        errors.add(field, translate(f"error_messages.{key}", default), key=key)
