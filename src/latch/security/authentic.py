"""Password support for account models.

``PasswordAuthentic`` gives an account class the ``valid_password``
method a ``SessionConfig`` calls by default, backed by a stored PHC hash::

    @dataclass
    class User(PasswordAuthentic):
        login: str
        crypted_password: str = ""

        login_field = "login"

    user = User(login="ben")
    user.set_password("s3cr3t")
    user.valid_password("s3cr3t")  # True
"""

import logging
from typing import Any

from latch.security.passwords import hash_password, needs_rehash, verify_password

_log = logging.getLogger("latch.security")


class PasswordAuthentic:
    """Mixin storing a password hash in ``crypted_password``."""

    crypted_password: Any = None

    def set_password(self, password: str) -> None:
        self.crypted_password = hash_password(password)

    def valid_password(self, attempt: str) -> bool:
        """Check *attempt*; upgrade a legacy hash in place when it matches."""
        stored = self.crypted_password
        if not stored or not verify_password(attempt, stored):
            return False
        if needs_rehash(stored):
            _log.info("Upgrading password hash for %s", type(self).__name__)
            self.crypted_password = hash_password(attempt)
        return True
