"""Login sessions — credential validation and magic column bookkeeping.

Usage::

    from latch.session import Session

    session = Session(config, {"login": "ben", "password": "s3cr3t"})
    if not session.save(controller):
        session.errors.full_messages()
"""

from latch.session.base import Controller, Session
from latch.session.errors import BASE, SessionError, SessionErrors
from latch.session.magic_columns import MAGIC_COLUMNS, LoginBookkeeper, MagicColumns
from latch.session.password import PROTECTED, PasswordSession
from latch.session.policy import CredentialErrorPolicy

__all__ = [
    "BASE",
    "MAGIC_COLUMNS",
    "PROTECTED",
    "Controller",
    "CredentialErrorPolicy",
    "LoginBookkeeper",
    "MagicColumns",
    "PasswordSession",
    "Session",
    "SessionError",
    "SessionErrors",
]
