"""Shared fixtures — an in-memory account type for session tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

import pytest

from latch.config import SessionConfig
from latch.i18n import set_translator
from latch.security.audit import set_security_event_sink


@dataclass
class Account:
    """Account declaring every magic column."""

    id: int
    login: str
    password: str
    login_count: int | None = 0
    failed_login_count: int | None = 0
    last_request_at: datetime | None = None
    current_login_at: datetime | None = None
    last_login_at: datetime | None = None
    current_login_ip: str | None = None
    last_login_ip: str | None = None
    saves: int = 0

    login_field: ClassVar[str] = "login"
    store: ClassVar[dict[str, Account]] = {}
    lookups: ClassVar[list[str]] = []

    @classmethod
    def find_by_smart_case_login_field(cls, login: str) -> Account | None:
        cls.lookups.append(login)
        return cls.store.get(login.lower())

    def valid_password(self, attempt: str) -> bool:
        return attempt == self.password

    def save(self) -> None:
        self.saves += 1


@dataclass
class BareAccount:
    """Account declaring none of the magic columns."""

    id: int
    email: str
    password: str

    email_field: ClassVar[str] = "email"
    store: ClassVar[dict[str, BareAccount]] = {}

    @classmethod
    def find_by_smart_case_login_field(cls, email: str) -> BareAccount | None:
        return cls.store.get(email)

    def valid_password(self, attempt: str) -> bool:
        return attempt == self.password


@dataclass(frozen=True, slots=True)
class FakeController:
    remote_ip: str | None = "10.0.0.1"


@pytest.fixture(autouse=True)
def _reset_hooks():
    Account.store.clear()
    Account.lookups.clear()
    BareAccount.store.clear()
    yield
    set_translator(None)
    set_security_event_sink(None)


@pytest.fixture
def ben() -> Account:
    account = Account(id=1, login="ben", password="benrocks")
    Account.store["ben"] = account
    return account


@pytest.fixture
def config() -> SessionConfig:
    return SessionConfig(account_type=Account)
