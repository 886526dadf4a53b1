"""Tests for PasswordSession — credential handling and validation."""

from collections import OrderedDict
from types import MappingProxyType

import pytest

from conftest import Account, BareAccount
from latch.config import SessionConfig
from latch.errors import ConfigurationError
from latch.i18n import set_translator
from latch.session.errors import BASE
from latch.session.password import PROTECTED, PasswordSession

# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestCredentials:
    def test_masks_password(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "benrocks"})
        assert session.credentials == {"login": "ben", "password": PROTECTED}
        assert "benrocks" not in repr(session)

    def test_secret_not_publicly_readable(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "benrocks"})
        assert session.secret is None
        assert session.identifier == "ben"

    def test_credentials_setter(self, config: SessionConfig) -> None:
        session = PasswordSession(config)
        session.credentials = {"login": "ben", "password": "benrocks"}
        assert session.credentials == {"login": "ben", "password": PROTECTED}

    def test_not_attempting_returns_base_view(self, config: SessionConfig) -> None:
        assert PasswordSession(config).credentials == []

    def test_extra_keys_ignored(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "x", "admin": True})
        assert session.credentials == {"login": "ben", "password": PROTECTED}

    def test_blank_values_do_not_overwrite(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "benrocks"})
        session.set_credentials({"login": "  ", "password": ""})
        assert session.identifier == "ben"
        assert session._protected_secret == "benrocks"

    def test_list_form(self, config: SessionConfig) -> None:
        session = PasswordSession(config, [{"login": "ben", "password": "benrocks"}])
        assert session.identifier == "ben"

    def test_non_mapping_ignored(self, config: SessionConfig) -> None:
        session = PasswordSession(config, "some-token")
        assert session.is_attempting_password_auth() is False

    @pytest.mark.parametrize(
        "value",
        [
            MappingProxyType({"login": "ben"}),
            OrderedDict(login="ben"),
        ],
    )
    def test_rejects_non_dict_mappings(self, config: SessionConfig, value: object) -> None:
        session = PasswordSession(config)
        with pytest.raises(TypeError, match="plain dict"):
            session.set_credentials(value)


# ---------------------------------------------------------------------------
# Attempt detection
# ---------------------------------------------------------------------------


class TestAttempting:
    def test_identifier_only(self, config: SessionConfig) -> None:
        assert PasswordSession(config, {"login": "ben"}).is_attempting_password_auth()

    def test_secret_only(self, config: SessionConfig) -> None:
        assert PasswordSession(config, {"password": "x"}).is_attempting_password_auth()

    def test_nothing_submitted(self, config: SessionConfig) -> None:
        assert not PasswordSession(config).is_attempting_password_auth()

    def test_inert_without_login_field(self) -> None:
        session = PasswordSession(SessionConfig(), {"login": "ben", "password": "x"})
        session.identifier = "ben"
        assert session.is_attempting_password_auth() is False
        assert session.validate() is True
        assert Account.lookups == []


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidate:
    def test_success(self, config: SessionConfig, ben: Account) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "benrocks"})
        assert session.validate() is True
        assert not session.errors
        assert session.attempted_record is ben
        assert session.is_invalid_password() is False

    def test_lookup_uses_configured_method(self, ben: Account) -> None:
        config = SessionConfig(account_type=Account, find_by_login_method="find_by_smart_case_login_field")
        PasswordSession(config, {"login": "BEN", "password": "benrocks"}).validate()
        assert Account.lookups == ["BEN"]

    def test_login_not_found(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "nobody", "password": "x"})
        assert session.validate() is False
        assert session.errors.items() == [("login", "is not valid")]
        assert session.errors.keys() == ["login_not_found"]
        assert session.is_invalid_password() is False
        assert session.attempted_record is None

    def test_password_invalid(self, config: SessionConfig, ben: Account) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "wrong"})
        assert session.validate() is False
        assert session.is_invalid_password() is True
        assert session.errors.items() == [("password", "is not valid")]
        assert session.errors.keys() == ["password_invalid"]
        assert session.attempted_record is ben

    def test_both_blank_accumulate_without_lookup(self, config: SessionConfig, ben: Account) -> None:
        session = PasswordSession(config)
        session.identifier = ""
        session.secret = ""
        assert session.validate() is False
        assert session.errors.keys() == ["login_blank", "password_blank"]
        assert session.errors.to_dict() == {
            "login": ["cannot be blank"],
            "password": ["cannot be blank"],
        }
        assert Account.lookups == []
        assert ben.failed_login_count == 0

    def test_blank_password_only(self, config: SessionConfig, ben: Account) -> None:
        session = PasswordSession(config, {"login": "ben"})
        assert session.validate() is False
        assert session.errors.keys() == ["password_blank"]
        assert Account.lookups == []

    def test_revalidate_clears_previous_errors(self, config: SessionConfig, ben: Account) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "wrong"})
        assert session.validate() is False
        session.secret = "benrocks"
        assert session.validate() is True
        assert not session.errors
        assert session.is_invalid_password() is False

    def test_invalid_password_unknown_before_validation(self, config: SessionConfig) -> None:
        session = PasswordSession(config, {"login": "ben", "password": "x"})
        assert session.invalid_password is None
        assert session.is_invalid_password() is False

    def test_translated_blank_messages(self, config: SessionConfig) -> None:
        set_translator(lambda key, default: key)
        session = PasswordSession(config, {"login": "ben"})
        session.validate()
        assert session.errors.on("password") == ["error_messages.password_blank"]


class TestGeneralized:
    def test_not_found_and_invalid_are_indistinguishable(self, ben: Account) -> None:
        config = SessionConfig(account_type=Account, generalize_credentials_error_messages=True)
        missing = PasswordSession(config, {"login": "nobody", "password": "benrocks"})
        wrong = PasswordSession(config, {"login": "ben", "password": "wrong"})
        assert missing.validate() is False
        assert wrong.validate() is False
        assert missing.errors.items() == wrong.errors.items()
        assert missing.errors.keys() == wrong.errors.keys() == ["general_credentials_error"]
        assert missing.errors.items() == [(BASE, "Login/Password combination is not valid")]

    def test_custom_message(self) -> None:
        config = SessionConfig(
            account_type=Account,
            generalize_credentials_error_messages="Your login information is invalid",
        )
        session = PasswordSession(config, {"login": "nobody", "password": "x"})
        session.validate()
        assert session.errors.items() == [(BASE, "Your login information is invalid")]

    def test_blank_errors_stay_field_specific(self) -> None:
        config = SessionConfig(account_type=Account, generalize_credentials_error_messages=True)
        session = PasswordSession(config, {"login": "ben"})
        session.validate()
        assert session.errors.items() == [("password", "cannot be blank")]

    def test_email_field_label(self) -> None:
        BareAccount.store["a@example.com"] = BareAccount(id=1, email="a@example.com", password="pw")
        config = SessionConfig(account_type=BareAccount, generalize_credentials_error_messages=True)
        session = PasswordSession(config, {"email": "a@example.com", "password": "nope"})
        session.validate()
        assert session.errors.items() == [(BASE, "Email/Password combination is not valid")]
        assert session.is_invalid_password() is True


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class _Boom(Exception):
    pass


class _BrokenStore:
    login_field = "login"

    @classmethod
    def find_by_smart_case_login_field(cls, login: str) -> None:
        raise _Boom(login)


class TestCollaborators:
    def test_lookup_exception_propagates(self) -> None:
        session = PasswordSession(SessionConfig(account_type=_BrokenStore), {"login": "ben", "password": "x"})
        with pytest.raises(_Boom):
            session.validate()

    def test_verify_exception_propagates(self, ben: Account) -> None:
        def explode(attempt: str) -> bool:
            raise _Boom(attempt)

        ben.valid_password = explode  # type: ignore[method-assign]
        session = PasswordSession(SessionConfig(account_type=Account), {"login": "ben", "password": "x"})
        with pytest.raises(_Boom):
            session.validate()

    def test_missing_lookup_method(self) -> None:
        config = SessionConfig(account_type=Account, find_by_login_method="find_by_username")
        session = PasswordSession(config, {"login": "ben", "password": "x"})
        with pytest.raises(ConfigurationError, match="find_by_username"):
            session.validate()

    def test_missing_verify_method(self, ben: Account) -> None:
        config = SessionConfig(account_type=Account, verify_password_method="check_password")
        session = PasswordSession(config, {"login": "ben", "password": "x"})
        with pytest.raises(ConfigurationError, match="check_password"):
            session.validate()

    def test_custom_verify_method(self, ben: Account) -> None:
        Account.check = lambda self, attempt: attempt == "override"  # type: ignore[attr-defined]
        try:
            config = SessionConfig(account_type=Account, verify_password_method="check?")
            session = PasswordSession(config, {"login": "ben", "password": "override"})
            assert session.validate() is True
        finally:
            del Account.check  # type: ignore[attr-defined]


def test_empty_generalized_message_hides_which_half_failed(ben: Account) -> None:
    config = SessionConfig(account_type=Account, generalize_credentials_error_messages="")
    missing = PasswordSession(config, {"login": "nobody", "password": "benrocks"})
    wrong = PasswordSession(config, {"login": "ben", "password": "wrong"})
    missing.validate()
    wrong.validate()
    assert missing.errors.items() == wrong.errors.items() == [(BASE, "Login/Password combination is not valid")]
