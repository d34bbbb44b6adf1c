"""Tests for identity value objects."""

import pytest

from neo_identity.core.exceptions import InvalidEmailError, InvalidStatusError, ValidationError
from neo_identity.platform.identity.core.value_objects import (
    EffectivePermissions,
    Email,
    OtpType,
    UserStatus,
)


class TestEmail:
    """Email normalization and validation."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("user@example.com", "user@example.com"),
            ("  User@Example.COM  ", "user@example.com"),
            ("first.last+tag@sub.example.co", "first.last+tag@sub.example.co"),
            ("a_b%c-d@my-domain.io", "a_b%c-d@my-domain.io"),
        ],
    )
    def test_normalizes_valid_addresses(self, raw, expected):
        email = Email.create(raw)

        assert str(email) == expected
        assert Email.create(str(email)) == email

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "userexample.com",
            "user@",
            "@example.com",
            "user@example",
            "user@@example.com",
            "user..name@example.com",
            "user@.example.com",
            "user@example.com.",
            "user name@example.com",
        ],
    )
    def test_rejects_malformed_addresses(self, raw):
        with pytest.raises(InvalidEmailError):
            Email.create(raw)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidEmailError):
            Email.create(42)

    def test_rejects_overlong_address(self):
        raw = "a" * 64 + "@" + "b" * 186 + ".com"

        with pytest.raises(InvalidEmailError) as exc_info:
            Email.create(raw)

        assert exc_info.value.message == "Email too long"

    def test_invalid_email_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Email.create("nope")

    def test_equality_by_normalized_value(self):
        assert Email(" Bob@Example.com") == Email("bob@example.com")
        assert hash(Email("BOB@example.com")) == hash(Email("bob@example.com"))

    def test_create_passes_email_through(self):
        email = Email("bob@example.com")

        assert Email.create(email) is email

    def test_parts(self):
        email = Email("jane.doe@acme.io")

        assert email.local_part == "jane.doe"
        assert email.domain == "acme.io"

    @pytest.mark.parametrize("domain", ["gmail.com", "yahoo.com", "hotmail.com", "outlook.com"])
    def test_free_mail_domains_are_not_corporate(self, domain):
        assert Email(f"someone@{domain}").is_corporate_email() is False

    @pytest.mark.parametrize("domain", ["acme.io", "protonmail.com", "example.org"])
    def test_unlisted_domains_count_as_corporate(self, domain):
        assert Email(f"someone@{domain}").is_corporate_email() is True

    def test_immutable(self):
        email = Email("bob@example.com")

        with pytest.raises(AttributeError):
            email.value = "alice@example.com"  # type: ignore[misc]


class TestUserStatus:
    @pytest.mark.parametrize("value", ["ACTIVE", "INACTIVE", "LOCKED"])
    def test_create_accepts_members(self, value):
        assert UserStatus.create(value).value == value

    @pytest.mark.parametrize("value", ["active", "DELETED", "", None])
    def test_create_rejects_unknown(self, value):
        with pytest.raises(InvalidStatusError):
            UserStatus.create(value)

    def test_only_active_can_login(self):
        assert UserStatus.ACTIVE.can_login()
        assert not UserStatus.INACTIVE.can_login()
        assert not UserStatus.LOCKED.can_login()

    def test_str(self):
        assert str(UserStatus.LOCKED) == "LOCKED"


class TestOtpType:
    def test_create(self):
        assert OtpType.create("PASSWORD_RESET") is OtpType.PASSWORD_RESET
        assert OtpType.create(OtpType.EMAIL_VERIFY) is OtpType.EMAIL_VERIFY

    def test_create_rejects_unknown(self):
        with pytest.raises(ValidationError):
            OtpType.create("MAGIC_LINK")


class TestEffectivePermissions:
    @pytest.fixture
    def permissions(self):
        return EffectivePermissions(
            names=frozenset({"users.read", "reports.export"}),
            scopes=frozenset({"users:read", "reports:export"}),
        )

    def test_membership_checks(self, permissions):
        assert permissions.has("users.read")
        assert not permissions.has("users.delete")
        assert "reports.export" in permissions
        assert len(permissions) == 2

    def test_any_and_all(self, permissions):
        assert permissions.has_any(["users.delete", "users.read"])
        assert not permissions.has_any(["users.delete"])
        assert permissions.has_all(["users.read", "reports.export"])
        assert not permissions.has_all(["users.read", "users.delete"])

    def test_empty_argument_edges(self, permissions):
        assert not permissions.has_any([])
        assert permissions.has_all([])

    def test_module_and_action_checks(self, permissions):
        assert permissions.has_module_access("users")
        assert not permissions.has_module_access("user")
        assert permissions.can_perform("reports", "export")
        assert not permissions.can_perform("reports", "read")

    def test_iteration_is_sorted(self, permissions):
        assert list(permissions) == ["reports.export", "users.read"]

    def test_dict_conversion(self, permissions):
        assert EffectivePermissions.from_dict(permissions.to_dict()) == permissions
