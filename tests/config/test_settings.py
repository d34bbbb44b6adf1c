"""Tests for IdentitySettings."""

import pytest
from pydantic import ValidationError

from neo_identity.config import IdentitySettings, get_settings


class TestIdentitySettings:
    def test_defaults(self, settings):
        assert settings.max_failed_login_attempts == 5
        assert settings.lockout_duration_minutes == 30
        assert settings.session_ttl_minutes == 480
        assert settings.otp_ttl_minutes == 15
        assert settings.otp_max_attempts == 3
        assert settings.used_otp_retention_hours == 24
        assert settings.otp_max_requests_per_window == 5
        assert settings.otp_request_window_minutes == 60
        assert settings.cleanup_org_ids == ["default"]
        assert settings.cache_key_prefix == "neo_identity"
        assert settings.db_schema == "identity"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("IDENTITY_SESSION_TTL_MINUTES", "60")
        monkeypatch.setenv("IDENTITY_MAX_FAILED_LOGIN_ATTEMPTS", "3")
        monkeypatch.setenv("IDENTITY_CLEANUP_ORG_IDS", '["acme", "globex"]')

        settings = IdentitySettings(_env_file=None)

        assert settings.session_ttl_minutes == 60
        assert settings.max_failed_login_attempts == 3
        assert settings.cleanup_org_ids == ["acme", "globex"]

    @pytest.mark.parametrize("schema", ["identity; DROP TABLE users", "bad-name", "a.b"])
    def test_rejects_unsafe_schema_names(self, schema):
        with pytest.raises(ValidationError):
            IdentitySettings(_env_file=None, db_schema=schema)

    def test_rejects_non_positive_limits(self):
        with pytest.raises(ValidationError):
            IdentitySettings(_env_file=None, otp_max_attempts=0)
        with pytest.raises(ValidationError):
            IdentitySettings(_env_file=None, otp_request_window_minutes=0)
        with pytest.raises(ValidationError):
            IdentitySettings(_env_file=None, otp_max_requests_per_window=-1)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
