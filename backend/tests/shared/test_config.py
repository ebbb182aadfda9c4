"""Tests for shared/config.py."""

from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "RentHub API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.log_level == "INFO"
        assert settings.session_resolution_timeout_seconds == 10.0
        assert settings.profile_service_url.endswith("/api/create-profile")

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
            "SUPABASE_JWT_SECRET": "test-jwt-secret",
        }):
            settings = Settings(_env_file=None)
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"
            assert settings.supabase_service_role_key == "test-service-key"
            assert settings.supabase_jwt_secret == "test-jwt-secret"

    def test_loads_session_timeouts_from_env(self):
        """Timeouts should be configurable."""
        with patch.dict(os.environ, {
            "SESSION_RESOLUTION_TIMEOUT_SECONDS": "2.5",
            "PROFILE_SERVICE_TIMEOUT_SECONDS": "3",
        }):
            settings = Settings(_env_file=None)
            assert settings.session_resolution_timeout_seconds == 2.5
            assert settings.profile_service_timeout_seconds == 3.0


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
