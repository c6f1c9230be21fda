"""Unit tests for environment-sourced settings."""

import os
from unittest.mock import patch

import pytest

from menu_admin_service.config.settings import Settings
from menu_admin_service.models.menu_models import DEFAULT_CATEGORIES


@pytest.mark.unit
class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    @patch.dict(os.environ, {"ADMIN_PASSWORD": "pw", "SESSION_SECRET": "s3cret"}, clear=True)
    def test_defaults(self) -> None:
        """Test that optional settings fall back to their defaults."""
        settings = Settings.from_env()

        assert settings.admin_password == "pw"
        assert settings.session_secret == "s3cret"
        assert settings.environment == "development"
        assert settings.data_file == "data.json"
        assert settings.categories == DEFAULT_CATEGORIES
        assert settings.session_ttl_seconds == 86400
        assert settings.login_rate_limit == 5
        assert settings.api_rate_limit == 100
        assert settings.rate_limit_window_seconds == 900
        assert settings.trusted_proxy_hops == 0
        assert settings.is_production is False

    @patch.dict(
        os.environ,
        {
            "ADMIN_PASSWORD": "pw",
            "SESSION_SECRET": "s3cret",
            "ENVIRONMENT": "production",
            "MENU_DATA_FILE": "/srv/menu/data.json",
            "MENU_CATEGORIES": " tacos, burritos ,,drinks",
            "SESSION_TTL_SECONDS": "600",
            "LOGIN_RATE_LIMIT": "3",
            "API_RATE_LIMIT": "50",
            "RATE_LIMIT_WINDOW_SECONDS": "60",
            "TRUSTED_PROXY_HOPS": "1",
        },
        clear=True,
    )
    def test_overrides(self) -> None:
        """Test that every setting can be overridden from the environment."""
        settings = Settings.from_env()

        assert settings.is_production is True
        assert settings.data_file == "/srv/menu/data.json"
        assert settings.categories == ("tacos", "burritos", "drinks")
        assert settings.session_ttl_seconds == 600
        assert settings.login_rate_limit == 3
        assert settings.api_rate_limit == 50
        assert settings.rate_limit_window_seconds == 60
        assert settings.trusted_proxy_hops == 1

    @pytest.mark.parametrize(
        "env",
        [
            {},
            {"ADMIN_PASSWORD": "pw"},
            {"SESSION_SECRET": "s3cret"},
            {"ADMIN_PASSWORD": "", "SESSION_SECRET": "s3cret"},
        ],
    )
    def test_missing_secrets_prevent_startup(self, env: dict[str, str]) -> None:
        """Test that absent secrets raise ValueError."""
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ValueError, match="ADMIN_PASSWORD and SESSION_SECRET must be set"):
                Settings.from_env()

    @patch.dict(
        os.environ,
        {"ADMIN_PASSWORD": "pw", "SESSION_SECRET": "s3cret", "LOGIN_RATE_LIMIT": "five"},
        clear=True,
    )
    def test_invalid_number_raises(self) -> None:
        """Test that a non-numeric limit is rejected."""
        with pytest.raises(ValueError):
            Settings.from_env()
