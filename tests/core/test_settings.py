"""Tests for fixturespine.core.settings."""

import pytest

from fixturespine.core.errors import ConfigError
from fixturespine.core.settings import FixtureSettings, PrivacySettings, get_settings


class TestPrivacySettings:

    def test_nothing_enabled_by_default(self):
        assert not PrivacySettings().any_enabled

    def test_any_single_toggle_enables(self):
        assert PrivacySettings(disable_gravatar=True).any_enabled


class TestFixtureSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FIXTURES_LOG_LEVEL", raising=False)

        settings = FixtureSettings()

        assert settings.log_level == "INFO"
        assert settings.log_format == "console"
        assert settings.owner_name == "Site Owner"

    def test_reads_environment_with_nested_privacy(self, monkeypatch):
        monkeypatch.setenv("FIXTURES_LOG_LEVEL", "debug")
        monkeypatch.setenv("FIXTURES_PRIVACY__USE_TINFOIL", "true")

        settings = FixtureSettings()

        assert settings.log_level == "DEBUG"
        assert settings.privacy.use_tinfoil is True
        assert settings.privacy.any_enabled

    def test_invalid_log_format_rejected(self):
        with pytest.raises(ValueError):
            FixtureSettings(log_format="xml")


class TestGetSettings:

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FIXTURES_OWNER_NAME", "Grace")

        reloaded = get_settings(_force_reload=True)

        assert reloaded is not first
        assert reloaded.owner_name == "Grace"

    def test_invalid_environment_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("FIXTURES_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigError):
            get_settings()
