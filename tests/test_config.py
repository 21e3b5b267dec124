"""Tests für die Settings."""

import pytest
from pydantic import ValidationError

from app.config import LogLevel, ProviderKind, Settings, get_settings, reset_settings
from tests.conftest import make_settings


class TestSettings:
    def test_defaults_are_unconfigured(self):
        settings = make_settings()

        assert settings.completion_provider == ProviderKind.CLAUDE
        assert settings.is_provider_configured is False
        assert settings.log_level == LogLevel.INFO

    def test_blank_key_is_none(self):
        settings = make_settings(anthropic_api_key="   ", gemini_api_key="")

        assert settings.anthropic_api_key is None
        assert settings.gemini_api_key is None

    def test_provider_key_follows_selection(self):
        settings = make_settings(
            completion_provider=ProviderKind.GEMINI,
            anthropic_api_key="sk-ant-a",
            gemini_api_key="g-key",
        )
        assert settings.provider_api_key == "g-key"
        assert settings.is_provider_configured is True

    def test_base_url_trailing_slash(self):
        settings = make_settings(gemini_base_url="https://gl.example/v1beta///")
        assert settings.gemini_base_url == "https://gl.example/v1beta"

    def test_provider_from_environment(self, monkeypatch):
        monkeypatch.setenv("COMPLETION_PROVIDER", "gemini")
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        settings = Settings(_env_file=None)

        assert settings.completion_provider == ProviderKind.GEMINI
        assert settings.provider_api_key == "env-key"

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            make_settings(port=0)


class TestSettingsSingleton:
    def test_reset(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        reset_settings()
        first = get_settings()

        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first
        reset_settings()
