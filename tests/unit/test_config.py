"""Unit tests for environment-driven settings selection."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import (
    AppBaseSettings,
    DevelopmentSettings,
    ProductionSettings,
    _read_env_hint,
    load_settings,
)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    return tmp_path


def test_defaults_match_service_policy(isolated_env):
    settings = AppBaseSettings()

    assert settings.CACHE_TTL_MS == 1000
    assert settings.RATE_LIMIT_WINDOW_MS == 60_000
    assert settings.RATE_LIMIT_MAX_REQUESTS == 100
    assert settings.CLIENT_IP_HEADER == "CF-Connecting-IP"
    assert settings.TIMEZONE_FORMAT_CHECK is True
    assert settings.API_PREFIX == "/api"


def test_development_is_default(isolated_env):
    settings = load_settings()

    assert isinstance(settings, DevelopmentSettings)
    assert settings.DEBUG is True


def test_production_selected_by_name(isolated_env):
    settings = load_settings("prod")

    assert isinstance(settings, ProductionSettings)
    assert settings.DEBUG is False
    assert settings.RATE_LIMIT_FALLBACK_TO_PEER is True


def test_environment_read_from_env_file(isolated_env):
    (isolated_env / ".env").write_text("# comment\nENVIRONMENT=production\n", encoding="utf-8")
    (isolated_env / ".env.production").write_text("RATE_LIMIT_MAX_REQUESTS=5\n", encoding="utf-8")

    assert _read_env_hint() == "production"

    settings = load_settings()
    assert isinstance(settings, ProductionSettings)
    assert settings.RATE_LIMIT_MAX_REQUESTS == 5


def test_environment_variable_wins_over_file(isolated_env, monkeypatch):
    (isolated_env / ".env").write_text("ENVIRONMENT=production\n", encoding="utf-8")
    monkeypatch.setenv("ENVIRONMENT", "development")

    assert _read_env_hint() == "development"


def test_invalid_values_are_rejected(isolated_env):
    with pytest.raises(ValidationError):
        AppBaseSettings(RATE_LIMIT_MAX_REQUESTS=0)
    with pytest.raises(ValidationError):
        AppBaseSettings(API_PREFIX="")
