from __future__ import annotations

import pytest

from issuance.core.config import load_settings

_VARS = ("APP_ENV", "LOG_LEVEL", "LOG_JSON", "REGISTRY_ADMIN", "REGISTRY_CLOCK")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


# ---- valid values ----


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.registry_admin == "deployer"
    assert settings.registry_clock == "logical"
    assert settings.is_dev


def test_load_settings_respects_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("REGISTRY_ADMIN", "ops-multisig")
    monkeypatch.setenv("REGISTRY_CLOCK", "wall")
    settings = load_settings()
    assert settings.is_prod
    assert settings.log_level == "error"
    assert settings.log_json is True
    assert settings.registry_admin == "ops-multisig"
    assert settings.registry_clock == "wall"


def test_load_settings_normalizes_case_and_whitespace(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("APP_ENV", "  TEST ")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_JSON", " Yes ")
    settings = load_settings()
    assert settings.is_test
    assert settings.log_level == "debug"
    assert settings.log_json is True


def test_load_settings_admin_keeps_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REGISTRY_ADMIN", " SP2ADMIN ")
    assert load_settings().registry_admin == "SP2ADMIN"


@pytest.mark.parametrize("raw", ["false", "0", "no"])
def test_load_settings_log_json_falsy(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("LOG_JSON", raw)
    assert load_settings().log_json is False


# ---- invalid values ----


def test_load_settings_rejects_invalid_app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "staging")
    with pytest.raises(ValueError, match="APP_ENV must be dev|test|prod"):
        load_settings()


def test_load_settings_rejects_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL must be debug|info|warning|error"):
        load_settings()


def test_load_settings_rejects_non_boolean_log_json(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_JSON", "maybe")
    with pytest.raises(ValueError, match="LOG_JSON must be a boolean"):
        load_settings()


def test_load_settings_rejects_blank_admin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REGISTRY_ADMIN", "   ")
    with pytest.raises(ValueError, match="REGISTRY_ADMIN must be non-empty"):
        load_settings()


def test_load_settings_rejects_unknown_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REGISTRY_CLOCK", "block")
    with pytest.raises(ValueError, match="REGISTRY_CLOCK must be logical|wall"):
        load_settings()
