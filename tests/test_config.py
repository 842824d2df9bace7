from __future__ import annotations

import importlib

import pytest

import config


def test_gateway_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GATEWAY_BASE_URL", "GATEWAY_TIMEOUT_SECONDS", "GATEWAY_MAX_TRIES"):
        monkeypatch.delenv(name, raising=False)
    settings = config.load_gateway_settings()
    assert settings == config.GatewaySettings()
    assert settings.base_url == "http://localhost:5000/api"


def test_gateway_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GATEWAY_BASE_URL", " https://crm.example.org/api/ ")
    monkeypatch.setenv("GATEWAY_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("GATEWAY_MAX_TRIES", "5")
    settings = config.load_gateway_settings()
    assert settings.base_url == "https://crm.example.org/api"
    assert settings.timeout_seconds == 4.5
    assert settings.max_tries == 5


@pytest.mark.parametrize("raw", ["soon", "-3", "0"])
def test_invalid_timeout_warns_and_falls_back(raw: str) -> None:
    with pytest.warns(RuntimeWarning):
        assert config._normalise_timeout(raw) == config.DEFAULT_GATEWAY_TIMEOUT_SECONDS


@pytest.mark.parametrize("raw", ["many", "0", "-1"])
def test_invalid_max_tries_warns_and_falls_back(raw: str) -> None:
    with pytest.warns(RuntimeWarning):
        assert config._parse_positive_int_env(raw, env_var="GATEWAY_MAX_TRIES", default=3) == 3


def test_blank_values_use_defaults_silently() -> None:
    assert config._parse_positive_int_env("  ", env_var="GATEWAY_MAX_TRIES", default=3) == 3
    assert config._normalise_timeout("") == config.DEFAULT_GATEWAY_TIMEOUT_SECONDS
    assert config._normalise_log_level(None) == "INFO"


def test_log_level_validation() -> None:
    assert config._normalise_log_level("debug") == "DEBUG"
    with pytest.warns(RuntimeWarning):
        assert config._normalise_log_level("chatty") == "INFO"


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), (" on ", True), ("0", False), (None, False)])
def test_truthy_flags(raw: str | None, expected: bool) -> None:
    assert config._is_truthy_flag(raw) is expected


def test_audit_on_load_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUDIT_ON_LOAD", "false")
    try:
        assert importlib.reload(config).AUDIT_ON_LOAD is False
    finally:
        monkeypatch.delenv("AUDIT_ON_LOAD", raising=False)
        importlib.reload(config)
    assert config.AUDIT_ON_LOAD is True
