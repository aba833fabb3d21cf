from __future__ import annotations

import logging

import pytest

from ytaudio.config import PROJECT_ROOT, load_config, setup_logging, validate_config

ENV_KEYS = [
    "HOST",
    "PORT",
    "ALLOW_ORIGINS",
    "SERVICE_NAME",
    "LOG_LEVEL",
    "EXTRACTOR_BACKEND",
    "SIMPLE_BACKEND",
    "YTDLP_BINARY",
    "COOKIES_FILE",
    "PLAYER_CLIENTS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = load_config()

    assert config["port"] == 10000
    assert config["allow_origins"] == ["*"]
    assert config["extractor_backend"] == "library"
    assert config["simple_backend"] == "binary"
    assert config["player_clients"] == ["android", "web"]
    assert config["cookies_file"] == str(PROJECT_ROOT / "cookies.txt")
    assert validate_config(config) == []


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("EXTRACTOR_BACKEND", "Binary")
    monkeypatch.setenv("ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("COOKIES_FILE", "/etc/yt/cookies.txt")

    config = load_config()
    assert config["port"] == 8080
    assert config["extractor_backend"] == "binary"
    assert config["simple_backend"] == "library"
    assert config["allow_origins"] == ["https://a.example", "https://b.example"]
    assert config["cookies_file"] == "/etc/yt/cookies.txt"


def test_validate_reports_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXTRACTOR_BACKEND", "ytdl-core")
    monkeypatch.setenv("PORT", "0")
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    errors = validate_config(load_config())
    assert len(errors) == 3
    assert any("EXTRACTOR_BACKEND" in e for e in errors)


def test_non_numeric_port_reported_by_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "http")

    config = load_config()
    assert config["port"] == "http"
    errors = validate_config(config)
    assert errors == ["PORT must be an integer between 1 and 65535, got 'http'"]


def test_setup_logging_quiets_yt_dlp() -> None:
    setup_logging("DEBUG")

    assert logging.getLogger("yt_dlp").level == logging.WARNING
