import pytest

from manifest_broker.config import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT_SECONDS,
    BrokerSettings,
)

ENV_NAMES = [
    "HOST",
    "PORT",
    "TIMEOUT",
    "EXCHANGE_TIMEOUT",
    "SHUTDOWN_GRACE",
    "GITHUB_URL",
    "API_URL",
    "CALLBACK_URL",
    "HOMEPAGE_URL",
    "APP_NAME",
    "OPEN_BROWSER",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(f"MANIFEST_BROKER_{name}", raising=False)


def test_defaults_match_documented_values() -> None:
    settings = BrokerSettings.from_env()

    assert settings.port == 3456
    assert settings.timeout == 300
    assert settings.exchange_timeout == 30
    assert settings.shutdown_grace == 2
    assert settings.redirect_url == "http://localhost:3456/callback"
    assert settings.app_create_url == "https://github.com/settings/apps/new"
    assert settings.callback_url == "http://localhost:3000/api/auth/callback/github"
    assert settings.app_name is None
    assert settings.open_browser is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MANIFEST_BROKER_PORT", "4567")
    monkeypatch.setenv("MANIFEST_BROKER_TIMEOUT", "60")
    monkeypatch.setenv("MANIFEST_BROKER_GITHUB_URL", "https://ghe.example.com/")
    monkeypatch.setenv("MANIFEST_BROKER_APP_NAME", "my-app")
    monkeypatch.setenv("MANIFEST_BROKER_OPEN_BROWSER", "no")

    settings = BrokerSettings.from_env()

    assert settings.port == 4567
    assert settings.timeout == 60
    assert settings.redirect_url == "http://localhost:4567/callback"
    assert settings.app_create_url == "https://ghe.example.com/settings/apps/new"
    assert settings.app_name == "my-app"
    assert settings.open_browser is False


@pytest.mark.parametrize("raw", ["abc", "0", "70000"])
def test_invalid_port_falls_back_to_default(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("MANIFEST_BROKER_PORT", raw)

    assert BrokerSettings.from_env().port == DEFAULT_PORT


@pytest.mark.parametrize("raw", ["soon", "-5", "0"])
def test_invalid_timeout_falls_back_to_default(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("MANIFEST_BROKER_TIMEOUT", raw)

    assert BrokerSettings.from_env().timeout == DEFAULT_TIMEOUT_SECONDS


def test_with_overrides_ignores_none() -> None:
    base = BrokerSettings(port=5000)

    updated = base.with_overrides(port=None, timeout=10.0, api_url="https://api.example.com/")

    assert updated.port == 5000
    assert updated.timeout == 10.0
    assert updated.api_url == "https://api.example.com"
    assert base.timeout == DEFAULT_TIMEOUT_SECONDS
