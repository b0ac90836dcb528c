# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/config.py

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import quote

lib_logger = logging.getLogger("manifest_broker")

ENV_PREFIX = "MANIFEST_BROKER"

# Local listener
DEFAULT_HOST: str = "localhost"
DEFAULT_PORT: int = 3456
CALLBACK_PATH: str = "/callback"

# Session deadline and teardown
DEFAULT_TIMEOUT_SECONDS: float = 5 * 60
DEFAULT_SHUTDOWN_GRACE_SECONDS: float = 2.0

# GitHub API
GITHUB_API_VERSION = "2022-11-28"
GITHUB_ACCEPT = "application/vnd.github+json"
DEFAULT_GITHUB_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_EXCHANGE_TIMEOUT_SECONDS: float = 30.0

# Manifest defaults
DEFAULT_CALLBACK_URL = "http://localhost:3000/api/auth/callback/github"
DEFAULT_HOMEPAGE_URL = "https://better-auth.com"
DEFAULT_APP_NAME_PREFIX = "better-auth"


def parse_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env(name: str) -> Optional[str]:
    value = (os.getenv(f"{ENV_PREFIX}_{name}") or "").strip()
    return value or None


def _env_port(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        port = int(raw)
    except ValueError:
        lib_logger.warning(
            f"Invalid {ENV_PREFIX}_{name} value: {raw}, using default {default}"
        )
        return default
    if not 1 <= port <= 65535:
        lib_logger.warning(
            f"{ENV_PREFIX}_{name} out of range: {port}, using default {default}"
        )
        return default
    return port


def _env_seconds(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        seconds = float(raw)
    except ValueError:
        lib_logger.warning(
            f"Invalid {ENV_PREFIX}_{name} value: {raw}, using default {default}"
        )
        return default
    if seconds <= 0:
        lib_logger.warning(
            f"{ENV_PREFIX}_{name} must be positive, using default {default}"
        )
        return default
    return seconds


@dataclass(frozen=True)
class BrokerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    exchange_timeout: float = DEFAULT_EXCHANGE_TIMEOUT_SECONDS
    shutdown_grace: float = DEFAULT_SHUTDOWN_GRACE_SECONDS
    github_url: str = DEFAULT_GITHUB_URL
    api_url: str = DEFAULT_API_URL
    callback_url: str = DEFAULT_CALLBACK_URL
    homepage_url: str = DEFAULT_HOMEPAGE_URL
    app_name: Optional[str] = None
    open_browser: bool = True

    @classmethod
    def from_env(cls) -> "BrokerSettings":
        """Builds settings from MANIFEST_BROKER_* environment variables."""
        return cls(
            host=_env("HOST") or DEFAULT_HOST,
            port=_env_port("PORT", DEFAULT_PORT),
            timeout=_env_seconds("TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            exchange_timeout=_env_seconds(
                "EXCHANGE_TIMEOUT", DEFAULT_EXCHANGE_TIMEOUT_SECONDS
            ),
            shutdown_grace=_env_seconds(
                "SHUTDOWN_GRACE", DEFAULT_SHUTDOWN_GRACE_SECONDS
            ),
            github_url=(_env("GITHUB_URL") or DEFAULT_GITHUB_URL).rstrip("/"),
            api_url=(_env("API_URL") or DEFAULT_API_URL).rstrip("/"),
            callback_url=_env("CALLBACK_URL") or DEFAULT_CALLBACK_URL,
            homepage_url=_env("HOMEPAGE_URL") or DEFAULT_HOMEPAGE_URL,
            app_name=_env("APP_NAME"),
            open_browser=parse_bool_env(f"{ENV_PREFIX}_OPEN_BROWSER", True),
        )

    def with_overrides(self, **overrides) -> "BrokerSettings":
        """Returns a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        for key in ("github_url", "api_url"):
            if key in changes:
                changes[key] = changes[key].rstrip("/")
        return replace(self, **changes)

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def redirect_url(self) -> str:
        return f"{self.base_url}{CALLBACK_PATH}"

    @property
    def app_create_url(self) -> str:
        return f"{self.github_url}/settings/apps/new"

    def conversion_url(self, code: str) -> str:
        return f"{self.api_url}/app-manifests/{quote(code, safe='')}/conversions"
