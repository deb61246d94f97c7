"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


ENV_PREFIX = "BOBOX_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable settings object; derive test variants with dataclasses.replace."""

    app_name: str = "Bobox Unit Management API"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: tuple[str, ...] = ("http://localhost:3000", "http://localhost:8501")
    seed_sample_data: bool = True
    dashboard_api_url: str = "http://127.0.0.1:3001"
    dashboard_request_timeout_seconds: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process from BOBOX_* environment variables."""
    defaults = Settings()
    return Settings(
        app_name=_env("APP_NAME", defaults.app_name),
        app_version=_env("APP_VERSION", defaults.app_version),
        log_level=_env("LOG_LEVEL", defaults.log_level),
        api_prefix=_env("API_PREFIX", defaults.api_prefix),
        host=_env("HOST", defaults.host),
        port=int(_env("PORT", str(defaults.port))),
        cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
        seed_sample_data=_env_bool("SEED_SAMPLE_DATA", defaults.seed_sample_data),
        dashboard_api_url=_env("DASHBOARD_API_URL", defaults.dashboard_api_url),
        dashboard_request_timeout_seconds=float(
            _env(
                "DASHBOARD_REQUEST_TIMEOUT_SECONDS",
                str(defaults.dashboard_request_timeout_seconds),
            )
        ),
    )
