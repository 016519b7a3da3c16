"""Configuration settings for the storefront."""
from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Config:
    """Base configuration class."""

    SECRET_KEY = os.environ.get("STOREFRONT_SECRET_KEY", "storefront-dev-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "STOREFRONT_DATABASE_URI", f"sqlite:///{BASE_DIR / 'storefront.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ENVIRONMENT = os.environ.get("STOREFRONT_ENV", "development")
    LOG_RETENTION = int(os.environ.get("STOREFRONT_LOG_RETENTION", 200))
    SEED_CATALOG = _env_flag("STOREFRONT_SEED_CATALOG", True)

    AUTH_PATH = "/auth"
    SESSION_LOADING_TIMEOUT = float(
        os.environ.get("STOREFRONT_SESSION_LOADING_TIMEOUT", 10)
    )
    SESSION_IDLE_TIMEOUT = float(os.environ.get("STOREFRONT_SESSION_IDLE_TIMEOUT", 1800))
    SESSION_REGISTRY_LIMIT = int(os.environ.get("STOREFRONT_SESSION_REGISTRY_LIMIT", 10000))
    GUARD_LOADING_REFRESH = 1

    DEFERRED_FEEDS = _env_list("STOREFRONT_DEFERRED_FEEDS")

    ADMIN_QUICK_NAV_ENABLED = _env_flag("STOREFRONT_ADMIN_QUICK_NAV", True)
    ADMIN_QUICK_NAV_LINKS = (
        ("Dashboard", "admin.dashboard"),
        ("Products", "admin.products"),
        ("Logs", "logging.console"),
    )
