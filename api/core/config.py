"""
Environment-driven settings.

Every value is read on call so tests can `monkeypatch.setenv` without
reloading modules. Empty or malformed values fall back to the default.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MiB


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def data_dir() -> Path:
    return Path(_env_str("DATA_DIR", "./data"))


def uploads_dir() -> Path:
    return data_dir() / "uploads"


def assets_dir() -> Path:
    return data_dir() / "assets"


def public_dir() -> Path:
    return Path(_env_str("PUBLIC_DIR", "./public"))


def product_images_dir() -> Path:
    return public_dir() / "products"


def app_env() -> str:
    return _env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def download_timeout_s() -> float:
    value = _env_float("DOWNLOAD_TIMEOUT_S", 10.0)
    return value if value > 0 else 10.0


def download_max_bytes() -> int:
    value = _env_int("DOWNLOAD_MAX_BYTES", DEFAULT_MAX_BYTES)
    return value if value > 0 else DEFAULT_MAX_BYTES


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_BYTES)
    return value if value > 0 else DEFAULT_MAX_BYTES


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def configure_logging() -> None:
    level_name = _env_str("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
