"""Runtime configuration helpers for script engines."""
from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_WIDTH = 2560
DEFAULT_BASE_HEIGHT = 1440
DEFAULT_DURATION_MS = 500
DEFAULT_EASING = "default"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r; using %d", name, raw, default)
        return default
    return value


def get_env() -> Optional[str]:
    return _get_env("ENV") or _get_env("APP_ENV")


def get_base_width() -> int:
    """Logical width the script's coordinates are authored in."""
    return _get_int("SCRIPT_BASE_WIDTH", DEFAULT_BASE_WIDTH)


def get_base_height() -> int:
    return _get_int("SCRIPT_BASE_HEIGHT", DEFAULT_BASE_HEIGHT)


def get_default_duration_ms() -> int:
    return _get_int("SCRIPT_DEFAULT_DURATION_MS", DEFAULT_DURATION_MS)


def get_export_duration_ms() -> int:
    return _get_int("SCRIPT_EXPORT_DURATION_MS", get_default_duration_ms())


def get_default_easing() -> str:
    return _get_env("SCRIPT_DEFAULT_EASING") or DEFAULT_EASING


def get_game_folder() -> Optional[str]:
    return _get_env("WEBGAL_GAME_FOLDER") or None


def config_snapshot() -> dict:
    """Return a snapshot of relevant env-driven config."""
    return {
        "env": get_env(),
        "base_width": get_base_width(),
        "base_height": get_base_height(),
        "default_duration_ms": get_default_duration_ms(),
        "export_duration_ms": get_export_duration_ms(),
        "default_easing": get_default_easing(),
        "game_folder": get_game_folder(),
    }
