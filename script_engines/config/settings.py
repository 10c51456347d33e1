"""Typed view over the env-driven runtime config."""
from __future__ import annotations

from dataclasses import dataclass

from script_engines.config import runtime_config


@dataclass
class Settings:
    base_width: int
    base_height: int
    default_duration_ms: int
    export_duration_ms: int
    default_easing: str
    game_folder: str | None


def get_settings() -> Settings:
    cfg = runtime_config.config_snapshot()
    return Settings(
        base_width=cfg["base_width"],
        base_height=cfg["base_height"],
        default_duration_ms=cfg["default_duration_ms"],
        export_duration_ms=cfg["export_duration_ms"],
        default_easing=cfg["default_easing"],
        game_folder=cfg["game_folder"],
    )
