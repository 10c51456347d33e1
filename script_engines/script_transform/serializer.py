"""
Script Serializer.

Writes a Command sequence back to script text, converting positions from
working units to the script's logical resolution and rounding numbers.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Optional, Sequence

from script_engines.script_transform.models import (
    INTEGER_FIELDS,
    ChangeBackground,
    ChangeFigure,
    Command,
    Easing,
    EasingKind,
    PresetAnchor,
    RawText,
    SetTransform,
    Transform,
)

DEFAULT_EASING_SENTINEL = "default"


def round_to_two(value: float) -> float:
    """Half-up rounding to two decimals (1.005 -> 1.0, -2.345 -> -2.34)."""
    return math.floor(value * 100 + 0.5) / 100


def round_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Round every number in a wire payload; integer channels to whole numbers."""
    return {key: _round_value(key, value) for key, value in payload.items()}


def export_payload(transform: Transform, ratio_x: float = 1.0, ratio_y: float = 1.0) -> Dict[str, Any]:
    payload = transform.to_payload()
    payload["position"] = {
        "x": transform.position.x * ratio_x,
        "y": transform.position.y * ratio_y,
    }
    return round_payload(payload)


def export_script(
    commands: Sequence[Command],
    export_duration: int,
    canvas_width: float,
    canvas_height: float,
    base_width: float,
    base_height: float,
    default_easing: Optional[str] = None,
) -> str:
    """
    Serialize commands, one per line.

    Every setTransform is written with `export_duration`; RawText lines are
    written back verbatim.
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError("canvas dimensions must be positive")
    if base_width <= 0 or base_height <= 0:
        raise ValueError("base dimensions must be positive")

    ratio_x = base_width / canvas_width
    ratio_y = base_height / canvas_height

    lines = []
    for command in commands:
        if isinstance(command, RawText):
            lines.append(command.text)
            continue

        transform_json = _dumps(export_payload(command.transform, ratio_x, ratio_y))

        if isinstance(command, SetTransform):
            ease = ease_clause(command.easing, default_easing)
            lines.append(
                f"setTransform:{transform_json} -target={command.target}"
                f" -duration={export_duration}{ease} -next;"
            )
        elif isinstance(command, ChangeFigure):
            preset = f" -{command.preset.value}" if command.preset != PresetAnchor.CENTER else ""
            lines.append(
                f"changeFigure:{command.path} -id={command.target}"
                f" -transform={transform_json}{_extras(command.params)}{preset};"
            )
        elif isinstance(command, ChangeBackground):
            lines.append(f"changeBg:{command.path} -transform={transform_json}{_extras(command.params)};")

    return "\n".join(lines)


def ease_clause(easing: Easing, default_easing: Optional[str] = None) -> str:
    if easing.kind == EasingKind.NAMED and easing.name:
        return f" -ease={easing.name}"
    if (
        easing.kind == EasingKind.USE_DEFAULT
        and default_easing
        and default_easing != DEFAULT_EASING_SENTINEL
    ):
        return f" -ease={default_easing}"
    return ""


def _extras(params: Dict[str, str]) -> str:
    # value-less flags are written bare
    return "".join(f" -{key}" if value == "" else f" -{key}={value}" for key, value in params.items())


def _dumps(payload: Dict[str, Any]) -> str:
    # NaN/Infinity have no standard JSON form; raises ValueError
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _round_value(key: str, value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return value
        if key in INTEGER_FIELDS:
            return int(math.floor(value + 0.5))
        return _compact(round_to_two(value))
    if isinstance(value, dict):
        return {k: _round_value(k, v) for k, v in value.items()}
    if isinstance(value, list):
        return [_round_value(key, v) for v in value]
    return value


def _compact(value: float) -> Any:
    """Write integral floats the way JSON.stringify does (100.0 -> 100)."""
    if float(value).is_integer():
        return int(value)
    return value
