"""
Script Parser.

Turns script text into an ordered list of Commands. A per-target state map
is threaded through the parse so every setTransform carries a complete
Transform even when its line only names the fields that changed.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from script_engines.script_transform.models import (
    BACKGROUND_ID,
    STRUCTURAL_FIELDS,
    UNKNOWN_FIGURE_ID,
    ChangeBackground,
    ChangeFigure,
    Command,
    CommandKind,
    Easing,
    PresetAnchor,
    RawText,
    SetTransform,
    Transform,
    Vec2,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 500
PARAM_DELIMITER = " -"
TRANSFORM_PARAM = "transform"

_LEADING_DIGITS = re.compile(r"\d+")
_ANCHORS = {anchor.value: anchor for anchor in PresetAnchor}


class ScriptParseError(ValueError):
    """A recognized command line that cannot be interpreted."""


def _reject_constant(name: str) -> float:
    raise ScriptParseError(f"non-standard JSON constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ScriptParseError(f"number out of range: {text[:32]}")
    return value


def _float_safe_int(text: str) -> int:
    # Every number must survive conversion to float downstream.
    value = int(text)
    try:
        float(value)
    except OverflowError as exc:
        raise ScriptParseError(f"number out of range: {text[:32]}") from exc
    return value


# Standard JSON only: NaN/Infinity and numbers beyond float range are errors.
_DECODER = json.JSONDecoder(
    parse_float=_finite_float,
    parse_int=_float_safe_int,
    parse_constant=_reject_constant,
)


def parse_script(text: str, scale_x: float = 1.0, scale_y: float = 1.0) -> List[Command]:
    """
    Parse a script into Commands.

    scale_x/scale_y convert positions from the script's logical resolution
    into working units. Lines that are not commands, or commands that fail
    to parse, come back as RawText in their original position.
    """
    states: Dict[str, Transform] = {}
    commands: List[Command] = []

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        body = line[:-1].rstrip() if line.endswith(";") else line

        try:
            command = _parse_line(body, states, scale_x, scale_y)
        except ValueError as exc:
            logger.warning("Keeping unparseable command as raw text (%s): %s", exc, line)
            command = None

        if command is None:
            commands.append(RawText(text=line))
            continue

        states[command.target] = command.transform
        commands.append(command)

    return commands


def merge_payload(
    prior: Transform,
    payload: Dict[str, Any],
    scale_x: float = 1.0,
    scale_y: float = 1.0,
) -> Transform:
    """
    Apply a partial wire payload on top of `prior`.

    position and scale merge per axis, rotation and filter keys override when
    present. Incoming position values are multiplied by scale_x/scale_y.
    """
    position = _mapping(payload, "position")
    scale = _mapping(payload, "scale")

    x = _number(position.get("x"), "position.x")
    y = _number(position.get("y"), "position.y")
    sx = _number(scale.get("x"), "scale.x")
    sy = _number(scale.get("y"), "scale.y")
    rotation = _number(payload.get("rotation"), "rotation")

    filters = dict(prior.filters)
    filters.update({k: v for k, v in payload.items() if k not in STRUCTURAL_FIELDS})

    return Transform(
        position=Vec2(
            x=prior.position.x if x is None else x * scale_x,
            y=prior.position.y if y is None else y * scale_y,
        ),
        scale=Vec2(
            x=prior.scale.x if sx is None else sx,
            y=prior.scale.y if sy is None else sy,
        ),
        rotation=prior.rotation if rotation is None else rotation,
        filters=filters,
    )


def _parse_line(
    body: str,
    states: Dict[str, Transform],
    scale_x: float,
    scale_y: float,
) -> Optional[Command]:
    keyword, sep, remainder = body.partition(":")
    if not sep:
        return None
    keyword = keyword.strip()

    if keyword == CommandKind.SET_TRANSFORM.value:
        return _parse_set_transform(remainder, states, scale_x, scale_y)
    if keyword == CommandKind.CHANGE_FIGURE.value:
        return _parse_change_figure(remainder, scale_x, scale_y)
    if keyword == CommandKind.CHANGE_BG.value:
        return _parse_change_bg(remainder, scale_x, scale_y)
    return None


def _parse_set_transform(
    remainder: str,
    states: Dict[str, Transform],
    scale_x: float,
    scale_y: float,
) -> SetTransform:
    text = remainder.lstrip()
    try:
        payload, end = _DECODER.raw_decode(text)
    except json.JSONDecodeError as exc:
        raise ScriptParseError(f"malformed setTransform JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ScriptParseError("setTransform payload is not a JSON object")

    rest = text[end:]
    if rest.strip() and not rest.lstrip().startswith("-"):
        raise ScriptParseError("unexpected text after setTransform JSON")
    params = _parse_params(_split_params(rest))

    target = params.get("target", "")
    if not target:
        raise ScriptParseError("setTransform without -target")

    prior = states.get(target)
    if prior is None:
        logger.warning("setTransform for '%s' before any changeFigure/changeBg; using defaults", target)
        prior = Transform()

    return SetTransform(
        target=target,
        duration=parse_duration(params.get("duration")),
        easing=Easing.from_param(params.get("ease")),
        transform=merge_payload(prior, payload, scale_x, scale_y),
    )


def _parse_change_figure(remainder: str, scale_x: float, scale_y: float) -> ChangeFigure:
    path, tokens = _split_head(remainder)

    preset = PresetAnchor.CENTER
    payload: Dict[str, Any] = {}
    params: Dict[str, str] = {}
    for token in tokens:
        if token in _ANCHORS:
            preset = _ANCHORS[token]
            continue
        key, value = _split_token(token)
        if not key:
            continue
        if key == TRANSFORM_PARAM:
            payload = _load_transform_param(value)
        else:
            params[key] = value

    target = params.pop("id", "") or UNKNOWN_FIGURE_ID
    return ChangeFigure(
        target=target,
        path=path,
        transform=merge_payload(Transform(), payload, scale_x, scale_y),
        preset=preset,
        params=params,
    )


def _parse_change_bg(remainder: str, scale_x: float, scale_y: float) -> ChangeBackground:
    path, tokens = _split_head(remainder)

    payload: Dict[str, Any] = {}
    params: Dict[str, str] = {}
    for token in tokens:
        key, value = _split_token(token)
        if not key:
            continue
        if key == TRANSFORM_PARAM:
            payload = _load_transform_param(value)
        else:
            params[key] = value
    params.pop("id", None)

    return ChangeBackground(
        target=BACKGROUND_ID,
        path=path,
        transform=merge_payload(Transform(), payload, scale_x, scale_y),
        params=params,
    )


def parse_duration(value: Optional[str]) -> int:
    """Leading digits of `value` in ms; absent or non-numeric falls back to 500."""
    if value is None:
        return DEFAULT_DURATION_MS
    match = _LEADING_DIGITS.match(value.strip())
    if not match:
        logger.warning("Non-numeric duration '%s'; using %d", value, DEFAULT_DURATION_MS)
        return DEFAULT_DURATION_MS
    return int(match.group())


def _split_head(remainder: str) -> Tuple[str, List[str]]:
    """Separate the asset path from its ` -key=value` parameters."""
    idx = remainder.find(PARAM_DELIMITER)
    if idx < 0:
        return remainder.strip(), []
    return remainder[:idx].strip(), _split_params(remainder[idx:])


def _split_params(text: str) -> List[str]:
    """
    Split ` -a=1 -b -transform={...}` into ["a=1", "b", "transform={...}"].

    A transform value is decoded as JSON up to its closing brace, so JSON
    containing " -" (e.g. `"x": -10`) stays in one token.
    """
    tokens: List[str] = []
    pos = text.find(PARAM_DELIMITER)
    while pos >= 0:
        start = pos + len(PARAM_DELIMITER)
        search_from = start
        if text.startswith(TRANSFORM_PARAM + "=", start):
            json_end = _json_end(text, start + len(TRANSFORM_PARAM) + 1)
            if json_end is not None:
                search_from = json_end
        end = text.find(PARAM_DELIMITER, search_from)
        token = text[start:end] if end >= 0 else text[start:]
        tokens.append(token.strip())
        pos = end
    return tokens


def _json_end(text: str, value_start: int) -> Optional[int]:
    # Malformed JSON returns None; the value then fails in _load_transform_param.
    offset = len(text[value_start:]) - len(text[value_start:].lstrip())
    try:
        _, end = _DECODER.raw_decode(text, value_start + offset)
    except json.JSONDecodeError:
        return None
    return end


def _split_token(token: str) -> Tuple[str, str]:
    key, _, value = token.partition("=")
    return key.strip(), value.strip()


def _parse_params(tokens: List[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for token in tokens:
        key, value = _split_token(token)
        if key:
            params[key] = value
    return params


def _load_transform_param(value: str) -> Dict[str, Any]:
    try:
        payload = _DECODER.decode(value)
    except json.JSONDecodeError as exc:
        raise ScriptParseError(f"malformed -transform JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ScriptParseError("-transform value is not a JSON object")
    return payload


def _mapping(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ScriptParseError(f"'{key}' must be an object")
    return value


def _number(value: Any, field: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScriptParseError(f"'{field}' must be numeric")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ScriptParseError(f"'{field}' is out of range") from exc
    if not math.isfinite(number):
        raise ScriptParseError(f"'{field}' must be finite")
    return number
