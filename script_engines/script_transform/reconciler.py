"""State Reconciler - single left-to-right pass over a Command sequence.

Produces the consolidated per-entity view used to drive the renderer and the
animation segments used for preview playback. Pure logic, no side effects
(except logging).
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence

from script_engines.script_transform.models import (
    BACKGROUND_ID,
    AnimationSegment,
    ChangeBackground,
    ChangeFigure,
    Command,
    Easing,
    EasingKind,
    ReconcileResult,
    SetTransform,
    Transform,
    Vec2,
)
from script_engines.script_transform.parser import merge_payload

logger = logging.getLogger(__name__)

EaseFn = Callable[[float], float]


def reconcile(commands: Sequence[Command]) -> ReconcileResult:
    """
    Fold setTransform commands into one running state per figure.

    Ordering is preserved and no command is dropped; setTransform entries are
    re-emitted carrying their target's running state. changeFigure/changeBg
    and RawText pass through untouched. The background and empty targets are
    not consolidated.
    """
    running: Dict[str, Transform] = {}
    consolidated: List[Command] = []

    for command in commands:
        target = getattr(command, "target", "")
        if not target or target == BACKGROUND_ID:
            consolidated.append(command)
            continue

        if isinstance(command, ChangeFigure):
            running[target] = command.transform
            consolidated.append(command)
            continue

        if isinstance(command, SetTransform):
            base = running.get(target)
            if base is None:
                logger.warning("No baseline for target '%s'; synthesizing default state", target)
                base = Transform()
            merged = merge_payload(base, command.transform.to_payload())
            running[target] = merged
            consolidated.append(command.model_copy(update={"transform": merged}))
            continue

        consolidated.append(command)

    return ReconcileResult(consolidated=consolidated, final_states=running)


def build_animation_sequence(commands: Sequence[Command]) -> List[AnimationSegment]:
    """
    One segment per setTransform, chained per target.

    The first segment of a target starts from its changeFigure/changeBg
    Transform, or from its first setTransform when it has none. A target with
    a baseline but no setTransform gets a single zero-length hold segment.
    """
    current: Dict[str, Transform] = {}
    animated: Dict[str, bool] = {}
    order: List[str] = []
    segments: List[AnimationSegment] = []

    for command in commands:
        target = getattr(command, "target", "")
        if not target:
            continue
        if target not in animated:
            animated[target] = False
            order.append(target)

        if isinstance(command, (ChangeFigure, ChangeBackground)):
            current[target] = command.transform
            continue

        if isinstance(command, SetTransform):
            start = current.get(target, command.transform)
            segments.append(
                AnimationSegment(
                    target=target,
                    start_state=start,
                    end_state=command.transform,
                    duration=command.duration,
                    easing=command.easing,
                )
            )
            current[target] = command.transform
            animated[target] = True

    for target in order:
        if not animated[target] and target in current:
            state = current[target]
            segments.append(AnimationSegment(target=target, start_state=state, end_state=state, duration=0))

    return segments


def ease_linear(u: float) -> float:
    return u


def ease_in(u: float) -> float:
    return u * u


def ease_out(u: float) -> float:
    return 1.0 - (1.0 - u) * (1.0 - u)


def ease_in_out(u: float) -> float:
    # Smoothstep
    return u * u * (3.0 - 2.0 * u)


_EASINGS: Dict[str, EaseFn] = {
    "linear": ease_linear,
    "easein": ease_in,
    "easeout": ease_out,
    "easeinout": ease_in_out,
}


def get_ease(easing: Optional[Easing]) -> EaseFn:
    """Resolve an Easing to a curve; unknown or unset names use easeInOut."""
    if easing is None or easing.kind != EasingKind.NAMED or not easing.name:
        return ease_in_out
    key = easing.name.replace("_", "").replace("-", "").lower()
    return _EASINGS.get(key, ease_in_out)


def interpolate(segment: AnimationSegment, t_ms: float, ease: Optional[EaseFn] = None) -> Transform:
    """Transform of `segment` at `t_ms` after its start, clamped to [start, end]."""
    if segment.duration <= 0:
        return segment.end_state if t_ms >= segment.start_time else segment.start_state

    ease = ease or get_ease(segment.easing)
    u = (t_ms - segment.start_time) / segment.duration
    u = max(0.0, min(1.0, ease(max(0.0, min(1.0, u)))))

    a, b = segment.start_state, segment.end_state
    filters = dict(a.filters)
    for key, end_value in b.filters.items():
        start_value = a.filters.get(key)
        if _is_number(start_value) and _is_number(end_value):
            filters[key] = _lerp(start_value, end_value, u)
        elif key in a.filters and u < 1.0:
            # non-numeric values switch at the end of the segment
            filters[key] = start_value
        else:
            filters[key] = end_value

    return Transform(
        position=Vec2(x=_lerp(a.position.x, b.position.x, u), y=_lerp(a.position.y, b.position.y, u)),
        scale=Vec2(x=_lerp(a.scale.x, b.scale.x, u), y=_lerp(a.scale.y, b.scale.y, u)),
        rotation=_lerp(a.rotation, b.rotation, u),
        filters=filters,
    )


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
