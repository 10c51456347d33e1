"""Script Transform engine - parse, reconcile and re-serialize scene scripts."""

from .models import (
    BACKGROUND_ID,
    AnimationSegment,
    ChangeBackground,
    ChangeFigure,
    Command,
    Easing,
    EasingKind,
    PresetAnchor,
    RawText,
    ReconcileResult,
    SetTransform,
    Transform,
    Vec2,
)
from .parser import parse_script
from .reconciler import build_animation_sequence, interpolate, reconcile
from .serializer import export_script

__all__ = [
    "BACKGROUND_ID",
    "AnimationSegment",
    "ChangeBackground",
    "ChangeFigure",
    "Command",
    "Easing",
    "EasingKind",
    "PresetAnchor",
    "RawText",
    "ReconcileResult",
    "SetTransform",
    "Transform",
    "Vec2",
    "parse_script",
    "reconcile",
    "build_animation_sequence",
    "interpolate",
    "export_script",
]
