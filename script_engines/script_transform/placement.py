"""
Figure placement.

Computes where a newly added figure lands on stage: the image is fitted to
the stage, dropped to the floor when shorter than the stage, and pushed to
the left/right edge by its preset anchor. Positions are logical offsets with
the origin at the stage centre, matching the renderer's coordinate space.
"""

from __future__ import annotations

from script_engines.script_transform.models import (
    Easing,
    PresetAnchor,
    SetTransform,
    Transform,
    Vec2,
)
from script_engines.script_transform.parser import DEFAULT_DURATION_MS


def preset_base_position(
    preset: PresetAnchor,
    stage_width: float,
    stage_height: float,
    image_width: float,
    image_height: float,
) -> Vec2:
    if min(stage_width, stage_height, image_width, image_height) <= 0:
        raise ValueError("stage and image dimensions must be positive")

    fit = min(stage_width / image_width, stage_height / image_height)
    target_w = image_width * fit
    target_h = image_height * fit

    base_y = stage_height / 2
    if target_h < stage_height:
        base_y = stage_height / 2 + (stage_height - target_h) / 2

    base_x = stage_width / 2
    if preset == PresetAnchor.LEFT:
        base_x = target_w / 2
    elif preset == PresetAnchor.RIGHT:
        base_x = stage_width - target_w / 2

    return Vec2(x=base_x - stage_width / 2, y=base_y - stage_height / 2)


def new_figure_transform(
    target: str,
    stage_width: float,
    stage_height: float,
    image_width: float,
    image_height: float,
    preset: PresetAnchor = PresetAnchor.CENTER,
    duration: int = DEFAULT_DURATION_MS,
) -> SetTransform:
    """setTransform placing `target` at its preset spot; scale is left to the figure."""
    position = preset_base_position(preset, stage_width, stage_height, image_width, image_height)
    return SetTransform(
        target=target,
        duration=duration,
        easing=Easing.unspecified(),
        transform=Transform(position=position, rotation=0.0),
    )
