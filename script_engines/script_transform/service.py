"""
Script Transform Service.

Fronts the parser, reconciler and serializer with the configured base
resolution, export duration and easing defaults.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from script_engines.assets.models import AuxiliaryMetadata
from script_engines.assets.service import FilesystemMetadataLoader, MetadataLoader, is_live2d
from script_engines.config.settings import Settings, get_settings
from script_engines.script_transform.models import (
    AnimationSegment,
    Command,
    PresetAnchor,
    RawText,
    ReconcileResult,
    SetTransform,
)
from script_engines.script_transform.parser import parse_script
from script_engines.script_transform.placement import new_figure_transform
from script_engines.script_transform.reconciler import build_animation_sequence, reconcile
from script_engines.script_transform.serializer import export_script

logger = logging.getLogger(__name__)


class ScriptTransformService:
    def __init__(self, settings: Optional[Settings] = None, metadata_loader: Optional[MetadataLoader] = None):
        self.settings = settings or get_settings()
        self.metadata_loader = metadata_loader or FilesystemMetadataLoader(self.settings.game_folder)

    def scale_factors(self, canvas_width: float, canvas_height: float) -> Tuple[float, float]:
        """Script-to-canvas factors for the configured base resolution."""
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError("canvas dimensions must be positive")
        return canvas_width / self.settings.base_width, canvas_height / self.settings.base_height

    def parse(self, text: str, scale_x: float = 1.0, scale_y: float = 1.0) -> List[Command]:
        commands = parse_script(text, scale_x, scale_y)
        if not any(not isinstance(c, RawText) for c in commands):
            logger.info("No commands parsed from %d line(s)", len(commands))
        return commands

    def parse_for_canvas(self, text: str, canvas_width: float, canvas_height: float) -> List[Command]:
        scale_x, scale_y = self.scale_factors(canvas_width, canvas_height)
        return self.parse(text, scale_x, scale_y)

    def reconcile(self, commands: Sequence[Command]) -> ReconcileResult:
        return reconcile(commands)

    def animation(self, commands: Sequence[Command]) -> List[AnimationSegment]:
        return build_animation_sequence(commands)

    def export(
        self,
        commands: Sequence[Command],
        canvas_width: float,
        canvas_height: float,
        export_duration: Optional[int] = None,
        base_width: Optional[float] = None,
        base_height: Optional[float] = None,
        default_easing: Optional[str] = None,
    ) -> str:
        return export_script(
            commands,
            export_duration if export_duration is not None else self.settings.export_duration_ms,
            canvas_width,
            canvas_height,
            base_width if base_width is not None else self.settings.base_width,
            base_height if base_height is not None else self.settings.base_height,
            default_easing if default_easing is not None else self.settings.default_easing,
        )

    def place_figure(
        self,
        target: str,
        canvas_width: float,
        canvas_height: float,
        image_width: float,
        image_height: float,
        preset: PresetAnchor = PresetAnchor.CENTER,
    ) -> SetTransform:
        return new_figure_transform(
            target,
            canvas_width,
            canvas_height,
            image_width,
            image_height,
            preset=preset,
            duration=self.settings.default_duration_ms,
        )

    def figure_metadata(self, path: str) -> AuxiliaryMetadata:
        if not is_live2d(path):
            return AuxiliaryMetadata()
        return self.metadata_loader.load(path)


_default_service: Optional[ScriptTransformService] = None


def get_script_service() -> ScriptTransformService:
    global _default_service
    if _default_service is None:
        _default_service = ScriptTransformService()
    return _default_service


def set_script_service(service: Optional[ScriptTransformService]) -> None:
    global _default_service
    _default_service = service
