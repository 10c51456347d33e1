"""Service-layer schemas for the script transform HTTP surface."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from script_engines.script_transform.models import Command, PresetAnchor


class ParseRequest(BaseModel):
    text: str
    scale_x: float = 1.0
    scale_y: float = 1.0


class ParseResponse(BaseModel):
    commands: List[Command] = Field(default_factory=list)


class CommandsRequest(BaseModel):
    commands: List[Command] = Field(default_factory=list)


class ExportRequest(BaseModel):
    commands: List[Command] = Field(default_factory=list)
    canvas_width: float
    canvas_height: float
    export_duration: Optional[int] = Field(None, ge=0)
    base_width: Optional[float] = None
    base_height: Optional[float] = None
    default_easing: Optional[str] = None


class ExportResponse(BaseModel):
    script: str
    lines: List[str] = Field(default_factory=list)


class LineRequest(BaseModel):
    line: str


class LineResponse(BaseModel):
    line: str
    has_next: bool


class LinesRequest(BaseModel):
    text: str


class LinesResponse(BaseModel):
    lines: List[str] = Field(default_factory=list)


class PlaceFigureRequest(BaseModel):
    target: str = Field(..., min_length=1)
    canvas_width: float
    canvas_height: float
    image_width: float
    image_height: float
    preset: PresetAnchor = PresetAnchor.CENTER
