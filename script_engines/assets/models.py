from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class FileCategory(str, Enum):
    """What kind of media an asset path points at."""
    IMAGE = "image"
    GIF = "gif"
    LIVE2D_JSON = "live2d_json"    # single model
    LIVE2D_JSONL = "live2d_jsonl"  # aggregated model list
    VIDEO_WEBM = "video_webm"
    UNKNOWN = "unknown"


class AssetKind(str, Enum):
    """Sub-folder of <game>/game an asset is looked up in."""
    FIGURE = "figure"
    BACKGROUND = "background"


class FileTypeInfo(BaseModel):
    category: FileCategory
    ext: str
    description: str


class AuxiliaryMetadata(BaseModel):
    """Named motions/expressions of a Live2D figure."""
    motions: List[str] = Field(default_factory=list)
    expressions: List[str] = Field(default_factory=list)
