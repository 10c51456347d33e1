"""
Asset Service.

File-type detection and path resolution for changeFigure/changeBg asset
paths, plus Live2D motion/expression discovery. Decoding assets for display
is the renderer's job; `AssetResolver` only names that capability.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from script_engines.assets.models import AssetKind, AuxiliaryMetadata, FileCategory, FileTypeInfo

logger = logging.getLogger(__name__)

_CATEGORY_BY_EXT: Dict[str, FileCategory] = {
    "png": FileCategory.IMAGE,
    "jpg": FileCategory.IMAGE,
    "jpeg": FileCategory.IMAGE,
    "bmp": FileCategory.IMAGE,
    "webp": FileCategory.IMAGE,
    "gif": FileCategory.GIF,
    "webm": FileCategory.VIDEO_WEBM,
    "json": FileCategory.LIVE2D_JSON,
    "jsonl": FileCategory.LIVE2D_JSONL,
}

_DESCRIPTIONS: Dict[FileCategory, str] = {
    FileCategory.IMAGE: "Static image",
    FileCategory.GIF: "Animated GIF",
    FileCategory.LIVE2D_JSON: "Live2D model",
    FileCategory.LIVE2D_JSONL: "Live2D aggregated model",
    FileCategory.VIDEO_WEBM: "WebM video",
    FileCategory.UNKNOWN: "Unknown type",
}


class AssetResolver(Protocol):
    """Resolves an asset path to a renderable handle, or None on failure."""

    def resolve(self, path: str) -> Optional[Any]:
        ...


class MetadataLoader(Protocol):
    def load(self, path: str) -> AuxiliaryMetadata:
        ...


def get_file_extension(path: str) -> str:
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def detect_file_type(path: str) -> FileTypeInfo:
    ext = get_file_extension(path)
    category = _CATEGORY_BY_EXT.get(ext, FileCategory.UNKNOWN)
    return FileTypeInfo(category=category, ext=ext, description=_DESCRIPTIONS[category])


def is_image_type(path: str) -> bool:
    return detect_file_type(path).category in (FileCategory.IMAGE, FileCategory.GIF)


def is_live2d(path: str) -> bool:
    return detect_file_type(path).category in (FileCategory.LIVE2D_JSON, FileCategory.LIVE2D_JSONL)


def is_absolute_asset_path(path: str) -> bool:
    # Drive letters and URLs both carry a colon.
    return path.startswith("/") or ":" in path


def resolve_asset_path(
    path: str,
    game_folder: Optional[str] = None,
    kind: AssetKind = AssetKind.FIGURE,
) -> str:
    """
    Resolve a script asset path.

    Absolute paths are returned unchanged. Relative paths resolve under
    <game_folder>/game/<kind>; without a game folder the path is returned as is.
    """
    if is_absolute_asset_path(path):
        return path
    if not game_folder:
        logger.warning("No game folder configured; using asset path as-is: %s", path)
        return path
    return (Path(game_folder) / "game" / kind.value / path).as_posix()


class FilesystemMetadataLoader:
    """Reads motion/expression names from Live2D .json/.jsonl files on disk."""

    def __init__(self, game_folder: Optional[str] = None):
        self.game_folder = game_folder

    def load(self, path: str) -> AuxiliaryMetadata:
        category = detect_file_type(path).category
        if category not in (FileCategory.LIVE2D_JSON, FileCategory.LIVE2D_JSONL):
            return AuxiliaryMetadata()

        resolved = Path(resolve_asset_path(path, self.game_folder, AssetKind.FIGURE))
        try:
            if category == FileCategory.LIVE2D_JSONL:
                return self._load_jsonl(resolved)
            return _from_model(json.loads(resolved.read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read Live2D metadata from %s: %s", resolved, exc)
            return AuxiliaryMetadata()

    def _load_jsonl(self, resolved: Path) -> AuxiliaryMetadata:
        motions: List[str] = []
        expressions: List[str] = []

        for line in resolved.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            entry = json.loads(line)
            if not isinstance(entry, dict):
                continue

            sub_path = entry.get("path")
            if isinstance(sub_path, str) and sub_path.lower().endswith(".json"):
                sub_file = resolved.parent / sub_path
                try:
                    sub = _from_model(json.loads(sub_file.read_text(encoding="utf-8")))
                except (OSError, ValueError) as exc:
                    logger.warning("Skipping unreadable sub-model %s: %s", sub_file, exc)
                else:
                    motions.extend(sub.motions)
                    expressions.extend(sub.expressions)

            motions.extend(_names(entry.get("motions")))
            expressions.extend(_names(entry.get("expressions")))

        return AuxiliaryMetadata(motions=_unique(motions), expressions=_unique(expressions))


def _from_model(model: Any) -> AuxiliaryMetadata:
    """Cubism 3 keeps names under FileReferences; Cubism 2 at the top level."""
    if not isinstance(model, dict):
        return AuxiliaryMetadata()
    refs = model.get("FileReferences")
    if not isinstance(refs, dict):
        refs = model
    motions = refs.get("Motions", refs.get("motions"))
    expressions = refs.get("Expressions", refs.get("expressions"))
    return AuxiliaryMetadata(motions=_unique(_names(motions)), expressions=_unique(_names(expressions)))


def _names(value: Any) -> List[str]:
    if isinstance(value, dict):
        return [str(k) for k in value.keys()]
    if isinstance(value, list):
        names = []
        for item in value:
            if isinstance(item, str):
                names.append(item)
            elif isinstance(item, dict):
                name = item.get("Name") or item.get("name")
                if name:
                    names.append(str(name))
        return names
    return []


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))
