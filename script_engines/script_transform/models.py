"""
Script Transform Models.

Typed representation of the scene-composition script: one Command per line,
each carrying a fully resolved Transform for its target entity.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

BACKGROUND_ID = "bg-main"
UNKNOWN_FIGURE_ID = "unknown"

STRUCTURAL_FIELDS = ("position", "scale", "rotation")

# Filter channels that serialize as whole numbers.
INTEGER_FIELDS = frozenset(
    {
        "colorRed",
        "colorGreen",
        "colorBlue",
        "bevelRed",
        "bevelGreen",
        "bevelBlue",
        "bevelRotation",
    }
)


class CommandKind(str, Enum):
    """Leading keyword of a script line."""
    SET_TRANSFORM = "setTransform"
    CHANGE_FIGURE = "changeFigure"
    CHANGE_BG = "changeBg"
    RAW_TEXT = "rawText"


class PresetAnchor(str, Enum):
    """Horizontal placement hint for a figure."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class EasingKind(str, Enum):
    """How a setTransform line states its easing: absent, empty or named."""
    UNSPECIFIED = "unspecified"
    USE_DEFAULT = "use_default"
    NAMED = "named"


class Easing(BaseModel):
    """
    Three-valued easing of a setTransform.

    `unspecified` never emits an -ease clause, `use_default` defers to the
    caller-supplied default at export time, `named` always emits its name.
    """
    model_config = ConfigDict(frozen=True)

    kind: EasingKind = EasingKind.UNSPECIFIED
    name: Optional[str] = None

    @classmethod
    def unspecified(cls) -> "Easing":
        return cls(kind=EasingKind.UNSPECIFIED)

    @classmethod
    def use_default(cls) -> "Easing":
        return cls(kind=EasingKind.USE_DEFAULT)

    @classmethod
    def named(cls, name: str) -> "Easing":
        if not name:
            return cls.use_default()
        return cls(kind=EasingKind.NAMED, name=name)

    @classmethod
    def from_param(cls, value: Optional[str]) -> "Easing":
        """Map the raw `-ease` parameter (None when absent) to an Easing."""
        if value is None:
            return cls.unspecified()
        return cls.named(value.strip())


class Vec2(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class Transform(BaseModel):
    """
    Resolved visual state of one entity.

    position/scale/rotation are structural and always present; every other
    key lives in `filters` so new filter types need no schema change.
    """
    model_config = ConfigDict(frozen=True)

    position: Vec2 = Field(default_factory=Vec2)
    scale: Vec2 = Field(default_factory=lambda: Vec2(x=1.0, y=1.0))
    rotation: float = 0.0
    filters: Dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "position": {"x": self.position.x, "y": self.position.y},
            "scale": {"x": self.scale.x, "y": self.scale.y},
            "rotation": self.rotation,
        }
        payload.update(self.filters)
        return payload


class SetTransform(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["setTransform"] = "setTransform"
    target: str = Field(..., min_length=1)
    duration: int = Field(500, ge=0)  # ms
    easing: Easing = Field(default_factory=Easing.unspecified)
    transform: Transform = Field(default_factory=Transform)


class ChangeFigure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["changeFigure"] = "changeFigure"
    target: str = Field(..., min_length=1)
    path: str
    transform: Transform = Field(default_factory=Transform)
    preset: PresetAnchor = PresetAnchor.CENTER
    # -key=value pairs; value-less flags map to ""
    params: Dict[str, str] = Field(default_factory=dict)


class ChangeBackground(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["changeBg"] = "changeBg"
    target: Literal["bg-main"] = BACKGROUND_ID
    path: str
    transform: Transform = Field(default_factory=Transform)
    params: Dict[str, str] = Field(default_factory=dict)


class RawText(BaseModel):
    """A line that is not a recognized command; re-emitted verbatim."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["rawText"] = "rawText"
    text: str


Command = Annotated[
    Union[SetTransform, ChangeFigure, ChangeBackground, RawText],
    Field(discriminator="kind"),
]

StatefulCommand = Union[SetTransform, ChangeFigure, ChangeBackground]


class ReconcileResult(BaseModel):
    consolidated: List[Command] = Field(default_factory=list)
    final_states: Dict[str, Transform] = Field(default_factory=dict)


class AnimationSegment(BaseModel):
    """One tween of a target; every segment starts at relative time 0."""
    target: str
    start_state: Transform
    end_state: Transform
    duration: int
    easing: Easing = Field(default_factory=Easing.unspecified)
    start_time: int = 0

    @computed_field
    @property
    def end_time(self) -> int:
        return self.start_time + self.duration
