"""
Domain models shared by the timeline composer and the capture orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class VisualKind(str, Enum):
    NONE = "None"
    TEXT_ONLY = "Text_Only"
    BAR_CHART = "BarChart"


_VISUAL_KIND_ALIASES = {
    "none": VisualKind.NONE,
    "text_only": VisualKind.TEXT_ONLY,
    "text only": VisualKind.TEXT_ONLY,
    "text": VisualKind.TEXT_ONLY,
    "barchart": VisualKind.BAR_CHART,
    "bar chart": VisualKind.BAR_CHART,
    "bar_chart": VisualKind.BAR_CHART,
    "bar": VisualKind.BAR_CHART,
}


def normalize_visual_kind(value: object | None) -> VisualKind:
    """Map a raw visual type label onto :class:`VisualKind`.

    Unrecognised labels fall back to ``VisualKind.NONE`` so they never
    activate a chart.
    """
    if isinstance(value, VisualKind):
        return value
    if not isinstance(value, str):
        return VisualKind.NONE
    return _VISUAL_KIND_ALIASES.get(value.strip().lower(), VisualKind.NONE)


class SlideSpec(BaseModel):
    """Immutable description of one slide as produced upstream."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    text: str = Field(
        default="Title", validation_alias=AliasChoices("text", "SLIDE_TEXT")
    )
    bullets: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("bullets", "SLIDE_BULLETS")
    )
    visual_kind: VisualKind = Field(
        default=VisualKind.NONE,
        validation_alias=AliasChoices("visualKind", "visual_kind", "VISUAL_TYPE"),
    )
    visual_data: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("visualData", "visual_data", "VISUAL_DATA"),
    )

    @field_validator("text", mode="before")
    @classmethod
    def _default_text(cls, v: Any) -> Any:
        return "Title" if v is None else v

    @field_validator("bullets", mode="before")
    @classmethod
    def _default_bullets(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("visual_kind", mode="before")
    @classmethod
    def _normalize_kind(cls, v: Any) -> VisualKind:
        return normalize_visual_kind(v)

    @field_validator("visual_data", mode="before")
    @classmethod
    def _default_data(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def has_chart(self) -> bool:
        return self.visual_kind is VisualKind.BAR_CHART and bool(self.visual_data)


@dataclass(frozen=True)
class Cue:
    """A single timestamped animation trigger bound to one element."""

    target: str
    delay_seconds: float
    animation: str = "fadeIn"

    def as_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "delay": round(self.delay_seconds, 3),
            "animation": self.animation,
        }


@dataclass(frozen=True)
class ComposedDocument:
    """Self-contained renderable markup plus the schedule it embeds."""

    html: str
    timeline: tuple[Cue, ...]
    duration: float

    def to_bytes(self) -> bytes:
        return self.html.encode("utf-8")

    def cues_for(self, prefix: str) -> list[Cue]:
        return [cue for cue in self.timeline if cue.target.startswith(prefix)]


@dataclass(frozen=True)
class ArtifactHandle:
    """Location of a finished capture; the caller owns the file."""

    path: Path
    session_id: str
    size_bytes: int | None = None
    content_type: str = "video/webm"
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


__all__ = [
    "VisualKind",
    "normalize_visual_kind",
    "SlideSpec",
    "Cue",
    "ComposedDocument",
    "ArtifactHandle",
]
