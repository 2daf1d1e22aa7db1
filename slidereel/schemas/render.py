"""
Pydantic models for render endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RenderPayload(BaseModel):
    """Schema for a single slide render request."""

    model_config = ConfigDict(populate_by_name=True)

    slide_data: dict[str, Any] | None = Field(
        None, alias="slideData", description="Slide content (title, bullets, chart)"
    )
    duration: float | None = Field(None, description="Slide duration in seconds")
    slide_number: int = Field(
        default=1, alias="slideNumber", description="Position of the slide in a deck"
    )
    session_id: str | None = Field(
        None, alias="sessionId", description="Optional id used to namespace the capture"
    )

    @field_validator("session_id")
    @classmethod
    def validate_session_id(cls, v: str | None) -> str | None:
        """Treat blank ids as absent."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class BatchRenderPayload(BaseModel):
    """Schema for rendering several slides in one request."""

    slides: list[RenderPayload] = Field(..., description="Slides to render, in order")


class BatchSlideResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slide_number: int = Field(..., alias="slideNumber")
    session_id: str = Field(..., alias="sessionId")
    video: str = Field(..., description="Base64 encoded capture")
    size: int
    render_time: float = Field(..., alias="renderTime")


class BatchRenderResponse(BaseModel):
    success: bool = True
    slides: list[BatchSlideResult]


class CancelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    cancelled: bool
