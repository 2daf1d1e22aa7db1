"""
Error taxonomy for the render pipeline.

Every failure surfaced to callers carries a stable ``error_kind`` and a
human readable message so the transport layer can map it to a status code
without inspecting exception types.
"""

from __future__ import annotations

from typing import Any


class RenderPipelineError(Exception):
    """Base class for all errors raised by composition and capture."""

    error_kind = "RenderError"

    def __init__(self, message: str, *, session_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.session_id = session_id

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "errorKind": self.error_kind,
            "message": self.message,
        }
        if self.session_id:
            payload["sessionId"] = self.session_id
        return payload


class InvalidSlideData(RenderPipelineError):
    """Raised for malformed chart values or a non-positive duration."""

    error_kind = "InvalidSlideData"


class EngineUnavailable(RenderPipelineError):
    """Raised when a rendering surface could not be acquired."""

    error_kind = "EngineUnavailable"


class LoadTimeout(RenderPipelineError):
    """Raised when the document never reached the resource-idle signal."""

    error_kind = "LoadTimeout"


class ArtifactNotFound(RenderPipelineError):
    """Raised when no capture file appeared in the session directory."""

    error_kind = "ArtifactNotFound"


class CaptureCancelled(RenderPipelineError):
    """Raised when the caller cancelled an in-flight capture."""

    error_kind = "Cancelled"


class ArtifactIOError(RenderPipelineError):
    """Raised when the resolved artifact could not be moved into place."""

    error_kind = "IOFailure"


__all__ = [
    "RenderPipelineError",
    "InvalidSlideData",
    "EngineUnavailable",
    "LoadTimeout",
    "ArtifactNotFound",
    "CaptureCancelled",
    "ArtifactIOError",
]
