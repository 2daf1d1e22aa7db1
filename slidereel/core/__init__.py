"""
Core domain types for slidereel: models, errors and session state.
"""

from .errors import (
    ArtifactIOError,
    ArtifactNotFound,
    CaptureCancelled,
    EngineUnavailable,
    InvalidSlideData,
    LoadTimeout,
    RenderPipelineError,
)
from .models import ArtifactHandle, ComposedDocument, Cue, SlideSpec, VisualKind
from .session_state import CaptureSession, CaptureState

__all__ = [
    "ArtifactHandle",
    "ArtifactIOError",
    "ArtifactNotFound",
    "CaptureCancelled",
    "CaptureSession",
    "CaptureState",
    "ComposedDocument",
    "Cue",
    "EngineUnavailable",
    "InvalidSlideData",
    "LoadTimeout",
    "RenderPipelineError",
    "SlideSpec",
    "VisualKind",
]
