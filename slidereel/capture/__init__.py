"""
Capture package for slidereel.

Drives a headless rendering engine through the record, wait, finalize and
locate lifecycle for one slide at a time.
"""

from .engine import RecordingContext, RenderingEngine, SurfaceConfig, SurfaceHandle
from .factory import EngineFactory
from .locator import ArtifactLocator, DirectoryScanLocator
from .orchestrator import CaptureOrchestrator, CaptureSettings
from .scheduler import AsyncioScheduler, CancellationToken, Scheduler
from .workspace import SessionWorkspace, new_session_id

__all__ = [
    "ArtifactLocator",
    "AsyncioScheduler",
    "CancellationToken",
    "CaptureOrchestrator",
    "CaptureSettings",
    "DirectoryScanLocator",
    "EngineFactory",
    "RecordingContext",
    "RenderingEngine",
    "Scheduler",
    "SessionWorkspace",
    "SurfaceConfig",
    "SurfaceHandle",
    "new_session_id",
]
