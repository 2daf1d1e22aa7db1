"""
Rendering Engine Interface
Abstract base class for headless rendering engines

This module defines the boundary the capture orchestrator depends on: a
capability that can execute markup and styles on a fixed-size surface and
record what it shows into a directory.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from slidereel.core.models import ComposedDocument

RESOURCE_IDLE = "resource-idle"


@dataclass(frozen=True)
class SurfaceConfig:
    """Launch settings for a rendering surface."""

    canvas: tuple[int, int] = (1920, 1080)
    headless: bool = True
    sandbox_disabled: bool = True
    extra_args: tuple[str, ...] = ()


@dataclass
class SurfaceHandle:
    """Engine-owned surface (for example a browser process)."""

    engine: str
    native: Any = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordingContext:
    """A recording bound to one surface, writing into ``output_dir``."""

    surface: SurfaceHandle
    output_dir: Path
    frame_size: tuple[int, int]
    native: Any = None
    view: Any = None
    details: dict[str, Any] = field(default_factory=dict)


class RenderingEngine(ABC):
    """Abstract interface for rendering engines"""

    name = "abstract"
    capture_extension = ".webm"
    content_type = "video/webm"

    @abstractmethod
    async def launch_surface(self, surface_config: SurfaceConfig) -> SurfaceHandle:
        """
        Acquire a rendering surface

        Raises:
            EngineUnavailable: If the surface could not be started. Any partially
                acquired resource must be released before raising.
        """
        pass

    @abstractmethod
    async def begin_recording(
        self, handle: SurfaceHandle, output_dir: Path, frame_size: tuple[int, int]
    ) -> RecordingContext:
        """Open a recording context that continuously captures into ``output_dir``"""
        pass

    @abstractmethod
    async def load_document(
        self,
        recording: RecordingContext,
        document: ComposedDocument,
        wait_policy: str = RESOURCE_IDLE,
        timeout: float | None = None,
    ) -> None:
        """
        Load ``document`` into the recording's view and block until idle

        Raises:
            LoadTimeout: If the wait policy was not satisfied within ``timeout``
        """
        pass

    @abstractmethod
    async def close_view(self, recording: RecordingContext) -> None:
        """Close the page/document view"""
        pass

    @abstractmethod
    async def close_recording(self, recording: RecordingContext) -> None:
        """Close the recording; this flushes the capture artifact to disk"""
        pass

    @abstractmethod
    async def release_surface(self, handle: SurfaceHandle) -> None:
        """Release the surface and everything it owns"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the engine can be used in this environment

        Returns:
            True if the engine's runtime dependencies are importable/configured
        """
        pass
