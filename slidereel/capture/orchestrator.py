"""
Capture orchestrator: drives a rendering engine through one recording.

Lifecycle per call: acquire a surface that records into an exclusive
session directory, load the composed document and wait for resource-idle,
let the timeline play out, close the view and then the recording (which
flushes the capture), locate the artifact and move it into place. The
surface is released in every outcome.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from slidereel.configs.config import config
from slidereel.core.errors import (
    ArtifactIOError,
    ArtifactNotFound,
    CaptureCancelled,
    EngineUnavailable,
    LoadTimeout,
    RenderPipelineError,
)
from slidereel.core.models import ArtifactHandle, ComposedDocument
from slidereel.core.session_state import CaptureSession, CaptureState
from slidereel.timeline.cues import validate_duration

from .engine import RESOURCE_IDLE, RenderingEngine, SurfaceConfig
from .locator import ArtifactLocator, DirectoryScanLocator
from .scheduler import AsyncioScheduler, CancellationToken, Scheduler, race_with_token
from .workspace import SessionWorkspace, new_session_id


@dataclass(frozen=True)
class CaptureSettings:
    canvas: tuple[int, int] = (1920, 1080)
    safety_margin: float = 0.5
    load_timeout: float | None = 30.0
    extra_args: tuple[str, ...] = ()

    @classmethod
    def from_config(cls) -> CaptureSettings:
        return cls(
            canvas=config.canvas,
            safety_margin=config.capture_safety_margin,
            load_timeout=config.load_timeout or None,
            extra_args=tuple(config.browser_args),
        )

    def surface_config(self) -> SurfaceConfig:
        return SurfaceConfig(canvas=self.canvas, extra_args=self.extra_args)


class CaptureOrchestrator:
    """Runs capture sessions against an injected engine, scheduler and locator."""

    def __init__(
        self,
        engine: RenderingEngine,
        *,
        scheduler: Scheduler | None = None,
        locator: ArtifactLocator | None = None,
        settings: CaptureSettings | None = None,
    ) -> None:
        self.engine = engine
        self.scheduler = scheduler or AsyncioScheduler()
        self.locator = locator or DirectoryScanLocator()
        self.settings = settings or CaptureSettings.from_config()
        self.recent_sessions: deque[CaptureSession] = deque(maxlen=100)

    async def capture(
        self,
        document: ComposedDocument,
        duration: float,
        work_dir: Path,
        *,
        session_id: str | None = None,
        output_path: Path | None = None,
        token: CancellationToken | None = None,
    ) -> ArtifactHandle:
        """
        Record ``document`` for ``duration`` seconds and return the artifact.

        Raises:
            InvalidSlideData: non-positive duration (before any engine call)
            EngineUnavailable: the surface could not be acquired
            LoadTimeout: the document never reached resource-idle
            CaptureCancelled: ``token`` fired before the artifact was resolved
            ArtifactNotFound: no capture file appeared after finalizing
            ArtifactIOError: the artifact could not be moved into place
        """
        duration = validate_duration(duration)
        workspace = SessionWorkspace(Path(work_dir), session_id or new_session_id())
        if token is not None and token.cancelled:
            raise CaptureCancelled(
                f"Capture cancelled before start: {token.reason}",
                session_id=workspace.session_id,
            )

        destination = Path(
            output_path or workspace.artifact_path(self.engine.capture_extension)
        )
        if destination.exists():
            raise ArtifactIOError(
                f"Artifact destination already exists: {destination}",
                session_id=workspace.session_id,
            )

        output_dir = workspace.create()
        session = CaptureSession(workspace.session_id, output_dir, duration)
        self.recent_sessions.append(session)
        logger.info(
            f"Starting capture session {session.session_id} "
            f"({duration:g}s + {self.settings.safety_margin:g}s margin) in {output_dir}"
        )

        try:
            handle = await self._run(session, workspace, document, token, destination)
        except RenderPipelineError as e:
            if e.session_id is None:
                e.session_id = session.session_id
            session.fail(e)
            logger.error(
                f"Capture session {session.session_id} failed [{e.error_kind}]: {e.message}"
            )
            raise
        except BaseException as e:
            session.fail(e)
            logger.error(f"Capture session {session.session_id} aborted: {e!r}")
            raise
        finally:
            await self._release(session)
            session.transition(CaptureState.CLOSED)

        logger.info(
            f"Capture session {session.session_id} resolved: {handle.path} "
            f"({handle.size_bytes} bytes)"
        )
        return handle

    async def _run(
        self,
        session: CaptureSession,
        workspace: SessionWorkspace,
        document: ComposedDocument,
        token: CancellationToken | None,
        destination: Path,
    ) -> ArtifactHandle:
        # Created -> Loaded; recording starts with the context, before load
        try:
            session.surface = await self.engine.launch_surface(
                self.settings.surface_config()
            )
            session.recording = await self.engine.begin_recording(
                session.surface, session.output_directory, self.settings.canvas
            )
        except RenderPipelineError:
            raise
        except Exception as e:
            raise EngineUnavailable(f"Could not acquire rendering surface: {e}") from e

        loaded = await self._load(session, document, token)
        if not loaded:
            await self._cancel(session, token)
        session.transition(CaptureState.LOADED)

        # Loaded -> Recording -> Finalizing
        session.transition(CaptureState.RECORDING)
        wait_seconds = session.requested_duration + self.settings.safety_margin
        elapsed = await self.scheduler.after(wait_seconds, token)
        if not elapsed:
            await self._cancel(session, token)
        session.transition(CaptureState.FINALIZING)
        await self._finalize(session)

        # Finalizing -> Resolved
        extension = self.engine.capture_extension
        artifact = await self.locator.locate(session.output_directory, extension)
        if artifact is None:
            raise ArtifactNotFound(
                f"No '{extension}' capture found in {session.output_directory}",
                session_id=session.session_id,
            )
        final_path = workspace.move_artifact(artifact, destination)
        workspace.discard_if_empty()
        session.transition(CaptureState.RESOLVED)
        return ArtifactHandle(
            path=final_path,
            session_id=session.session_id,
            size_bytes=final_path.stat().st_size,
            content_type=self.engine.content_type,
            metadata={"duration": session.requested_duration},
        )

    async def _load(
        self,
        session: CaptureSession,
        document: ComposedDocument,
        token: CancellationToken | None,
    ) -> bool:
        timeout = self.settings.load_timeout
        load = self.engine.load_document(
            session.recording, document, RESOURCE_IDLE, timeout
        )
        try:
            loaded, _ = await asyncio.wait_for(race_with_token(load, token), timeout)
        except asyncio.TimeoutError as e:
            raise LoadTimeout(
                f"Document did not reach {RESOURCE_IDLE} within {timeout:g}s",
                session_id=session.session_id,
            ) from e
        except RenderPipelineError:
            raise
        except Exception as e:
            raise EngineUnavailable(
                f"Engine failed while loading document: {e}",
                session_id=session.session_id,
            ) from e
        return loaded

    async def _cancel(
        self, session: CaptureSession, token: CancellationToken | None
    ) -> None:
        """Flush the recording, then report the cancellation."""
        session.transition(CaptureState.FINALIZING)
        await self._finalize(session)
        reason = token.reason if token is not None else None
        raise CaptureCancelled(
            f"Capture cancelled: {reason or 'cancelled by caller'}",
            session_id=session.session_id,
        )

    async def _finalize(self, session: CaptureSession) -> None:
        """Close the view, then the recording; closing the recording flushes it."""
        recording = session.recording
        if recording is None:
            return
        session.recording = None
        try:
            try:
                await self.engine.close_view(recording)
            finally:
                await self.engine.close_recording(recording)
        except RenderPipelineError:
            raise
        except Exception as e:
            raise EngineUnavailable(
                f"Could not finalize recording: {e}", session_id=session.session_id
            ) from e

    async def _release(self, session: CaptureSession) -> None:
        if session.recording is not None:
            try:
                await self._finalize(session)
            except Exception as e:
                logger.warning(
                    f"Failed to close recording for session {session.session_id}: {e}"
                )
        surface = session.surface
        if surface is None:
            return
        session.surface = None
        try:
            await self.engine.release_surface(surface)
        except Exception as e:
            logger.warning(
                f"Failed to release surface for session {session.session_id}: {e}"
            )
