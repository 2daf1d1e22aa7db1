"""
Slide rendering service for slidereel.

Composes slide data into an animated document and hands it to the capture
orchestrator, timing the whole render. Batches run with a bounded number of
concurrent sessions; in-flight sessions can be cancelled by id.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from slidereel.capture.factory import EngineFactory
from slidereel.capture.orchestrator import CaptureOrchestrator
from slidereel.capture.scheduler import CancellationToken
from slidereel.capture.workspace import new_session_id, sanitize_session_id
from slidereel.configs.config import config
from slidereel.core.errors import InvalidSlideData
from slidereel.core.models import ArtifactHandle, ComposedDocument, SlideSpec
from slidereel.timeline.composer import compose


@dataclass(frozen=True)
class RenderRequest:
    slide_data: SlideSpec | Mapping[str, Any] | None
    duration: float
    slide_number: int = 1
    session_id: str | None = None


@dataclass(frozen=True)
class RenderResult:
    artifact: ArtifactHandle
    render_time: float
    slide_number: int = 1

    @property
    def session_id(self) -> str:
        return self.artifact.session_id


class SlideRenderer:
    """Compose + capture, with a registry of cancellable sessions."""

    def __init__(
        self,
        orchestrator: CaptureOrchestrator,
        *,
        work_dir: Path | None = None,
        concurrency: int | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.work_dir = Path(work_dir) if work_dir is not None else config.work_dir
        self.concurrency = max(1, concurrency or config.render_concurrency)
        self._tokens: dict[str, CancellationToken] = {}

    async def render(
        self,
        slide_data: SlideSpec | Mapping[str, Any] | None,
        duration: float,
        *,
        slide_number: int = 1,
        session_id: str | None = None,
    ) -> RenderResult:
        """Render one slide; the returned artifact belongs to the caller."""
        started = time.perf_counter()
        document = compose(slide_data, duration)
        return await self._capture(document, duration, slide_number, session_id, started)

    async def render_batch(self, requests: Sequence[RenderRequest]) -> list[RenderResult]:
        """Render ``requests`` in order with at most ``concurrency`` live sessions.

        Every slide is composed before any capture starts, so invalid data
        fails the batch without touching the engine. The first capture
        failure cancels the remaining sessions, removes artifacts already
        produced and propagates.
        """
        self._check_unique_sessions(requests)
        documents = [compose(req.slide_data, req.duration) for req in requests]
        semaphore = asyncio.Semaphore(self.concurrency)
        logger.info(
            f"Rendering batch of {len(requests)} slides (concurrency={self.concurrency})"
        )

        async def _render_one(req: RenderRequest, document: ComposedDocument) -> RenderResult:
            async with semaphore:
                return await self._capture(
                    document,
                    req.duration,
                    req.slide_number,
                    req.session_id,
                    time.perf_counter(),
                )

        tasks = [
            asyncio.ensure_future(_render_one(req, doc))
            for req, doc in zip(requests, documents)
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            for task in tasks:
                if task.done() and not task.cancelled() and task.exception() is None:
                    task.result().artifact.path.unlink(missing_ok=True)
            raise

    def cancel(self, session_id: str, reason: str | None = None) -> bool:
        """Cancel an in-flight session; False if no such session is running."""
        try:
            session_id = sanitize_session_id(session_id)
        except ValueError:
            return False
        token = self._tokens.get(session_id)
        if token is None:
            return False
        logger.info(f"Cancelling capture session {session_id}")
        token.cancel(reason)
        return True

    def cancel_all(self, reason: str | None = None) -> int:
        """Cancel every in-flight session; returns how many were signalled."""
        for token in list(self._tokens.values()):
            token.cancel(reason)
        return len(self._tokens)

    def active_sessions(self) -> list[str]:
        return sorted(self._tokens)

    @staticmethod
    def _check_unique_sessions(requests: Sequence[RenderRequest]) -> None:
        seen: set[str] = set()
        for req in requests:
            if not req.session_id:
                continue
            try:
                sid = sanitize_session_id(req.session_id)
            except ValueError as e:
                raise InvalidSlideData(str(e)) from e
            if sid in seen:
                raise InvalidSlideData(
                    f"Session {sid} appears more than once in the batch", session_id=sid
                )
            seen.add(sid)

    async def _capture(
        self,
        document: ComposedDocument,
        duration: float,
        slide_number: int,
        session_id: str | None,
        started: float,
    ) -> RenderResult:
        try:
            sid = sanitize_session_id(session_id) if session_id else new_session_id(slide_number)
        except ValueError as e:
            raise InvalidSlideData(str(e)) from e
        if sid in self._tokens:
            raise InvalidSlideData(f"Session {sid} is already rendering", session_id=sid)

        token = CancellationToken()
        self._tokens[sid] = token
        logger.info(f"Rendering slide {slide_number} as session {sid}, duration: {duration}s")
        try:
            artifact = await self.orchestrator.capture(
                document, duration, self.work_dir, session_id=sid, token=token
            )
        finally:
            self._tokens.pop(sid, None)

        render_time = round(time.perf_counter() - started, 2)
        logger.info(f"Render of slide {slide_number} completed in {render_time}s")
        return RenderResult(artifact=artifact, render_time=render_time, slide_number=slide_number)


_renderer: SlideRenderer | None = None


def get_renderer() -> SlideRenderer:
    global _renderer
    if _renderer is None:
        engine = EngineFactory.create_engine()
        _renderer = SlideRenderer(CaptureOrchestrator(engine))
    return _renderer


def shutdown_renderer() -> int:
    """Cancel in-flight captures of the shared renderer, if one was created."""
    if _renderer is None:
        return 0
    return _renderer.cancel_all("server shutting down")


__all__ = [
    "RenderRequest",
    "RenderResult",
    "SlideRenderer",
    "get_renderer",
    "shutdown_renderer",
]
