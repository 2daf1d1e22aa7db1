"""
Configuration file for pytest test suite.
"""

import asyncio
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

# Must be set before slidereel.configs.config is imported
os.environ.setdefault("RENDER_WORK_DIR", tempfile.mkdtemp(prefix="slidereel-tests-"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from slidereel.capture.engine import RecordingContext, RenderingEngine, SurfaceHandle
from slidereel.capture.orchestrator import CaptureOrchestrator, CaptureSettings
from slidereel.capture.scheduler import CancellationToken, Scheduler
from slidereel.core.errors import EngineUnavailable


class FakeEngine(RenderingEngine):
    """In-memory engine that writes a small capture file when the recording closes."""

    name = "fake"

    def __init__(
        self,
        *,
        fail_at: str | None = None,
        failure: Exception | None = None,
        hang_on_load: bool = False,
        load_delay: float = 0.0,
        write_artifact: bool = True,
        payload: bytes = b"WEBM",
    ) -> None:
        self.fail_at = fail_at
        self.failure = failure or EngineUnavailable(f"{fail_at} failed")
        self.hang_on_load = hang_on_load
        self.load_delay = load_delay
        self.write_artifact = write_artifact
        self.payload = payload
        self.calls: list[str] = []
        self.launched = 0
        self.released = 0
        self.loaded_documents: list[str] = []

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_at == name:
            raise self.failure

    async def launch_surface(self, surface_config):
        self._step("launch_surface")
        self.launched += 1
        return SurfaceHandle(engine=self.name, details={"canvas": surface_config.canvas})

    async def begin_recording(self, handle, output_dir, frame_size):
        self._step("begin_recording")
        return RecordingContext(surface=handle, output_dir=output_dir, frame_size=frame_size)

    async def load_document(self, recording, document, wait_policy="resource-idle", timeout=None):
        self._step("load_document")
        if self.hang_on_load:
            await asyncio.Event().wait()
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        self.loaded_documents.append(document.html)

    async def close_view(self, recording):
        self._step("close_view")

    async def close_recording(self, recording):
        self.calls.append("close_recording")
        if self.write_artifact:
            capture = recording.output_dir / "capture.webm"
            capture.write_bytes(self.payload + recording.output_dir.name.encode())
        if self.fail_at == "close_recording":
            raise self.failure

    async def release_surface(self, handle):
        self.calls.append("release_surface")
        self.released += 1

    def is_available(self) -> bool:
        return True


class FakeScheduler(Scheduler):
    """Returns immediately and records every requested wait."""

    def __init__(self, elapse: bool = True) -> None:
        self.elapse = elapse
        self.waits: list[float] = []

    async def after(self, seconds: float, token: CancellationToken | None = None) -> bool:
        self.waits.append(seconds)
        if token is not None and token.cancelled:
            return False
        return self.elapse


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def capture_settings() -> CaptureSettings:
    return CaptureSettings(canvas=(320, 180), safety_margin=0.5, load_timeout=0.5)


@pytest.fixture
def orchestrator_factory(fake_scheduler, capture_settings):
    """Build an orchestrator around any engine with the fast test scheduler."""

    def _build(engine: RenderingEngine, scheduler: Scheduler | None = None):
        return CaptureOrchestrator(
            engine,
            scheduler=scheduler or fake_scheduler,
            settings=capture_settings,
        )

    return _build


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def sample_slide() -> dict:
    return {
        "text": "Q3 Results",
        "bullets": ["Revenue up 12%", "Costs flat"],
        "visualKind": "BarChart",
        "visualData": {"Jul": 10, "Aug": 20, "Sep": 40},
    }


@pytest.fixture(scope="module")
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from server import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_engine():
    """Factory for engines scripted to fail, hang or skip writing a capture."""
    return FakeEngine
