"""
Unit tests for the slide rendering service.
"""

import asyncio

import pytest

from slidereel.capture.scheduler import AsyncioScheduler
from slidereel.core.errors import (
    ArtifactIOError,
    CaptureCancelled,
    EngineUnavailable,
    InvalidSlideData,
)
from slidereel.pipeline.renderer import RenderRequest, SlideRenderer


async def _wait_for_session(renderer: SlideRenderer) -> str:
    for _ in range(200):
        if renderer.active_sessions():
            return renderer.active_sessions()[0]
        await asyncio.sleep(0.005)
    raise AssertionError("no session became active")


class TestRender:
    """Test cases for single slide renders."""

    @pytest.mark.asyncio
    async def test_render_returns_timed_result(
        self, fake_engine, orchestrator_factory, work_dir, sample_slide
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)

        result = await renderer.render(sample_slide, 5, slide_number=2)

        assert result.slide_number == 2
        assert result.session_id.startswith("slide_2_")
        assert result.render_time >= 0
        assert result.artifact.path.parent == work_dir
        assert renderer.active_sessions() == []

    @pytest.mark.asyncio
    async def test_invalid_slide_never_reaches_engine(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)

        with pytest.raises(InvalidSlideData):
            await renderer.render(
                {"visualKind": "BarChart", "visualData": {"A": float("nan")}}, 5
            )

        assert fake_engine.calls == []

    @pytest.mark.asyncio
    async def test_unusable_session_id_rejected(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)

        with pytest.raises(InvalidSlideData):
            await renderer.render({"text": "T"}, 5, session_id="///")

    @pytest.mark.asyncio
    async def test_cancel_in_flight_session(self, fake_engine, orchestrator_factory, work_dir):
        orchestrator = orchestrator_factory(fake_engine, scheduler=AsyncioScheduler())
        renderer = SlideRenderer(orchestrator, work_dir=work_dir)

        task = asyncio.ensure_future(renderer.render({"text": "Long"}, 30, session_id="long"))
        session_id = await _wait_for_session(renderer)

        assert session_id == "long"
        assert renderer.cancel(session_id, reason="stop") is True
        with pytest.raises(CaptureCancelled):
            await task
        assert renderer.active_sessions() == []
        assert fake_engine.released == 1

    def test_cancel_unknown_session(self, fake_engine, orchestrator_factory, work_dir):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)
        assert renderer.cancel("missing") is False

    @pytest.mark.asyncio
    async def test_duplicate_in_flight_session(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        orchestrator = orchestrator_factory(fake_engine, scheduler=AsyncioScheduler())
        renderer = SlideRenderer(orchestrator, work_dir=work_dir)
        task = asyncio.ensure_future(renderer.render({"text": "A"}, 30, session_id="same"))
        await _wait_for_session(renderer)

        with pytest.raises(InvalidSlideData, match="already rendering"):
            await renderer.render({"text": "B"}, 5, session_id="same")

        renderer.cancel("same")
        with pytest.raises(CaptureCancelled):
            await task


class TestRenderBatch:
    """Test cases for batch renders."""

    @pytest.mark.asyncio
    async def test_results_keep_request_order(
        self, make_engine, orchestrator_factory, work_dir
    ):
        engine = make_engine(load_delay=0.01)
        renderer = SlideRenderer(orchestrator_factory(engine), work_dir=work_dir, concurrency=3)
        requests = [
            RenderRequest({"text": f"Slide {n}"}, 3, slide_number=n, session_id=f"deck_{n}")
            for n in (1, 2, 3)
        ]

        results = await renderer.render_batch(requests)

        assert [r.slide_number for r in results] == [1, 2, 3]
        assert [r.session_id for r in results] == ["deck_1", "deck_2", "deck_3"]
        assert engine.released == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [1, 2])
    async def test_concurrency_is_bounded(
        self, make_engine, orchestrator_factory, work_dir, concurrency
    ):
        class CountingEngine(make_engine):
            def __init__(self):
                super().__init__(load_delay=0.02)
                self.live = 0
                self.peak = 0

            async def launch_surface(self, surface_config):
                self.live += 1
                self.peak = max(self.peak, self.live)
                return await super().launch_surface(surface_config)

            async def release_surface(self, handle):
                self.live -= 1
                await super().release_surface(handle)

        engine = CountingEngine()
        renderer = SlideRenderer(
            orchestrator_factory(engine), work_dir=work_dir, concurrency=concurrency
        )
        requests = [RenderRequest({"text": str(n)}, 2, slide_number=n) for n in range(4)]

        await renderer.render_batch(requests)

        assert engine.peak == concurrency

    @pytest.mark.asyncio
    async def test_invalid_slide_fails_before_any_capture(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)
        requests = [
            RenderRequest({"text": "ok"}, 3),
            RenderRequest({"text": "bad"}, -1),
        ]

        with pytest.raises(InvalidSlideData):
            await renderer.render_batch(requests)

        assert fake_engine.calls == []

    @pytest.mark.asyncio
    async def test_failure_cancels_batch_and_removes_artifacts(
        self, make_engine, orchestrator_factory, work_dir
    ):
        class BrokenSlideEngine(make_engine):
            async def load_document(self, recording, document, wait_policy="resource-idle", timeout=None):
                if "Broken" in document.html:
                    await asyncio.sleep(0.05)
                    raise EngineUnavailable("renderer crashed")
                await asyncio.sleep(0.01 if "Fast" in document.html else 0.2)

        engine = BrokenSlideEngine()
        renderer = SlideRenderer(orchestrator_factory(engine), work_dir=work_dir, concurrency=3)
        requests = [
            RenderRequest({"text": "Fast"}, 3, session_id="fast"),
            RenderRequest({"text": "Broken"}, 3, session_id="broken"),
            RenderRequest({"text": "Slow"}, 3, session_id="slow"),
        ]

        with pytest.raises(EngineUnavailable):
            await renderer.render_batch(requests)

        assert list(work_dir.glob("*.webm")) == []
        assert engine.released == engine.launched
        assert renderer.active_sessions() == []


class TestSessionReuse:
    """Session ids cannot point two renders at one artifact."""

    @pytest.mark.asyncio
    async def test_batch_rejects_repeated_session_id(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)
        requests = [
            RenderRequest({"text": "A"}, 2, session_id="dup"),
            RenderRequest({"text": "B"}, 2, session_id="dup"),
        ]

        with pytest.raises(InvalidSlideData, match="more than once"):
            await renderer.render_batch(requests)

        assert fake_engine.calls == []

    @pytest.mark.asyncio
    async def test_batch_rejects_ids_equal_after_sanitising(
        self, fake_engine, orchestrator_factory, work_dir
    ):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)
        requests = [
            RenderRequest({"text": "A"}, 2, session_id="my deck"),
            RenderRequest({"text": "B"}, 2, session_id="my/deck"),
        ]

        with pytest.raises(InvalidSlideData):
            await renderer.render_batch(requests)

    @pytest.mark.asyncio
    async def test_completed_session_id_is_not_overwritten(
        self, make_engine, orchestrator_factory, work_dir
    ):
        engine = make_engine()
        renderer = SlideRenderer(orchestrator_factory(engine), work_dir=work_dir)
        first = await renderer.render({"text": "First"}, 2, session_id="reuse")

        with pytest.raises(ArtifactIOError):
            await renderer.render({"text": "Second"}, 2, session_id="reuse")

        assert first.artifact.path.read_bytes() == b"WEBMreuse"
        assert engine.launched == 1

    @pytest.mark.asyncio
    async def test_cancel_with_submitted_id(self, fake_engine, orchestrator_factory, work_dir):
        orchestrator = orchestrator_factory(fake_engine, scheduler=AsyncioScheduler())
        renderer = SlideRenderer(orchestrator, work_dir=work_dir)
        task = asyncio.ensure_future(renderer.render({"text": "T"}, 30, session_id="my deck"))
        await _wait_for_session(renderer)

        assert renderer.cancel("my deck") is True
        with pytest.raises(CaptureCancelled):
            await task

    def test_cancel_all(self, fake_engine, orchestrator_factory, work_dir):
        renderer = SlideRenderer(orchestrator_factory(fake_engine), work_dir=work_dir)
        assert renderer.cancel_all("shutdown") == 0
