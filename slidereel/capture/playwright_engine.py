"""
Playwright-backed rendering engine.

Launches headless Chromium, records each browser context to a directory and
translates Playwright failures into the pipeline's error taxonomy.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import playwright
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from slidereel.core.errors import EngineUnavailable, LoadTimeout
from slidereel.core.models import ComposedDocument

from .engine import (
    RESOURCE_IDLE,
    RecordingContext,
    RenderingEngine,
    SurfaceConfig,
    SurfaceHandle,
)

_WAIT_UNTIL = {
    RESOURCE_IDLE: "networkidle",
    "load": "load",
    "dom-ready": "domcontentloaded",
}


def browsers_path() -> Path:
    """Directory Playwright installs its browsers into."""
    override = os.getenv("PLAYWRIGHT_BROWSERS_PATH")
    if override == "0":
        return Path(playwright.__file__).parent / "driver" / "package" / ".local-browsers"
    if override:
        return Path(override)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / "ms-playwright"
    if sys.platform == "win32":
        return Path(os.getenv("LOCALAPPDATA", Path.home())) / "ms-playwright"
    return Path.home() / ".cache" / "ms-playwright"


class PlaywrightEngine(RenderingEngine):
    """Chromium via Playwright; captures are written as ``.webm``."""

    name = "playwright"
    capture_extension = ".webm"
    content_type = "video/webm"

    async def launch_surface(self, surface_config: SurfaceConfig) -> SurfaceHandle:
        try:
            playwright = await async_playwright().start()
        except Exception as e:
            raise EngineUnavailable(f"Playwright driver failed to start: {e}") from e

        args: list[str] = ["--no-sandbox"] if surface_config.sandbox_disabled else []
        args.extend(surface_config.extra_args)
        try:
            browser = await playwright.chromium.launch(
                headless=surface_config.headless, args=args
            )
        except PlaywrightError as e:
            await playwright.stop()
            raise EngineUnavailable(f"Could not launch Chromium: {e}") from e

        logger.debug(f"Launched Chromium (headless={surface_config.headless}, args={args})")
        return SurfaceHandle(
            engine=self.name,
            native=browser,
            details={"playwright": playwright, "args": args},
        )

    async def begin_recording(
        self, handle: SurfaceHandle, output_dir: Path, frame_size: tuple[int, int]
    ) -> RecordingContext:
        width, height = frame_size
        try:
            context = await handle.native.new_context(
                viewport={"width": width, "height": height},
                record_video_dir=str(output_dir),
                record_video_size={"width": width, "height": height},
            )
            page = await context.new_page()
        except PlaywrightError as e:
            raise EngineUnavailable(f"Could not open recording context: {e}") from e

        return RecordingContext(
            surface=handle,
            output_dir=output_dir,
            frame_size=frame_size,
            native=context,
            view=page,
        )

    async def load_document(
        self,
        recording: RecordingContext,
        document: ComposedDocument,
        wait_policy: str = RESOURCE_IDLE,
        timeout: float | None = None,
    ) -> None:
        wait_until = _WAIT_UNTIL.get(wait_policy, "networkidle")
        timeout_ms = timeout * 1000 if timeout else 0
        try:
            await recording.view.set_content(
                document.html, wait_until=wait_until, timeout=timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise LoadTimeout(
                f"Document did not reach {wait_policy} within {timeout or 0:g}s"
            ) from e
        except PlaywrightError as e:
            raise EngineUnavailable(f"Engine failed while loading document: {e}") from e

    async def close_view(self, recording: RecordingContext) -> None:
        page = recording.view
        if page is not None and not page.is_closed():
            await page.close()

    async def close_recording(self, recording: RecordingContext) -> None:
        await recording.native.close()

    async def release_surface(self, handle: SurfaceHandle) -> None:
        try:
            await handle.native.close()
        finally:
            playwright = handle.details.get("playwright")
            if playwright is not None:
                await playwright.stop()

    def is_available(self) -> bool:
        """True when a Chromium build has been installed for Playwright."""
        root = browsers_path()
        if not root.is_dir():
            return False
        return any(p.is_dir() for p in root.glob("chromium*"))
