"""
Health and readiness endpoints.

Reports whether the configured rendering engine can be created so callers
can tell a broken browser install from a busy service.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from slidereel import __version__
from slidereel.capture.factory import EngineFactory
from slidereel.configs.config import config

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, Any]:
    """Return service identity and engine availability."""
    engines = EngineFactory.get_configured_engines()
    engine_ok = bool(engines.get(config.render_engine))
    return {
        "status": "healthy" if engine_ok else "degraded",
        "service": "slidereel renderer",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "engine": {"name": config.render_engine, "ok": engine_ok},
        "engines": engines,
    }
