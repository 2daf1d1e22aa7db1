"""
Render routes: slide data in, recorded video out.

The single-slide endpoint streams the capture back as ``video/webm`` and
deletes the file once the response has been sent. The batch endpoint
returns base64 encoded captures in request order.
"""

import base64
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from loguru import logger
from starlette.background import BackgroundTask

from slidereel.core.errors import ArtifactIOError, InvalidSlideData
from slidereel.core.rate_limit import render_limit
from slidereel.jobs.artifact_purger import remove_artifact
from slidereel.pipeline.renderer import RenderRequest, RenderResult, SlideRenderer, get_renderer
from slidereel.schemas.render import (
    BatchRenderPayload,
    BatchRenderResponse,
    BatchSlideResult,
    CancelResponse,
    RenderPayload,
)

router = APIRouter(tags=["render"])


def _to_request(payload: RenderPayload, position: int | None = None) -> RenderRequest:
    """Build a render request; batch slides without a number take their position."""
    if payload.slide_data is None:
        raise InvalidSlideData("Missing slideData in request body")
    if payload.duration is None:
        raise InvalidSlideData("Invalid duration")
    return RenderRequest(
        slide_data=payload.slide_data,
        duration=payload.duration,
        slide_number=(
            position
            if position is not None and "slide_number" not in payload.model_fields_set
            else payload.slide_number
        ),
        session_id=payload.session_id,
    )


def _read_artifact(result: RenderResult) -> bytes:
    try:
        return result.artifact.read_bytes()
    except OSError as e:
        remove_artifact(result.artifact.path)
        raise ArtifactIOError(
            f"Could not read capture {result.artifact.path}: {e}",
            session_id=result.session_id,
        ) from e


@router.post("/render")
@render_limit
async def render_slide(
    request: Request,
    payload: RenderPayload,
    renderer: Annotated[SlideRenderer, Depends(get_renderer)],
) -> Response:
    """Render one slide and return the captured video."""
    req = _to_request(payload)
    logger.info(f"Render request for slide {req.slide_number}, duration: {req.duration}s")

    result = await renderer.render(
        req.slide_data,
        req.duration,
        slide_number=req.slide_number,
        session_id=req.session_id,
    )
    content = _read_artifact(result)

    return Response(
        content=content,
        media_type=result.artifact.content_type,
        headers={
            "Content-Length": str(len(content)),
            "X-Render-Time": f"{result.render_time}s",
            "X-Session-Id": result.session_id,
        },
        background=BackgroundTask(remove_artifact, result.artifact.path),
    )


@router.post("/render-batch", response_model=BatchRenderResponse)
@render_limit
async def render_batch(
    request: Request,
    payload: BatchRenderPayload,
    renderer: Annotated[SlideRenderer, Depends(get_renderer)],
) -> BatchRenderResponse:
    """Render several slides; any failure fails the whole batch."""
    if not payload.slides:
        raise InvalidSlideData("Batch contains no slides")
    requests = [
        _to_request(slide, position=idx + 1) for idx, slide in enumerate(payload.slides)
    ]

    results = await renderer.render_batch(requests)
    slides: list[BatchSlideResult] = []
    try:
        for result in results:
            content = _read_artifact(result)
            slides.append(
                BatchSlideResult(
                    slide_number=result.slide_number,
                    session_id=result.session_id,
                    video=base64.b64encode(content).decode("ascii"),
                    size=len(content),
                    render_time=result.render_time,
                )
            )
    finally:
        for result in results:
            remove_artifact(result.artifact.path)

    return BatchRenderResponse(success=True, slides=slides)


@router.post("/render/{session_id}/cancel", response_model=CancelResponse)
async def cancel_render(
    session_id: str,
    renderer: Annotated[SlideRenderer, Depends(get_renderer)],
) -> CancelResponse:
    """Cancel an in-flight capture session."""
    if not renderer.cancel(session_id, reason="cancelled via API"):
        raise HTTPException(status_code=404, detail="Session not found")
    return CancelResponse(session_id=session_id, cancelled=True)
