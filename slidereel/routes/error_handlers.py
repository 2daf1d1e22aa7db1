"""
Maps pipeline errors onto HTTP responses.

The body always carries ``errorKind`` and ``message`` so clients can react
to the failure class without parsing text.
"""

from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger

from slidereel.core.errors import RenderPipelineError

STATUS_CODES: dict[str, int] = {
    "InvalidSlideData": 400,
    "Cancelled": 409,
    "EngineUnavailable": 503,
    "LoadTimeout": 504,
    "ArtifactNotFound": 500,
    "IOFailure": 500,
}

_ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]


def status_for(error: RenderPipelineError) -> int:
    return STATUS_CODES.get(error.error_kind, 500)


async def render_error_handler(request: Request, exc: RenderPipelineError) -> JSONResponse:
    status_code = status_for(exc)
    logger.error(
        f"{request.method} {request.url.path} failed [{exc.error_kind}]: {exc.message}"
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def add_error_handlers(app: FastAPI) -> None:
    """Attach the pipeline error handler to the FastAPI application."""
    app.add_exception_handler(
        RenderPipelineError, cast(_ExceptionHandler, render_error_handler)
    )
