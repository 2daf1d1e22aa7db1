"""
Per-client rate limiting for the render endpoints.

Every render holds a browser for the whole slide duration, so requests are
limited by client address and rejections use the same error body as the
rest of the API.
"""

from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from slidereel.configs.config import config

limiter = Limiter(key_func=get_remote_address, enabled=config.rate_limit_enabled)

# Shared by /render and /render-batch so both draw on one budget per client
render_limit = limiter.shared_limit(config.render_rate_limit, scope="render")

_ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={
            "errorKind": "RateLimited",
            "message": f"Rate limit exceeded: {exc.detail}",
        },
    )


def add_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter and its 429 handler to the FastAPI application."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, cast(_ExceptionHandler, rate_limit_handler))
