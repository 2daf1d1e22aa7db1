"""
Main FastAPI server module for slidereel.
This module initializes the FastAPI application, configures routes, CORS middleware,
and handles graceful server startup and shutdown.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from slidereel import __version__
from slidereel.configs.config import config
from slidereel.configs.logging_config import setup_logging
from slidereel.core.rate_limit import add_rate_limiting
from slidereel.jobs.artifact_purger import ArtifactPurger
from slidereel.pipeline.renderer import shutdown_renderer
from slidereel.routes.error_handlers import add_error_handlers
from slidereel.routes.health_routes import router as health_router
from slidereel.routes.render_routes import router as render_router

app = FastAPI(title="slidereel Renderer API", version=__version__)


@app.on_event("startup")
async def startup_event() -> None:
    """Initialize logging and the work directory on application startup"""
    setup_logging(config.log_level, config.log_file, config.log_dir)
    config.ensure_directories_exist()
    # Sessions left behind by a previous process
    ArtifactPurger(config.work_dir).purge_stale()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Stop in-flight captures so their browsers are released"""
    cancelled = shutdown_renderer()
    if cancelled:
        logger.info(f"Cancelled {cancelled} in-flight capture(s) on shutdown")


add_rate_limiting(app)
add_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Render-Time", "X-Session-Id"],
)

app.include_router(render_router)
app.include_router(health_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint that returns a welcome message"""
    return {"message": "slidereel Renderer API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.port)
