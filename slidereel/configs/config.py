"""
Configuration module for slidereel (configs).
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


class Config:
    def __init__(self) -> None:
        self._work_dir: Path | None = None

        # Rendering engine
        self.render_engine = os.getenv("RENDER_ENGINE", "playwright").lower()
        self.canvas_width = int(os.getenv("CANVAS_WIDTH", "1920"))
        self.canvas_height = int(os.getenv("CANVAS_HEIGHT", "1080"))
        self.browser_args = self._parse_list(
            os.getenv("BROWSER_ARGS", "--disable-dev-shm-usage,--disable-gpu")
        )

        # Capture lifecycle
        self.capture_safety_margin = float(os.getenv("CAPTURE_SAFETY_MARGIN", "0.5"))
        self.load_timeout = float(os.getenv("LOAD_TIMEOUT", "30"))
        self.render_concurrency = max(1, int(os.getenv("RENDER_CONCURRENCY", "1")))
        self.artifact_retention_seconds = float(
            os.getenv("ARTIFACT_RETENTION_SECONDS", "3600")
        )

        # Logging / runtime
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE")
        self.log_dir = os.getenv("LOG_DIR", "logs")
        self.port = int(os.getenv("PORT", "8080"))

        # Rate limiting
        self.rate_limit_enabled = (
            os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
        )
        self.render_rate_limit = os.getenv("RENDER_RATE_LIMIT", "30/minute")

        # CORS settings
        self.cors_origins = self._parse_list(os.getenv("CORS_ORIGINS", "*")) or ["*"]

    def _parse_list(self, raw: str) -> list[str]:
        """Parse a comma-separated string into a list of trimmed items."""
        if not raw:
            return []
        return [item.strip() for item in raw.split(",") if item.strip()]

    @property
    def work_dir(self) -> Path:
        if self._work_dir is None:
            work_dir_env = os.getenv("RENDER_WORK_DIR")
            if work_dir_env:
                self._work_dir = Path(work_dir_env).resolve()
            else:
                self._work_dir = Path(__file__).parent.parent.parent / "temp"
        return self._work_dir

    @property
    def canvas(self) -> tuple[int, int]:
        return self.canvas_width, self.canvas_height

    def ensure_directories_exist(self) -> None:
        self.work_dir.mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> dict[str, Any]:
        return {
            "render_engine": self.render_engine,
            "canvas": list(self.canvas),
            "capture_safety_margin": self.capture_safety_margin,
            "load_timeout": self.load_timeout,
            "render_concurrency": self.render_concurrency,
            "work_dir": str(self.work_dir),
        }


config = Config()
