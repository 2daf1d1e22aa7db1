"""
Artifact purger for slidereel.

Captured artifacts belong to the caller once a render returns, and failed
sessions leave their directories behind for diagnosis. This module removes
delivered artifacts and sweeps anything older than the retention window
out of the work directory.
"""

from __future__ import annotations

import shutil
import time
from pathlib import Path

from loguru import logger

from slidereel.capture.workspace import SESSIONS_PREFIX
from slidereel.configs.config import config


def remove_artifact(path: str | Path) -> bool:
    """Delete a delivered artifact; returns False when it was already gone."""
    target = Path(path)
    try:
        target.unlink()
        logger.info(f"Cleaned up: {target}")
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Cleanup error for {target}: {e}")
        return False


class ArtifactPurger:
    """Purger for stale session directories and orphaned artifacts."""

    def __init__(self, work_dir: Path | None = None) -> None:
        self.work_dir = Path(work_dir) if work_dir is not None else config.work_dir

    def collect_stale(
        self, max_age_seconds: float, now: float | None = None
    ) -> list[Path]:
        """Paths under the work directory last modified before the window."""
        if not self.work_dir.exists():
            return []
        cutoff = (now if now is not None else time.time()) - max_age_seconds
        stale: list[Path] = []

        sessions_dir = self.work_dir / SESSIONS_PREFIX
        if sessions_dir.is_dir():
            for session_dir in sessions_dir.iterdir():
                if self._last_modified(session_dir) < cutoff:
                    stale.append(session_dir)

        for entry in self.work_dir.iterdir():
            if entry.is_file() and entry.stat().st_mtime < cutoff:
                stale.append(entry)
        return sorted(stale)

    def purge_stale(
        self, max_age_seconds: float | None = None, now: float | None = None
    ) -> int:
        """Remove stale entries; returns how many were deleted."""
        if max_age_seconds is None:
            max_age_seconds = config.artifact_retention_seconds
        removed = 0
        for path in self.collect_stale(max_age_seconds, now):
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
                removed += 1
            except OSError as e:
                logger.error(f"Failed to purge {path}: {e}")
        if removed:
            logger.info(f"Purged {removed} stale entries from {self.work_dir}")
        return removed

    @staticmethod
    def _last_modified(path: Path) -> float:
        """Newest mtime of a directory and its direct children."""
        latest = path.stat().st_mtime
        if path.is_dir():
            for child in path.iterdir():
                latest = max(latest, child.stat().st_mtime)
        return latest
