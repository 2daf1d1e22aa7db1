"""
Artifact location after a recording has been flushed.

Engines name their capture files themselves, so the orchestrator asks an
injected :class:`ArtifactLocator` to find the file. Because every session
records into its own exclusive directory, a scan is unambiguous.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger


class ArtifactLocator(ABC):
    """Abstract capability that finds a session's capture file"""

    @abstractmethod
    async def locate(self, directory: Path, extension: str) -> Path | None:
        """Return the capture file in ``directory`` or None if absent"""
        pass


class DirectoryScanLocator(ArtifactLocator):
    """First file (by name) in the directory matching the capture extension."""

    async def locate(self, directory: Path, extension: str) -> Path | None:
        if not directory.is_dir():
            logger.warning(f"Session directory missing during resolution: {directory}")
            return None
        ext = extension.lower()
        matches = sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ext
        )
        if len(matches) > 1:
            logger.warning(
                f"Found {len(matches)} '{ext}' files in {directory}; using {matches[0].name}"
            )
        return matches[0] if matches else None
