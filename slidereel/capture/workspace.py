"""
Per-session workspace directories and artifact naming.

Every capture gets ``<root>/sessions/<session_id>/`` for the engine to
record into, and its finished artifact is moved to ``<root>/<session_id><ext>``.
"""

from __future__ import annotations

import re
import shutil
import uuid
from pathlib import Path

from slidereel.core.errors import ArtifactIOError

SESSIONS_PREFIX = "sessions"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def sanitize_session_id(raw: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", str(raw).strip()).strip("_")
    if not cleaned:
        raise ValueError(f"Session id {raw!r} has no usable characters")
    return cleaned[:96]


def new_session_id(slide_number: int | str | None = None) -> str:
    """Return ``slide_<n>_<hex>``, unique per call."""
    suffix = uuid.uuid4().hex[:12]
    if slide_number is None:
        return f"slide_{suffix}"
    return sanitize_session_id(f"slide_{slide_number}_{suffix}")


class SessionWorkspace:
    """Filesystem namespace owned by exactly one capture session."""

    def __init__(self, root: Path, session_id: str) -> None:
        self.root = Path(root)
        self.session_id = sanitize_session_id(session_id)
        self.session_dir = self.root / SESSIONS_PREFIX / self.session_id

    def create(self) -> Path:
        """Create the session directory; it must not already exist."""
        try:
            self.session_dir.parent.mkdir(parents=True, exist_ok=True)
            self.session_dir.mkdir(exist_ok=False)
        except FileExistsError as e:
            raise ArtifactIOError(
                f"Session directory already exists: {self.session_dir}",
                session_id=self.session_id,
            ) from e
        except OSError as e:
            raise ArtifactIOError(
                f"Could not create session directory {self.session_dir}: {e}",
                session_id=self.session_id,
            ) from e
        return self.session_dir

    def artifact_path(self, extension: str) -> Path:
        ext = extension if extension.startswith(".") else f".{extension}"
        return self.root / f"{self.session_id}{ext}"

    def move_artifact(self, source: Path, destination: Path) -> Path:
        """Move ``source`` to ``destination``; the source stays put on failure.

        An existing destination is never overwritten.
        """
        if destination.exists():
            raise ArtifactIOError(
                f"Artifact destination already exists: {destination}",
                session_id=self.session_id,
            )
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            return Path(shutil.move(str(source), str(destination)))
        except OSError as e:
            raise ArtifactIOError(
                f"Could not move {source} to {destination}: {e}",
                session_id=self.session_id,
            ) from e

    def discard_if_empty(self) -> bool:
        try:
            self.session_dir.rmdir()
            return True
        except OSError:
            return False
