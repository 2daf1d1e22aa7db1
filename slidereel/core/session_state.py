"""
State tracking for a single capture session.

A session moves strictly forward through ``CaptureState``. ``FAILED`` is
reachable from any non-terminal state and ``CLOSED`` is the only terminal
state; it is always reached, whether the capture succeeded or not.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger


class CaptureState(str, Enum):
    CREATED = "created"
    LOADED = "loaded"
    RECORDING = "recording"
    FINALIZING = "finalizing"
    RESOLVED = "resolved"
    FAILED = "failed"
    CLOSED = "closed"


_FORWARD_ORDER = [
    CaptureState.CREATED,
    CaptureState.LOADED,
    CaptureState.RECORDING,
    CaptureState.FINALIZING,
    CaptureState.RESOLVED,
]


class InvalidTransitionError(RuntimeError):
    """Raised when a session is asked to move backwards or out of CLOSED."""


class CaptureSession:
    """Mutable record of one in-flight recording."""

    def __init__(
        self, session_id: str, output_directory: Path, requested_duration: float
    ) -> None:
        self.session_id = session_id
        self.output_directory = output_directory
        self.requested_duration = requested_duration
        self.state = CaptureState.CREATED
        self.surface: Any | None = None
        self.recording: Any | None = None
        self.error: BaseException | None = None
        self.created_at = datetime.now().isoformat()
        self.history: list[dict[str, str]] = [
            {"state": self.state.value, "timestamp": self.created_at}
        ]

    @property
    def is_closed(self) -> bool:
        return self.state is CaptureState.CLOSED

    @property
    def is_failed(self) -> bool:
        return any(entry["state"] == CaptureState.FAILED.value for entry in self.history)

    def transition(self, new_state: CaptureState) -> None:
        current = self.state
        if current is CaptureState.CLOSED:
            raise InvalidTransitionError(
                f"Session {self.session_id} is closed; cannot enter {new_state.value}"
            )
        if new_state is CaptureState.CLOSED:
            self._record(new_state)
            return
        if new_state is CaptureState.FAILED:
            if current is CaptureState.FAILED:
                return
            self._record(new_state)
            return
        if current is CaptureState.FAILED:
            raise InvalidTransitionError(
                f"Session {self.session_id} failed; cannot enter {new_state.value}"
            )
        if _FORWARD_ORDER.index(new_state) <= _FORWARD_ORDER.index(current):
            raise InvalidTransitionError(
                f"Session {self.session_id} cannot move from {current.value} "
                f"to {new_state.value}"
            )
        self._record(new_state)

    def fail(self, error: BaseException) -> None:
        if self.state is CaptureState.CLOSED:
            return
        self.error = error
        self.transition(CaptureState.FAILED)

    def _record(self, new_state: CaptureState) -> None:
        logger.debug(
            f"Capture session {self.session_id}: {self.state.value} -> {new_state.value}"
        )
        self.state = new_state
        self.history.append(
            {"state": new_state.value, "timestamp": datetime.now().isoformat()}
        )

    def states(self) -> list[CaptureState]:
        return [CaptureState(entry["state"]) for entry in self.history]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "session_id": self.session_id,
            "state": self.state.value,
            "output_directory": str(self.output_directory),
            "requested_duration": self.requested_duration,
            "created_at": self.created_at,
            "history": list(self.history),
        }
        if self.error is not None:
            data["error"] = str(self.error)
        return data


__all__ = ["CaptureState", "CaptureSession", "InvalidTransitionError"]
