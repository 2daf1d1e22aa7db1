"""
Completion scheduling and cancellation for capture sessions.

The orchestrator never sleeps directly; it asks a :class:`Scheduler` to
wake it after the timeline has played out, and that wait ends early when
the session's :class:`CancellationToken` fires.
"""

from __future__ import annotations

import asyncio
import contextlib
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared between a caller and a session."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason or "cancelled by caller"
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


async def race_with_token(
    awaitable: Awaitable[T], token: CancellationToken | None
) -> tuple[bool, T | None]:
    """Await ``awaitable`` unless ``token`` fires first.

    Returns ``(True, result)`` when the awaitable finished and ``(False, None)``
    when the token won; the loser is cancelled either way.
    """
    if token is None:
        return True, await awaitable
    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        return False, None

    work = asyncio.ensure_future(awaitable)
    watcher = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, watcher):
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
    if work.done() and not work.cancelled():
        return True, work.result()
    return False, None


class Scheduler(ABC):
    """Abstract source of timed wake-ups"""

    @abstractmethod
    async def after(
        self, seconds: float, token: CancellationToken | None = None
    ) -> bool:
        """
        Wait ``seconds``; return True if the time elapsed, False if cancelled
        """
        pass


class AsyncioScheduler(Scheduler):
    """Wall-clock scheduler backed by ``asyncio.sleep``."""

    async def after(
        self, seconds: float, token: CancellationToken | None = None
    ) -> bool:
        elapsed, _ = await race_with_token(asyncio.sleep(max(0.0, seconds)), token)
        return elapsed
