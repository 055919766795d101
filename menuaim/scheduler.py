from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import asyncio
import logging


class Scheduler(ABC):
    """Deferred-callback primitive. Handles must expose ``cancel()``."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Any: pass


class AsyncioScheduler(Scheduler):
    """Schedule callbacks on an asyncio event loop (the running one by default)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay_seconds), callback)


class RetryTimer:
    """Holds at most one pending retry.

    Each ``replace`` cancels the previous handle and issues a new token; a
    callback whose token is no longer current never runs.
    """

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self._handle: Any = None
        self._token = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def replace(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        """Cancel any pending retry and schedule ``callback``."""
        self.cancel()
        token = self._token

        def _fire() -> None:
            if token != self._token:
                return
            self._handle = None
            callback()

        self._handle = self.scheduler.call_later(delay_seconds, _fire)
        logging.getLogger(__name__).debug("Retry scheduled in %.0f ms", delay_seconds * 1000.0)

    def cancel(self) -> None:
        """Cancel the pending retry, if any."""
        self._token += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
