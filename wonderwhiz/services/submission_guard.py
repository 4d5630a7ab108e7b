from typing import Callable, Optional
import time
import logging

logger = logging.getLogger(__name__)

class AlreadyProcessing(Exception):
    """Another operation holds the guard, or its cooldown has not elapsed"""

class SubmissionHandle:
    """Proof of a successful try_begin(); releasing it starts the cooldown"""

    def __init__(self, guard: "SubmissionGuard"):
        self._guard = guard
        self.released = False

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self._guard._release()

    async def __aenter__(self) -> "SubmissionHandle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

class SubmissionGuard:
    """
    Single-flight gate for one chat session.

    At most one operation holds the guard. Releasing it does not free the
    guard immediately: it stays closed for `cooldown_seconds` so a double
    click right after completion is still rejected.
    """

    def __init__(self, cooldown_seconds: float = 0.5, name: str = "submission",
                 clock: Optional[Callable[[], float]] = None):
        self.cooldown_seconds = cooldown_seconds
        self.name = name
        self._clock = clock or time.monotonic
        self._in_flight = False
        self._available_at = 0.0

    @property
    def is_processing(self) -> bool:
        return self._in_flight or self._clock() < self._available_at

    def try_begin(self) -> SubmissionHandle:
        if self.is_processing:
            logger.info(f"[Guard:{self.name}] Rejected, an operation is already in progress")
            raise AlreadyProcessing(f"{self.name} already in progress")

        self._in_flight = True
        return SubmissionHandle(self)

    def _release(self) -> None:
        self._in_flight = False
        self._available_at = self._clock() + self.cooldown_seconds
        logger.debug(f"[Guard:{self.name}] Released, cooldown {self.cooldown_seconds}s")
