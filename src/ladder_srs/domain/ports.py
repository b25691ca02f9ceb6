"""
Ports (interfaces) for the engine's only external dependency: the current time.

Application code depends on the Clock abstraction so tests can pin "now".
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Port for reading the current instant.

    Implementations:
        - SystemClock: wall-clock UTC.
        - FixedClock: a pinned instant, for tests and replays.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs: float) -> None:
        """Move the pinned instant forward by ``timedelta(**kwargs)``."""
        self._instant = self._instant + timedelta(**kwargs)
