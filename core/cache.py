import time
from typing import Any, Callable, Optional


class CampaignDataCache:
    """Time-windowed holder for the landing payload.

    One instance lives on ``app.state`` and is handed to every service that
    mutates donations or campaign settings; those call ``invalidate()`` right
    after a successful write so the next read is fresh.
    """

    def __init__(self, ttl: float = 15, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[Any] = None
        self.timestamp: Optional[float] = None

    def get(self) -> Optional[Any]:
        if self._value is None or self.timestamp is None:
            return None
        if self._clock() - self.timestamp >= self.ttl:
            return None
        return self._value

    def set(self, value: Any) -> None:
        self._value = value
        self.timestamp = self._clock()

    def invalidate(self) -> None:
        self._value = None
        self.timestamp = None

    @property
    def is_fresh(self) -> bool:
        return self.get() is not None
