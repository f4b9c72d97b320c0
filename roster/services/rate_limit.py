"""Sliding-window limiter for login and registration attempts."""

import logging
import math
import time

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)


class LoginRateLimiter:
    """
    Allows at most ``capacity`` attempts per client key in any ``window_seconds``.

    Backed by the ``limits`` moving-window strategy over in-process memory
    storage, which checks and records an attempt under a per-key lock.
    Rejected attempts are not recorded, so a client regains one slot each time
    its oldest accepted attempt leaves the window.
    """

    def __init__(
        self,
        capacity: int = 10,
        window_seconds: int = 15 * 60,
        storage: MemoryStorage | None = None,
    ) -> None:
        if capacity < 1 or window_seconds <= 0:
            raise ValueError("capacity and window_seconds must be positive")
        self.capacity = capacity
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(capacity, window_seconds, namespace="login")
        self._storage = storage if storage is not None else MemoryStorage()
        self._strategy = MovingWindowRateLimiter(self._storage)

    def allow(self, client_key: str) -> bool:
        """Record an attempt for client_key and return True, or return False when over capacity."""
        if self._strategy.hit(self._item, client_key):
            return True
        logger.warning("Rate limit exceeded for client=%s", client_key)
        return False

    def retry_after(self, client_key: str) -> int:
        """Seconds until client_key gets a free slot (0 when it has one now)."""
        reset_time, remaining = self._strategy.get_window_stats(self._item, client_key)
        if remaining > 0:
            return 0
        return max(1, math.ceil(reset_time - time.time()))

    def reset(self) -> None:
        self._storage.reset()
