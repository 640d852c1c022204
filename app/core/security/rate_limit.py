import time
from collections import deque
from typing import Callable, Deque, Dict

from app.core.errors import RateLimitedError
from app.core.logger import logger
from app.core.settings import Settings


class RateLimiter:
    """Rolling-window hit counter per client address, shared process-wide.

    `hit` never awaits, so updates are atomic on the event loop. Addresses whose
    hits have all expired are dropped once per window.
    """

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_hits = settings.RATE_LIMIT_MAX
        self.window = float(settings.RATE_LIMIT_WINDOW_SEC)
        self.message = settings.RATE_LIMIT_MESSAGE
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def _prune(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window:
            return
        self._last_sweep = now
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]

    def hit(self, key: str) -> None:
        now = self._clock()
        self._sweep(now)
        hits = self._hits.setdefault(key, deque())
        self._prune(hits, now)
        if len(hits) >= self.max_hits:
            logger.warning("[RateLimit] %s over %s hits / %ss", key, self.max_hits, self.window)
            raise RateLimitedError(self.message)
        hits.append(now)
