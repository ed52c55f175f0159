"""
Fixed-window request counting per client address.

The store is attached to the app (`app.state.rate_limiter`) so it can be
replaced with a shared backend without touching the routes.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

THROTTLE_MESSAGE = "Too many requests from this IP, please try again later."


@dataclass
class RateLimitDecision:
    allowed: bool
    count: int
    limit: int
    reset_in_seconds: int


class CounterStore(Protocol):
    def hit(self, key: str) -> RateLimitDecision:
        ...


class FixedWindowCounterStore:
    """In-process counters keyed by (client address, window start)."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 15 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._counts: Dict[Tuple[str, int], int] = {}
        self._current_window: Optional[int] = None

    def _window_start(self, now: float) -> int:
        return int(now // self.window_seconds) * self.window_seconds

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for `key` and say whether it is within the cap."""
        with self._lock:
            now = self._clock()
            window = self._window_start(now)

            # counters from a finished window are dropped once, when the next one starts
            if window != self._current_window:
                self._counts.clear()
                self._current_window = window

            count = self._counts.get((key, window), 0) + 1
            self._counts[(key, window)] = count

        reset_in = max(1, math.ceil(window + self.window_seconds - now))
        allowed = count <= self.max_requests
        if not allowed and count == self.max_requests + 1:
            logger.warning(f"rate_limit_exceeded client={key} limit={self.max_requests}")

        return RateLimitDecision(
            allowed=allowed,
            count=count,
            limit=self.max_requests,
            reset_in_seconds=reset_in,
        )

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
