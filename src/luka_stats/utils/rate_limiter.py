"""Rate limiting utilities

The free Ball Don't Lie plan allows 5 requests per minute. The limiter here
is a plain fixed-window counter: the count resets once a full window has
elapsed since the window started, so bursts at window boundaries are not
smoothed.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Fixed-window request counter

    Each call to ``acquire`` either consumes one slot in the current window
    or is rejected. Rejection never blocks; the caller decides what to do
    (the free-tier client raises RateLimitError before touching the network).

    This is thread-safe and can be shared across clients.

    Example:
        limiter = FixedWindowRateLimiter(max_calls=5, window_seconds=60)

        if not limiter.acquire():
            raise RateLimitError("Rate limit exceeded: 5 requests per minute")
        response = session.get(url)
    """

    def __init__(
        self,
        max_calls: int = 5,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize rate limiter

        Args:
            max_calls: Requests allowed per window (default 5)
            window_seconds: Window length in seconds (default 60)
            clock: Returns the current time in seconds
        """
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self.window_start = clock()
        self.count = 0
        self.lock = threading.Lock()

    def _roll_window(self, now: float) -> None:
        if now - self.window_start > self.window_seconds:
            self.count = 0
            self.window_start = now

    def acquire(self) -> bool:
        """Consume one slot in the current window

        Returns:
            True if the request may proceed, False if the window is full
        """
        with self.lock:
            self._roll_window(self._clock())

            if self.count >= self.max_calls:
                logger.warning(
                    f"Rate limit exceeded: {self.max_calls} requests per "
                    f"{self.window_seconds:g}s"
                )
                return False

            self.count += 1
            logger.info(f"API request {self.count}/{self.max_calls}")
            return True

    @property
    def remaining(self) -> int:
        """Slots left in the current window"""
        with self.lock:
            if self._clock() - self.window_start > self.window_seconds:
                return self.max_calls
            return self.max_calls - self.count

    def reset(self) -> None:
        """Start a fresh window"""
        with self.lock:
            self.count = 0
            self.window_start = self._clock()
