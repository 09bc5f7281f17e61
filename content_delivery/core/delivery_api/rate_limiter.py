"""
Shared request throttle for delivery API calls.

All transports in a process share one lock and last-request timestamp. Each
transport passes its own minimum interval per call, so one client's setting
never throttles another. Throttling only spaces calls out; failed requests
are not retried.
"""

import logging
import threading
import time
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MIN_DELAY_SECONDS = 0.0


class SharedRateLimiter:
    """
    Thread-safe shared minimum-delay limiter.

    The delay is the smallest gap enforced between the start of two
    consecutive requests. A delay of zero disables throttling.
    """

    _instance: Optional["SharedRateLimiter"] = None
    _lock = threading.Lock()

    def __new__(cls):
        """Singleton pattern to ensure one limiter across all transports."""
        if cls._instance is None:
            with cls._lock:
                # Double-checked locking: check again after acquiring lock
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, min_delay_seconds: float = DEFAULT_MIN_DELAY_SECONDS):
        """
        Initialize the limiter (only once due to singleton).

        Args:
            min_delay_seconds: Minimum seconds between requests
        """
        if not hasattr(self, "call_lock"):
            self.min_delay_seconds = min_delay_seconds
            self.last_request = 0.0
            self.call_lock = threading.Lock()

    def wait_if_needed(self, caller: str = "Unknown", min_delay_seconds: Optional[float] = None) -> float:
        """
        Block until the next request may be issued.

        Args:
            caller: What is about to make the request (for logging)
            min_delay_seconds: Gap required by this caller; the limiter-wide
                delay applies when None

        Returns:
            Seconds spent waiting
        """
        with self.call_lock:
            waited = 0.0
            delay = self.min_delay_seconds if min_delay_seconds is None else min_delay_seconds
            if delay > 0:
                elapsed = time.monotonic() - self.last_request
                if elapsed < delay:
                    waited = delay - elapsed
                    logger.debug(f"{caller}: waiting {waited:.2f}s for rate limiting")
                    time.sleep(waited)
            # Timestamp after the wait, not before
            self.last_request = time.monotonic()
            return waited

    def update_delay(self, new_delay_seconds: float) -> None:
        """Update the minimum delay between requests."""
        if new_delay_seconds < 0:
            raise ValueError("Delay must be zero or positive")
        with self.call_lock:
            if new_delay_seconds != self.min_delay_seconds:
                logger.info(f"Rate limiter updated to {new_delay_seconds}s delay")
            self.min_delay_seconds = new_delay_seconds

    def reset_delay(self) -> None:
        """Reset the limiter to its default (no throttling)."""
        with self.call_lock:
            self.min_delay_seconds = DEFAULT_MIN_DELAY_SECONDS
            self.last_request = 0.0

    def get_current_delay(self) -> float:
        return self.min_delay_seconds


# Global instance for easy access
rate_limiter = SharedRateLimiter()


def get_rate_limiter() -> SharedRateLimiter:
    """
    Get the global shared rate limiter instance.

    Returns:
        The global SharedRateLimiter instance
    """
    return rate_limiter
