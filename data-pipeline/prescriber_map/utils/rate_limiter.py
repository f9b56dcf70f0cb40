"""
Minimum-interval rate limiter for outbound geocoding requests.

Nominatim's usage policy allows at most one request per second. The limiter
serializes calls so that consecutive requests are at least ``min_interval``
seconds apart; the very first call never waits.

Usage:
    from prescriber_map.utils.rate_limiter import RateLimiter

    limiter = RateLimiter(min_interval=1.1)
    geocoder = NominatimGeocoder(rate_limiter=limiter)
"""

import threading
import time
from typing import Callable


class RateLimiter:
    """
    Thread-safe minimum-interval limiter.

    One instance is shared by every caller that talks to the same service.
    Callers block in ``wait()`` until it is safe to send the next request.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            min_interval: Minimum seconds between consecutive requests
            clock: Monotonic time source (injectable for tests)
            sleep: Sleep function (injectable for tests)
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_request = 0.0
        self.call_count = 0

    def wait(self) -> float:
        """
        Block until the next request may be sent.

        Returns:
            Actual time waited (0 for the first call or when enough time has passed)
        """
        with self._lock:
            wait_time = 0.0
            if self.call_count > 0:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    wait_time = self.min_interval - elapsed
                    self._sleep(wait_time)

            self.call_count += 1
            self._last_request = self._clock()
            return wait_time

    def reset(self):
        """Forget previous calls so the next request goes out immediately."""
        with self._lock:
            self.call_count = 0
            self._last_request = 0.0
