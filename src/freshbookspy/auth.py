"""Authentication and client-side throttling for the FreshBooks API."""

import base64
import threading
import time
from collections import deque


class RateLimiter:
    """Sliding-window rate limiter.

    Allows at most ``max_per_second`` requests in any one-second window,
    sleeping the calling thread when the window is full.
    """

    def __init__(self, max_per_second: int) -> None:
        """Initialize rate limiter.

        Args:
            max_per_second: Maximum number of requests per second
        """
        if max_per_second < 1:
            raise ValueError("max_per_second must be at least 1")
        self._lock = threading.Lock()
        self._max_per_second = max_per_second
        self._request_times: deque[float] = deque(maxlen=max_per_second)

    def _expire(self, now: float) -> None:
        while self._request_times and now - self._request_times[0] > 1.0:
            self._request_times.popleft()

    def acquire(self) -> None:
        """Block until another request may be sent."""
        with self._lock:
            now = time.monotonic()
            self._expire(now)

            if len(self._request_times) >= self._max_per_second:
                sleep_time = 1.0 - (now - self._request_times[0])
                if sleep_time > 0:
                    time.sleep(sleep_time)
                now = time.monotonic()
                self._expire(now)

            self._request_times.append(now)


class TokenAuth:
    """Authentication using an account API token.

    The token is sent preemptively as the HTTP Basic user name; the password
    is ignored by the service.
    """

    def __init__(self, api_token: str) -> None:
        """Initialize token authentication.

        Args:
            api_token: Authentication token from the account's profile page
        """
        if not api_token:
            raise ValueError("api_token must not be empty")
        self.api_token = api_token

    def get_headers(self) -> dict[str, str]:
        """Get authentication headers."""
        credentials = base64.b64encode(f"{self.api_token}:X".encode()).decode("ascii")
        return {"Authorization": f"Basic {credentials}"}
