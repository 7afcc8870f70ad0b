"""
In-memory notice board for short-lived admin notices.

A notice is raised by a content event and popped by the next admin page
load; it expires after its TTL if nobody reads it. State lives in this
process only.
"""

import threading
import time
from collections.abc import Callable


class InMemoryNoticeBoard:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires: dict[str, float] = {}
        self._lock = threading.Lock()

    def raise_notice(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            self._expires[key] = self._clock() + ttl_seconds

    def pop_notice(self, key: str) -> bool:
        """True if the notice was live. It is removed either way."""
        with self._lock:
            expires_at = self._expires.pop(key, None)
        return expires_at is not None and expires_at > self._clock()
