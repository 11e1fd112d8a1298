"""
Explicit TTL cache for provider responses.

Owned by whoever constructs it (usually a MarketDataService); there is no
module-level instance. TTL and clock are injected so tests can control time.
"""

import os
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple


def default_ttl_seconds() -> float:
    return float(os.getenv('CRYPTO_CACHE_TTL_S', '60'))


class ResponseCache:
    """
    Key/value cache whose entries expire `ttl_seconds` after being set.

    Args:
        ttl_seconds: Entry lifetime in seconds (0 disables caching)
        clock: Monotonic time source returning seconds
    """

    def __init__(self, ttl_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if self.ttl_seconds == 0:
            return
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def get_or_fetch(self, key: Hashable, fetch: Callable[[], Any]) -> Any:
        """
        Return the cached value or call fetch() and cache its result.

        Exceptions from fetch propagate and nothing is cached.
        """
        value = self.get(key)
        if value is not None:
            return value

        value = fetch()
        self.set(key, value)
        return value

    def invalidate(self, key: Hashable) -> bool:
        """Drop one entry; returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
