"""
Response cache for card reads
Thread-safe TTL cache with group tags and purge-by-group
"""

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

CARDS_CACHE_GROUP = "/cards"


@dataclass
class _Entry:
    value: Any
    group: str
    expires_at: float


class ResponseCache:
    """
    In-memory read cache shared by all requests of one app.

    Entries are tagged with a group so that any card mutation can drop
    every cached card read at once. A read racing a purge may put a
    stale value back; the TTL bounds how long it survives.
    """

    def __init__(
        self,
        ttl_seconds: float,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize cache.

        Args:
            ttl_seconds: Lifetime of each entry
            enabled: When False every lookup misses and nothing is stored
            clock: Monotonic time source
        """
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._clock = clock
        self._lock = Lock()
        self._entries: Dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None when missing or expired."""
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, group: str = CARDS_CACHE_GROUP) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = _Entry(
                value=value,
                group=group,
                expires_at=self._clock() + self.ttl_seconds,
            )

    def clear(self, group: Optional[str] = None) -> int:
        """
        Purge cached entries.

        Args:
            group: Only purge entries tagged with this group; all when None

        Returns:
            Number of entries removed
        """
        with self._lock:
            if group is None:
                purged = len(self._entries)
                self._entries.clear()
            else:
                keys = [k for k, e in self._entries.items() if e.group == group]
                for key in keys:
                    del self._entries[key]
                purged = len(keys)

        logger.debug(f"Cache purge group={group} removed={purged}")
        return purged

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
