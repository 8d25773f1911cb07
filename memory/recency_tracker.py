"""Time-windowed record of recently generated outfits."""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Iterable, Optional

from engine_app.config import SECONDS_PER_DAY
from models.outfit import KEY_DELIMITER, outfit_key

DEFAULT_EXPIRY_SECONDS = 7 * SECONDS_PER_DAY


def jaccard_similarity(first_key: str, second_key: str) -> float:
    """Jaccard similarity between the item sets encoded in two outfit keys."""

    first = set(first_key.split(KEY_DELIMITER)) if first_key else set()
    second = set(second_key.split(KEY_DELIMITER)) if second_key else set()
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


class RecencyTracker:
    """Map of outfit key to the epoch second it was last generated.

    Writes are serialised with a lock so an engine shared between threads keeps
    a consistent record. The clock is injectable for deterministic tests.
    """

    def __init__(
        self,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.expiry_seconds = expiry_seconds
        self.clock = clock
        self._entries: Dict[str, float] = {}
        self._lock = threading.Lock()

    outfit_key = staticmethod(outfit_key)

    def now(self) -> float:
        return self.clock()

    def record(self, keys: Iterable[str], timestamp: Optional[float] = None) -> None:
        stamp = self.now() if timestamp is None else timestamp
        with self._lock:
            for key in keys:
                self._entries[key] = stamp

    def cleanup(self) -> int:
        """Drop entries older than the expiry window; return how many were removed."""

        cutoff = self.now() - self.expiry_seconds
        with self._lock:
            expired = [key for key, stamp in self._entries.items() if stamp < cutoff]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def last_generated(self, key: str) -> Optional[float]:
        with self._lock:
            return self._entries.get(key)

    def age_days(self, key: str) -> Optional[float]:
        stamp = self.last_generated(key)
        if stamp is None:
            return None
        return max(0.0, (self.now() - stamp) / SECONDS_PER_DAY)

    def entries(self) -> Dict[str, float]:
        with self._lock:
            return dict(sorted(self._entries.items()))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


__all__ = ["RecencyTracker", "jaccard_similarity", "DEFAULT_EXPIRY_SECONDS"]
