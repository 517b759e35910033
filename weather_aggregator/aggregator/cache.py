import time
import threading
from typing import Callable, Dict, Optional, Tuple

from .models import ForecastBundle


class ForecastCache:
    """In-memory TTL cache of assembled forecast bundles keyed by coordinate.

    An entry is valid while ``now - inserted < ttl``. Expired entries are
    dropped lazily by ``get``; nothing sweeps the map in the background.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl)
        self._clock = clock
        self._entries: Dict[str, Tuple[ForecastBundle, float]] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    @ttl.setter
    def ttl(self, value: float):
        with self._lock:
            self._ttl = float(value)

    def get(self, key: str) -> Optional[ForecastBundle]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            bundle, inserted_at = entry
            if self._clock() - inserted_at < self._ttl:
                return bundle

            del self._entries[key]
            return None

    def set(self, key: str, bundle: ForecastBundle):
        with self._lock:
            self._entries[key] = (bundle, self._clock())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "cache_size": len(self._entries),
                "cache_ttl_seconds": self._ttl,
                "keys": sorted(self._entries.keys())[:50],
            }
