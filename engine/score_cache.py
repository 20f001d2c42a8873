"""Short-lived, injectable cache for factor scores."""

import hashlib
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from models.settings import AssignmentSettings
from config.defaults import SCORE_CACHE_TTL_SECONDS, SCORE_CACHE_MAX_SIZE

logger = logging.getLogger(__name__)


def make_cache_key(
    agent_ids: Iterable[str],
    settings: AssignmentSettings,
    model_name: str,
    snapshot_id: str = "",
) -> str:
    """Fingerprint of (sorted agent ids, serialized settings, model name, snapshot id)."""
    payload = {
        "agents": sorted(agent_ids),
        "settings": settings.to_dict(),
        "model": model_name,
        "snapshot": snapshot_id,
    }
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8"))
    return f"scores:{digest.hexdigest()}"


class ScoreCache:
    """TTL cache with a size bound. Concurrent writers: last one wins."""

    def __init__(
        self,
        default_ttl: float = SCORE_CACHE_TTL_SECONDS,
        max_size: int = SCORE_CACHE_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}   # key -> (value, expires_at)
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            value, expires_at = entry
            if self._clock() > expires_at:
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict_oldest()
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expires_at) in self._entries.items() if now > expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Score cache cleanup removed {len(expired)} entries")
        return len(expired)

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self.hits,
                "misses": self.misses,
            }

    def _evict_oldest(self) -> None:
        # Caller holds the lock
        if not self._entries:
            return
        oldest = min(self._entries, key=lambda k: self._entries[k][1])
        del self._entries[oldest]

    def __len__(self) -> int:
        return len(self._entries)


class NullScoreCache:
    """Cache that never stores anything; every run recomputes."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        return None

    def clear(self) -> None:
        return None

    def stats(self) -> dict:
        return {"size": 0, "max_size": 0, "hits": 0, "misses": 0}
