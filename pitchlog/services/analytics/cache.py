"""
Optional memoization of analytics results.

Results are keyed by the computation name, its parameters and a SHA-256
hash of the match list content, so any edit to any match produces a new
key and stale entries simply age out of the LRU.
"""
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import Any, Callable, Dict, Sequence

from pitchlog.services.analytics.types import MatchRecord

logger = logging.getLogger(__name__)


def content_hash(matches: Sequence[MatchRecord]) -> str:
    """Stable hash of the match list, order included."""
    payload = json.dumps([asdict(m) for m in matches], sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AnalyticsCache:
    """Bounded LRU of computation results keyed by match-list content."""

    def __init__(self, max_entries: int = 128):
        """
        Initialize the cache.

        Args:
            max_entries: Maximum cached results; 0 disables caching
        """
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _get_cache_key(self, name: str, matches: Sequence[MatchRecord], **params) -> str:
        """Generate cache key from computation name, parameters and content hash."""
        param_str = ",".join(f"{k}={v}" for k, v in sorted(params.items()))
        return f"{name}:{param_str}:{content_hash(matches)}"

    def get_or_compute(
        self,
        name: str,
        matches: Sequence[MatchRecord],
        compute: Callable[..., Any],
        **params
    ) -> Any:
        """
        Return the cached result of compute(matches, **params), computing it on a miss.

        The computation runs outside the lock; two concurrent misses may both
        compute, which is harmless for pure functions.
        """
        if self.max_entries <= 0:
            return compute(matches, **params)

        key = self._get_cache_key(name, matches, **params)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]
            self.misses += 1

        result = compute(matches, **params)

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}
