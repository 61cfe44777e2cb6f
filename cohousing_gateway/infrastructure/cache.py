"""
Result cache with a pluggable store.

The cache lives with the application (see ``api.main.create_app``) and is
handed to request handlers through dependency injection. The domain core
never sees it. Keys are derived from the full input snapshot, so a changed
snapshot is always a miss; the TTL only bounds how long an unchanged
snapshot's result is kept.
"""

import hashlib
import json
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Protocol, Tuple
from cohousing_gateway.infrastructure.observability.metrics import cache_lookup_counter


class ResultStore(Protocol):
    """Storage backend for cached results"""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryResultStore:
    """
    In-process store; entries expire ``ttl_seconds`` after being set.

    Expired entries are swept on every write, and at most ``max_entries``
    are kept; the least recently used entry goes first.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 1024):
        self._clock = clock
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[key] = (now + ttl_seconds, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


def snapshot_key(namespace: str, payload: Any) -> str:
    """Stable key for a JSON-serializable snapshot"""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


class ResultCache:
    """TTL cache over a ResultStore; ``ttl_seconds <= 0`` disables storage"""

    def __init__(self, store: ResultStore, ttl_seconds: float):
        self.store = store
        self.ttl_seconds = ttl_seconds

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Any],
        should_cache: Callable[[Any], bool] = lambda _: True,
    ) -> Any:
        """
        Return the cached value for ``key`` or compute and store it.

        ``should_cache`` lets callers skip storing results such as errors.
        """
        cached = self.store.get(key)
        if cached is not None:
            cache_lookup_counter.labels(result="hit").inc()
            return cached

        cache_lookup_counter.labels(result="miss").inc()
        value = compute()
        if self.ttl_seconds > 0 and should_cache(value):
            self.store.set(key, value, self.ttl_seconds)
        return value

    def invalidate(self, key: str) -> None:
        self.store.delete(key)
