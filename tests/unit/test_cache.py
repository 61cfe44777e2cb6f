"""Unit tests for the injected result cache"""

from cohousing_gateway.infrastructure.cache import InMemoryResultStore, ResultCache, snapshot_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_store_expires_entries():
    clock = FakeClock()
    store = InMemoryResultStore(clock=clock)

    store.set("k", "v", ttl_seconds=60)
    assert store.get("k") == "v"

    clock.now += 60
    assert store.get("k") is None
    assert len(store) == 0


def test_store_delete_missing_key_is_noop():
    store = InMemoryResultStore()
    store.delete("missing")
    assert store.get("missing") is None


def test_get_or_compute_calls_once_within_ttl():
    calls = []
    cache = ResultCache(InMemoryResultStore(clock=FakeClock()), ttl_seconds=30)

    def compute():
        calls.append(1)
        return {"value": 42}

    assert cache.get_or_compute("k", compute) == {"value": 42}
    assert cache.get_or_compute("k", compute) == {"value": 42}
    assert len(calls) == 1


def test_get_or_compute_recomputes_after_expiry():
    clock = FakeClock()
    cache = ResultCache(InMemoryResultStore(clock=clock), ttl_seconds=30)
    results = iter(["first", "second"])

    assert cache.get_or_compute("k", lambda: next(results)) == "first"
    clock.now += 31
    assert cache.get_or_compute("k", lambda: next(results)) == "second"


def test_should_cache_skips_storage():
    store = InMemoryResultStore()
    cache = ResultCache(store, ttl_seconds=30)

    cache.get_or_compute("k", lambda: "error", should_cache=lambda value: value != "error")

    assert len(store) == 0


def test_zero_ttl_disables_storage():
    store = InMemoryResultStore()
    cache = ResultCache(store, ttl_seconds=0)

    cache.get_or_compute("k", lambda: "value")

    assert len(store) == 0


def test_invalidate_removes_entry():
    store = InMemoryResultStore()
    cache = ResultCache(store, ttl_seconds=30)
    cache.get_or_compute("k", lambda: "value")

    cache.invalidate("k")

    assert store.get("k") is None


def test_snapshot_key_ignores_key_order():
    a = snapshot_key("metrics", {"members": [1, 2], "estimatedMonthlyCost": 3000})
    b = snapshot_key("metrics", {"estimatedMonthlyCost": 3000, "members": [1, 2]})

    assert a == b
    assert a.startswith("metrics:")
    assert a != snapshot_key("contributions", {"members": [1, 2], "estimatedMonthlyCost": 3000})
    assert a != snapshot_key("metrics", {"members": [2, 1], "estimatedMonthlyCost": 3000})


def test_expired_entries_swept_on_write():
    """Every snapshot hashes to a new key; stale keys must not pile up"""
    clock = FakeClock()
    store = InMemoryResultStore(clock=clock)

    for i in range(1000):
        store.set(f"k{i}", i, ttl_seconds=1)
        clock.now += 10

    assert len(store) == 1


def test_store_evicts_least_recently_used():
    store = InMemoryResultStore(clock=FakeClock(), max_entries=3)
    for key in ("a", "b", "c"):
        store.set(key, key, ttl_seconds=60)

    store.get("a")
    store.set("d", "d", ttl_seconds=60)

    assert len(store) == 3
    assert store.get("b") is None
    assert [store.get(k) for k in ("a", "c", "d")] == ["a", "c", "d"]
