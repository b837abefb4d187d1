import threading

from xdc_agent_plugin.cache import ResultCache


def test_get_returns_value_before_expiry(cache, clock):
    cache.set("k", {"a": 1})
    clock.now += 59
    assert cache.get("k") == {"a": 1}


def test_entries_expire_after_ttl(cache, clock):
    cache.set("k", "v")
    clock.now += 60
    assert cache.get("k") is None
    assert len(cache) == 0


def test_missing_key(cache):
    assert cache.get("nope") is None


def test_set_replaces_and_restarts_ttl(cache, clock):
    cache.set("k", "old")
    clock.now += 50
    cache.set("k", "new")
    clock.now += 50
    assert cache.get("k") == "new"


def test_per_entry_ttl_override(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2)
    clock.now += 10
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_delete_and_clear(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    assert cache.get("a") is None
    cache.clear()
    assert len(cache) == 0


def test_concurrent_writers_do_not_corrupt():
    cache = ResultCache(ttl_seconds=60, max_size=2000)

    def writer(prefix):
        for i in range(200):
            cache.set(f"{prefix}-{i}", i)
            cache.get(f"{prefix}-{i}")

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 8 * 200
    assert cache.get("3-199") == 199


def test_set_purges_expired_entries(clock):
    cache = ResultCache(ttl_seconds=60, clock=clock)
    for i in range(1000):
        cache.set(f"portfolio_xdc_{i}", i)

    clock.now += 3600
    cache.set("fresh", 1)

    assert list(cache._entries) == ["fresh"]
    assert len(cache) == 1


def test_max_size_evicts_least_recently_used(clock):
    cache = ResultCache(ttl_seconds=60, clock=clock, max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert len(cache._entries) == 2


def test_expired_read_drops_entry(cache, clock):
    cache.set("k", "v")
    clock.now += 61
    assert cache.get("k") is None
    assert "k" not in cache._entries
