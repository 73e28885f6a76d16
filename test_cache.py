import time

from scanner.storage.cache import TTLCache, cache_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(clock=clock)

    cache.set("k", "v", ttl=0.1)
    assert cache.get("k") == "v"

    clock.now += 0.15
    assert cache.get("k") is None
    # Stale entry is evicted on read
    assert len(cache) == 0

    cache.set("k", "v2", ttl=0.1)
    assert cache.get("k") == "v2"


def test_expiry_boundary_is_exclusive():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("k", 1, ttl=10)
    clock.now += 10
    assert cache.get("k") is None


def test_real_clock_expiry():
    cache = TTLCache()
    cache.set("k", "v", ttl=0.1)
    assert cache.get("k") == "v"
    time.sleep(0.15)
    assert cache.get("k") is None


def test_default_ttl_and_overwrite():
    clock = FakeClock()
    cache = TTLCache(default_ttl=2 * 60 * 60, clock=clock)

    cache.set("k", "old")
    cache.set("k", "new")
    clock.now += 2 * 60 * 60 - 1
    assert cache.get("k") == "new"
    clock.now += 1
    assert cache.get("k") is None


def test_overwrite_resets_expiry():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("k", "a", ttl=5)
    clock.now += 4
    cache.set("k", "b", ttl=5)
    clock.now += 4
    assert cache.get("k") == "b"


def test_clear():
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is None


def test_cache_key_format():
    assert cache_key("solana", "Mint111") == "token-data:solana-Mint111"
