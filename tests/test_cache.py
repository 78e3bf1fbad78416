"""Tests for the landing payload cache."""

from core.cache import CampaignDataCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_empty_cache_misses():
    cache = CampaignDataCache(ttl=15, clock=FakeClock())
    assert cache.get() is None
    assert cache.timestamp is None


def test_hit_within_window_and_miss_after():
    clock = FakeClock()
    cache = CampaignDataCache(ttl=15, clock=clock)
    cache.set({"stats": 1})

    clock.now += 14.9
    assert cache.get() == {"stats": 1}

    clock.now += 0.1
    assert cache.get() is None


def test_invalidate_drops_value_immediately():
    cache = CampaignDataCache(ttl=15, clock=FakeClock())
    cache.set("payload")
    assert cache.is_fresh

    cache.invalidate()
    assert cache.get() is None
    assert cache.timestamp is None
    assert not cache.is_fresh
