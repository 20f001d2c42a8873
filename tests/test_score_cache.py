"""Tests for the factor score cache."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.settings import AssignmentRatios, AssignmentSettings, AssignmentTargets
from engine.score_cache import ScoreCache, NullScoreCache, make_cache_key


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def make_settings(turnover=30):
    return AssignmentSettings(
        ratios=AssignmentRatios(turnover_rate=turnover),
        targets=AssignmentTargets(offices={"Seoul": True}),
    )


class TestMakeCacheKey:
    def test_agent_order_irrelevant(self):
        settings = make_settings()
        assert make_cache_key(["A2", "A1"], settings, "X1") == make_cache_key(["A1", "A2"], settings, "X1")

    def test_inputs_change_key(self):
        base = make_cache_key(["A1"], make_settings(), "X1", "snap-1")
        assert base.startswith("scores:")
        assert make_cache_key(["A1"], make_settings(turnover=40), "X1", "snap-1") != base
        assert make_cache_key(["A1"], make_settings(), "Y2", "snap-1") != base
        assert make_cache_key(["A1"], make_settings(), "X1", "snap-2") != base
        assert make_cache_key(["A1", "A2"], make_settings(), "X1", "snap-1") != base


class TestScoreCache:
    def test_get_set(self):
        cache = ScoreCache(default_ttl=10, clock=FakeClock())
        cache.set("k", {"Black": []})
        assert cache.get("k") == {"Black": []}
        assert cache.stats()["hits"] == 1

    def test_expiry(self):
        clock = FakeClock()
        cache = ScoreCache(default_ttl=10, clock=clock)
        cache.set("k", 1)
        clock.now = 10
        assert cache.get("k") == 1
        clock.now = 10.5
        assert cache.get("k") is None
        assert len(cache) == 0
        assert cache.misses == 1

    def test_per_entry_ttl(self):
        clock = FakeClock()
        cache = ScoreCache(default_ttl=100, clock=clock)
        cache.set("short", 1, ttl=1)
        cache.set("long", 2)
        clock.now = 5
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_max_size_evicts_oldest(self):
        clock = FakeClock()
        cache = ScoreCache(default_ttl=10, max_size=2, clock=clock)
        cache.set("a", 1)
        clock.now = 1
        cache.set("b", 2)
        clock.now = 2
        cache.set("c", 3)
        assert len(cache) == 2
        assert cache.get("a") is None
        assert cache.get("c") == 3

    def test_overwrite_does_not_evict(self):
        cache = ScoreCache(default_ttl=10, max_size=1, clock=FakeClock())
        cache.set("a", 1)
        cache.set("a", 2)
        assert cache.get("a") == 2

    def test_cleanup_and_clear(self):
        clock = FakeClock()
        cache = ScoreCache(default_ttl=5, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2, ttl=50)
        clock.now = 6
        assert cache.cleanup() == 1
        assert len(cache) == 1
        cache.delete("b")
        assert len(cache) == 0
        cache.set("c", 3)
        cache.clear()
        assert cache.get("c") is None


class TestNullScoreCache:
    def test_never_stores(self):
        cache = NullScoreCache()
        cache.set("k", 1)
        assert cache.get("k") is None
