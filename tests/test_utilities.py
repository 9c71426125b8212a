"""Tests for the TTL cache, date ranges, debouncer and proxy response cache."""

import threading
from datetime import date

import pytest

from pitchview.client import Debouncer
from pitchview.core import DateRange
from pitchview.proxy import ResponseCache
from pitchview.utilities.cache import TTLCache, make_cache_key
from pitchview.utilities.dates import day_range, past_weekend_range, today_range

from tests.fakes import FakeClock

# ---------- TTL cache ----------


class TestTTLCache:
    def test_make_cache_key(self):
        assert make_cache_key("squad", 57) == "squad:57"

    def test_entry_expires(self):
        clock = FakeClock()
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)

        clock.advance(9)
        assert cache.get("a") == 1
        clock.advance(1)
        assert cache.get("a") is None

    def test_no_ttl_never_expires(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        clock.advance(10**6)
        assert "a" in cache

    def test_stats(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert (stats["size"], stats["hits"], stats["misses"]) == (1, 1, 1)
        assert stats["hit_rate"] == 50.0

    def test_membership_check_leaves_counters_alone(self):
        clock = FakeClock()
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)

        assert "a" in cache
        assert "b" not in cache
        clock.advance(10)
        assert "a" not in cache

        stats = cache.stats()
        assert (stats["hits"], stats["misses"]) == (0, 0)

    def test_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0


class TestResponseCache:
    def test_max_age_counts_down(self):
        clock = FakeClock()
        cache = ResponseCache(ttl=60, clock=clock)
        cache.put("/competitions", b"{}", 200, "application/json")

        clock.advance(59.5)
        entry = cache.get("/competitions")

        assert entry is not None
        assert cache.max_age(entry) == 1

    def test_stale_entry_is_a_miss(self):
        clock = FakeClock()
        cache = ResponseCache(ttl=60, clock=clock)
        cache.put("/competitions", b"{}", 200, "application/json")

        clock.advance(60)

        assert cache.get("/competitions") is None

    def test_stats_come_from_the_backing_ttl_cache(self):
        cache = ResponseCache(ttl=60, clock=FakeClock())
        cache.get("/competitions")
        cache.put("/competitions", b"{}", 200, "application/json")
        cache.get("/competitions")

        assert "/competitions" in cache
        assert cache.stats() == {"size": 1, "ttl": 60, "hits": 1, "misses": 1}


# ---------- dates ----------


class TestDateRanges:
    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2024, 5, 15), (date(2024, 5, 11), date(2024, 5, 12))),  # Wednesday
            (date(2024, 5, 12), (date(2024, 5, 11), date(2024, 5, 12))),  # Sunday
            (date(2024, 5, 13), (date(2024, 5, 11), date(2024, 5, 12))),  # Monday
            (date(2024, 5, 18), (date(2024, 5, 11), date(2024, 5, 12))),  # Saturday
        ],
    )
    def test_past_weekend(self, today, expected):
        r = past_weekend_range(today)
        assert (r.date_from, r.date_to) == expected

    def test_today(self):
        r = today_range(date(2024, 5, 15))
        assert r.date_from == r.date_to == date(2024, 5, 15)

    def test_day_from_string(self):
        assert day_range("2024-04-20").as_params() == {
            "dateFrom": "2024-04-20",
            "dateTo": "2024-04-20",
        }

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError):
            DateRange(date(2024, 5, 12), date(2024, 5, 11))


# ---------- debounce ----------


class TestDebouncer:
    def test_only_last_call_runs(self):
        calls = []
        debounced = Debouncer(calls.append, wait=60)

        for text in ("r", "ro", "ron"):
            debounced(text)
        debounced.flush()

        assert calls == ["ron"]
        assert not debounced.pending

    def test_cancel_drops_pending_call(self):
        calls = []
        debounced = Debouncer(calls.append, wait=60)

        debounced("r")
        debounced.cancel()
        debounced.flush()

        assert calls == []

    def test_fires_after_wait(self):
        fired = threading.Event()
        debounced = Debouncer(lambda: fired.set(), wait=0.01)

        debounced()

        assert fired.wait(timeout=5)
