# tests/test_cache.py

"""
Tests for the permission record cache.
"""

from unittest.mock import patch
from datetime import datetime, timedelta

from core.cache import MISS, RecordCache, cache_clear, cache_delete, cache_get, cache_set


def test_cache_set_and_get():
    cache_set("permissions:u1", "record", ttl_seconds=60)

    assert cache_get("permissions:u1") == "record"


def test_cached_absence_is_not_a_miss():
    cache_set("permissions:u1", None, ttl_seconds=60)

    assert cache_get("permissions:u1") is None
    assert cache_get("permissions:u2") is MISS


def test_cache_expiration():
    cache = RecordCache()
    cache.set("k", "v", ttl_seconds=1)

    later = datetime.now() + timedelta(seconds=5)
    with patch("core.cache.datetime") as mock_datetime:
        mock_datetime.now.return_value = later
        assert cache.get("k") is MISS

    assert cache.size() == 0


def test_zero_ttl_disables_caching():
    cache = RecordCache()
    cache.set("k", "v", ttl_seconds=0)

    assert cache.get("k") is MISS


def test_cache_delete_and_clear():
    cache_set("key1", "value1")
    cache_set("key2", "value2")

    cache_delete("key1")
    assert cache_get("key1") is MISS
    assert cache_get("key2") == "value2"

    cache_clear()
    assert cache_get("key2") is MISS
