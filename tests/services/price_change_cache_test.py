from __future__ import annotations

import pytest

from services.price_change_cache import DEFAULT_CAPACITY, LRUCache, price_change_cache_key


def test_overflow_evicts_least_recently_inserted_key() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=3)
    for idx in range(4):
        cache.set(price_change_cache_key("bitcoin", idx), idx)

    assert len(cache) == 3
    assert not cache.has(price_change_cache_key("bitcoin", 0))
    assert [cache.get(price_change_cache_key("bitcoin", idx)) for idx in (1, 2, 3)] == [1, 2, 3]


def test_get_refreshes_recency() -> None:
    cache: LRUCache[str, str] = LRUCache(capacity=2)
    cache.set("a", "first")
    cache.set("b", "second")

    assert cache.get("a") == "first"
    cache.set("c", "third")

    assert cache.has("a")
    assert not cache.has("b")
    assert cache.has("c")


def test_set_existing_key_overwrites_without_growing() -> None:
    cache: LRUCache[str, int] = LRUCache(capacity=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert len(cache) == 2
    assert cache.get("a") == 10
    assert "b" not in cache


def test_get_missing_key_returns_none() -> None:
    cache: LRUCache[str, int] = LRUCache()

    assert cache.get("missing") is None
    assert cache.capacity == DEFAULT_CAPACITY == 100_000


@pytest.mark.parametrize("capacity", [0, -5])
def test_capacity_must_be_positive(capacity: int) -> None:
    with pytest.raises(ValueError):
        LRUCache(capacity=capacity)


def test_cache_key_combines_id_and_offset_verbatim() -> None:
    assert price_change_cache_key("bitcoin", 7) == "price-change-bitcoin-7"
    assert price_change_cache_key(" Bitcoin", 7) != price_change_cache_key("bitcoin", 7)
