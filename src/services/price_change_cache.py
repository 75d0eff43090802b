from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CAPACITY = 100_000


class LRUCache(Generic[K, V]):
    """In-memory map bounded to ``capacity`` entries, evicting the least recently used one."""

    def __init__(self, *, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            msg = "capacity must be > 0"
            raise ValueError(msg)

        self.capacity = capacity
        self._entries: OrderedDict[K, V] = OrderedDict()

    def has(self, key: K) -> bool:
        return key in self._entries

    def get(self, key: K) -> V | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: K, value: V) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def price_change_cache_key(coin_id: str, days_ago: int) -> str:
    # coin ids are used verbatim, so "Bitcoin" and "bitcoin" are distinct keys
    return f"price-change-{coin_id}-{days_ago}"


__all__ = ["DEFAULT_CAPACITY", "LRUCache", "price_change_cache_key"]
