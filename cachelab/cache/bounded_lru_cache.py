from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Generic, TypeVar

KeyT = TypeVar("KeyT")
ValueT = TypeVar("ValueT")


class BoundedLRUCache(Generic[KeyT, ValueT]):
    """Evicts the least recently used entry once max_size entries are held."""

    __slots__ = ("_max_size", "_entries", "_evictions")

    def __init__(self, max_size: int | None) -> None:
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")

        # None leaves the cache unbounded.
        self._max_size = max_size
        self._entries: OrderedDict[KeyT, ValueT] = OrderedDict()
        self._evictions = 0

    def get(self, key: KeyT) -> ValueT | None:
        if key not in self._entries:
            return None

        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: KeyT, value: ValueT) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)

        elif self._max_size is not None and len(self._entries) >= self._max_size:
            self._entries.popitem(last=False)
            self._evictions += 1

        self._entries[key] = value

    def remove(self, key: KeyT) -> ValueT | None:
        return self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: KeyT) -> bool:
        return key in self._entries

    @property
    def max_size(self) -> int | None:
        return self._max_size

    @property
    def evictions(self) -> int:
        return self._evictions


class SizeBoundedLRUCache(Generic[KeyT, ValueT]):
    """
    Evicts least recently used entries until the summed size of the stored
    values fits within max_bytes. A single value larger than max_bytes is
    rejected with ValueError and leaves the cache untouched.
    """

    __slots__ = (
        "_max_bytes",
        "_size_of",
        "_entries",
        "_sizes",
        "_total_bytes",
        "_evictions",
    )

    def __init__(
        self,
        max_bytes: int,
        size_of: Callable[[ValueT], int],
    ) -> None:
        if max_bytes < 1:
            raise ValueError("max_bytes must be at least 1")

        self._max_bytes = max_bytes
        self._size_of = size_of
        self._entries: OrderedDict[KeyT, ValueT] = OrderedDict()
        self._sizes: dict[KeyT, int] = {}
        self._total_bytes = 0
        self._evictions = 0

    def get(self, key: KeyT) -> ValueT | None:
        if key not in self._entries:
            return None

        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: KeyT, value: ValueT) -> None:
        size = self._size_of(value)
        if size > self._max_bytes:
            raise ValueError(
                f"value of {size} bytes exceeds the {self._max_bytes} byte capacity"
            )

        self.remove(key)

        while self._total_bytes + size > self._max_bytes:
            evicted, _ = self._entries.popitem(last=False)
            self._total_bytes -= self._sizes.pop(evicted)
            self._evictions += 1

        self._entries[key] = value
        self._sizes[key] = size
        self._total_bytes += size

    def remove(self, key: KeyT) -> ValueT | None:
        if key not in self._entries:
            return None

        self._total_bytes -= self._sizes.pop(key)
        return self._entries.pop(key)

    def clear(self) -> None:
        self._entries.clear()
        self._sizes.clear()
        self._total_bytes = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: KeyT) -> bool:
        return key in self._entries

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    @property
    def total_bytes(self) -> int:
        return self._total_bytes

    @property
    def evictions(self) -> int:
        return self._evictions
