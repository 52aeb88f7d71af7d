"""A chained hash table keyed by strings, bucketed with the 32-bit FNV-1a hash."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

FNV1_32_INIT = 2166136261
_MASK32 = 0xFFFFFFFF
DEFAULT_SIZE = 10240


def fnv_32a(data: bytes, hval: int = FNV1_32_INIT) -> int:
    """Return the 32-bit FNV-1a hash of ``data`` starting from ``hval``."""
    for octet in data:
        hval ^= octet
        hval = (hval + (hval << 1) + (hval << 4) + (hval << 7)
                + (hval << 8) + (hval << 24)) & _MASK32
    return hval


@dataclass
class _Node:
    key: str
    value: Any


class HashTable:
    """String-keyed map that keeps the first value stored under a key.

    The table grows to twice its size once it is a quarter full. An
    optional destroyer is called on every value that is removed.
    """

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        self._size = size
        self._entries = 0
        self._table: list[list[_Node]] = [[] for _ in range(size)]
        self._destroyer: Callable[[Any], None] | None = None

    def _bucket(self, key: str) -> list[_Node]:
        return self._table[fnv_32a(key.encode("utf-8")) % self._size]

    def _resize(self) -> None:
        new_size = 2
        while new_size < self._size * 2:
            new_size <<= 1
        old_table = self._table
        self._size = new_size
        self._table = [[] for _ in range(new_size)]
        for bucket in old_table:
            for node in bucket:
                self._bucket(node.key).insert(0, node)

    def add(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` unless the key is already present."""
        if key in self:
            return
        if self._entries >= self._size // 4:
            self._resize()
        self._bucket(key).insert(0, _Node(key, value))
        self._entries += 1

    def get(self, key: str | None) -> Any:
        """Return the value stored under ``key``, or None."""
        if key is None:
            return None
        for node in self._bucket(key):
            if node.key == key:
                return node.value
        return None

    def remove(self, key: str) -> None:
        """Remove ``key`` if present, handing its value to the destroyer."""
        if key is None:
            return
        bucket = self._bucket(key)
        for position, node in enumerate(bucket):
            if node.key == key:
                del bucket[position]
                self._entries -= 1
                if self._destroyer is not None and node.value is not None:
                    self._destroyer(node.value)
                return

    def contains(self, key: str | None) -> bool:
        """Return True if ``key`` is stored in the table."""
        if key is None:
            return False
        return any(node.key == key for node in self._bucket(key))

    def keys(self) -> list[str]:
        """Return every key, in bucket order."""
        return [node.key for bucket in self._table for node in bucket]

    def set_destroyer(self, func: Callable[[Any], None] | None) -> None:
        """Set the callable applied to values as they are removed."""
        self._destroyer = func

    def destroy(self) -> None:
        """Remove every entry, handing each value to the destroyer."""
        for bucket in self._table:
            for node in bucket:
                if self._destroyer is not None and node.value is not None:
                    self._destroyer(node.value)
            bucket.clear()
        self._entries = 0

    def __len__(self) -> int:
        return self._entries

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())