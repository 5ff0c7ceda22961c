"""A most-recently-used keyed store for partition writers."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Generic, TypeVar

V = TypeVar("V")


class WriterCache(Generic[V]):
    """Keeps writers by key, most recently used first.

    Entries are never evicted; ``capacity`` is recorded for reference only.
    """

    def __init__(self, capacity: int = 100) -> None:
        self.capacity = capacity
        self._items: OrderedDict[str, V] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        """Return the value for ``key`` and mark it most recent, or None."""
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key, last=False)
            return self._items[key]

    def put(self, key: str, value: V) -> None:
        """Store ``value`` under ``key`` unless the key is already present."""
        with self._lock:
            if key in self._items:
                return
            self._items[key] = value
            self._items.move_to_end(key, last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)