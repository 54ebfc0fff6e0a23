from __future__ import annotations

import itertools
import threading

from feedbot.monitor import Monitor


class MonitorRegistry:
    """Insertion-ordered set of active monitors with a per-user index.

    Monitors live in a dict keyed by a private handle, so iteration follows
    insertion order and removing a user's monitor is a pair of dict deletes.
    One lock covers both tables; they are never seen out of step.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles = itertools.count()
        self._monitors: dict[int, Monitor] = {}
        self._by_key: dict[str, int] = {}

    def add(self, monitor: Monitor, key: str | None = None) -> Monitor | None:
        """Register ``monitor``; a monitor already held under ``key`` is dropped and returned."""
        with self._lock:
            replaced = None
            if key is not None and key in self._by_key:
                replaced = self._monitors.pop(self._by_key.pop(key))
            handle = next(self._handles)
            self._monitors[handle] = monitor
            if key is not None:
                self._by_key[key] = handle
            return replaced

    def remove(self, key: str) -> bool:
        with self._lock:
            handle = self._by_key.pop(key, None)
            if handle is None:
                return False
            del self._monitors[handle]
            return True

    def snapshot(self) -> list[Monitor]:
        with self._lock:
            return list(self._monitors.values())

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._by_key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._by_key

    def __len__(self) -> int:
        with self._lock:
            return len(self._monitors)
