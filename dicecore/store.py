"""In-memory key space with expiry, watch notifications and keyspace stats."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from itertools import islice
from typing import Any, Callable, Hashable

from .objects import Obj

EXPIRE_SAMPLE_SIZE = 20
EXPIRE_REPEAT_THRESHOLD = 0.25
WATCH_QUEUE_SIZE = 100
KEYSPACE_COUNT = 4


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class WatchEvent:
    """A change to a key, sent to whoever watches queries over it."""

    key: str
    operation: str
    value: Obj


class Store:
    """A thread-safe mapping of keys to objects with millisecond expiry."""

    def __init__(
        self,
        time_ms: Callable[[], int] | None = None,
        watch_queue_size: int = WATCH_QUEUE_SIZE,
    ) -> None:
        self._time_ms = time_ms or _now_ms
        self._data: dict[str, Obj] = {}
        self._expires: dict[Obj, int] = {}
        self._lock = threading.RLock()
        self._watch_lock = threading.Lock()
        self.watch_events: queue.Queue[WatchEvent] = queue.Queue(maxsize=watch_queue_size)
        self.watch_list: dict[Hashable, set[Hashable]] = {}
        self.keyspace_stat: list[dict[str, int]] = [{} for _ in range(KEYSPACE_COUNT)]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def _clock(self) -> int:
        return (self._time_ms() // 1000) & 0xFFFFFFFF

    def _notify(self, key: str, operation: str, obj: Obj) -> None:
        self.watch_events.put(WatchEvent(key, operation, obj))

    def _remove(self, key: str) -> Obj | None:
        obj = self._data.pop(key, None)
        if obj is None:
            return None
        self._expires.pop(obj, None)
        stats = self.keyspace_stat[0]
        stats["keys"] = stats.get("keys", 0) - 1
        return obj

    def new_obj(self, value: Any, exp_duration_ms: int, o_type: int, o_enc: int) -> Obj:
        """Create an object; a positive duration sets its expiry from now."""
        obj = Obj(value=value, type_encoding=o_type | o_enc, last_accessed_at=self._clock())
        if exp_duration_ms > 0:
            with self._lock:
                self._expires[obj] = self._time_ms() + exp_duration_ms
        return obj

    def put(self, key: str, obj: Obj) -> None:
        """Store ``obj`` under ``key`` and announce a SET event."""
        with self._lock:
            obj.last_accessed_at = self._clock()
            self._data[key] = obj
            stats = self.keyspace_stat[0]
            stats["keys"] = stats.get("keys", 0) + 1
        self._notify(key, "SET", obj)

    def get(self, key: str) -> Obj | None:
        """Return the live object for ``key``; expired keys are deleted."""
        with self._lock:
            obj = self._data.get(key)
            if obj is None:
                return None
            if not self.has_expired(obj):
                obj.last_accessed_at = self._clock()
                return obj
            self._remove(key)
        self._notify(key, "DEL", obj)
        return None

    def delete(self, key: str) -> bool:
        """Delete ``key``; return whether it was present."""
        with self._lock:
            obj = self._remove(key)
        if obj is None:
            return False
        self._notify(key, "DEL", obj)
        return True

    def items(self) -> list[tuple[str, Obj]]:
        """Return a snapshot of every ``(key, object)`` pair."""
        with self._lock:
            return list(self._data.items())

    def has_expired(self, obj: Obj) -> bool:
        """Return whether ``obj`` has an expiry that is now due."""
        with self._lock:
            exp = self._expires.get(obj)
        return exp is not None and exp <= self._time_ms()

    def get_expiry(self, obj: Obj) -> int | None:
        """Return the absolute expiry of ``obj`` in ms, or None if it has none."""
        with self._lock:
            return self._expires.get(obj)

    def expire_sample(self) -> float:
        """Delete expired keys among a sample; return the expired fraction."""
        with self._lock:
            sample = list(islice(self._data.items(), EXPIRE_SAMPLE_SIZE))
            expired = [key for key, obj in sample if self.has_expired(obj)]
            for key in expired:
                self._remove(key)
        return len(expired) / EXPIRE_SAMPLE_SIZE

    def delete_expired_keys(self) -> None:
        """Sample repeatedly until fewer than a quarter of a sample are expired."""
        while self.expire_sample() >= EXPIRE_REPEAT_THRESHOLD:
            pass

    def add_watcher(self, query: Hashable, client_id: Hashable) -> None:
        """Register ``client_id`` as watching ``query``."""
        with self._watch_lock:
            self.watch_list.setdefault(query, set()).add(client_id)

    def remove_watcher(self, query: Hashable, client_id: Hashable) -> None:
        """Unregister ``client_id``; drop the query once nobody watches it."""
        with self._watch_lock:
            clients = self.watch_list.get(query)
            if clients is None:
                return
            clients.discard(client_id)
            if not clients:
                del self.watch_list[query]

    def update_db_stat(self, num: int, metric: str, value: int) -> None:
        """Set a metric for keyspace ``num``."""
        if not 0 <= num < len(self.keyspace_stat):
            raise IndexError(f"keyspace index out of range: {num}")
        self.keyspace_stat[num][metric] = value