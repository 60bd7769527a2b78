import threading
from typing import Any, Callable, Dict, Hashable, Tuple

QueryKey = Tuple[Hashable, ...]


class QueryCache:
    """
    Results keyed by query key. Entries never go stale on their own; they
    leave only through ``invalidate``. Concurrent fetches of the same key
    share one load.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[QueryKey, Any] = {}
        self._inflight: Dict[QueryKey, threading.Event] = {}

    def get(self, key: QueryKey, default=None):
        with self._lock:
            return self._data.get(key, default)

    def __contains__(self, key: QueryKey) -> bool:
        with self._lock:
            return key in self._data

    def fetch(self, key: QueryKey, loader: Callable[[], Any]):
        while True:
            with self._lock:
                if key in self._data:
                    return self._data[key]
                waiting = self._inflight.get(key)
                if waiting is None:
                    done = self._inflight[key] = threading.Event()
                    break
            waiting.wait()
            # The other load may have failed; loop and load ourselves.

        try:
            value = loader()
            with self._lock:
                self._data[key] = value
            return value
        finally:
            with self._lock:
                self._inflight.pop(key, None)
            done.set()

    def invalidate(self, prefix: QueryKey = ()) -> int:
        n = len(prefix)
        with self._lock:
            stale = [k for k in self._data if k[:n] == prefix]
            for k in stale:
                del self._data[k]
        return len(stale)
