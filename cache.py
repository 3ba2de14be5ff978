'''
Memoization of derived views.

Every view is a pure function of (flight data, filter parameters), so results
can be kept per parameter set and reused until the data is reloaded.
'''

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ViewCache:
    '''In-memory LRU cache keyed by view kind + parameters.'''

    def __init__(self, max_entries: int = 128):
        '''
        Initialize the cache.

        Args:
            max_entries: Least recently used entries are evicted past this size
        '''
        self.max_entries = max_entries
        self._entries: 'OrderedDict[str, Any]' = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _make_key(self, kind: str, params: dict) -> str:
        '''Generate a cache key from view kind and parameters.'''
        sorted_params = json.dumps(params, sort_keys=True, default=str)
        key_string = f"{kind}:{sorted_params}"
        return hashlib.sha256(key_string.encode()).hexdigest()

    def get(self, kind: str, params: dict) -> Optional[Any]:
        '''
        Get cached value if present.

        Returns:
            Cached view or None if not found
        '''
        key = self._make_key(kind, params)
        with self._lock:
            if key not in self._entries:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key]

    def set(self, kind: str, params: dict, value: Any):
        '''Store a view, evicting the oldest entry when full.'''
        key = self._make_key(kind, params)
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def get_or_compute(self, kind: str, params: dict, compute: Callable[[], Any]) -> Any:
        cached = self.get(kind, params)
        if cached is not None:
            return cached
        logger.debug(f"Cache miss for {kind} {params}")
        value = compute()
        self.set(kind, params, value)
        return value

    def clear_all(self):
        '''Drop every cached view (call after reloading data).'''
        with self._lock:
            self._entries.clear()

    def get_stats(self) -> dict:
        '''Get cache statistics.'''
        with self._lock:
            return {
                'total_entries': len(self._entries),
                'hits': self.hits,
                'misses': self.misses,
            }
