"""
In-memory compiled template cache with LRU eviction.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from templar.templating.compiled import CompiledTemplate


@dataclass
class CacheItem:
    key: str
    value: CompiledTemplate
    created_at: datetime
    accessed_at: datetime
    access_count: int = 0


class TemplateCache:
    """
    Bounded mapping from template name to CompiledTemplate.

    The cache is its own lock boundary: get and put are safe to call from any
    number of concurrent render pipelines, and an entry only becomes visible
    once put has stored the fully compiled template.
    """

    def __init__(self, maximum_size: int = 100):
        if maximum_size < 0:
            raise ValueError(f"maximum_size must be >= 0, got {maximum_size}")
        self.maximum_size = maximum_size
        self._items: "OrderedDict[str, CacheItem]" = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.logger = logging.getLogger("templar.cache")

    def get(self, key: str) -> Optional[CompiledTemplate]:
        """Get a compiled template, or None if absent."""
        with self._lock:
            item = self._items.get(key)
            if item is None:
                self.misses += 1
                self.logger.debug(f"Cache miss: {key}")
                return None

            item.accessed_at = datetime.now()
            item.access_count += 1
            self._items.move_to_end(key)
            self.hits += 1
            self.logger.debug(f"Cache hit: {key}")
            return item.value

    def put(self, key: str, value: CompiledTemplate) -> None:
        """Store a compiled template, evicting the least recently used entries when full."""
        now = datetime.now()
        with self._lock:
            if key in self._items:
                del self._items[key]
            self._items[key] = CacheItem(key=key, value=value, created_at=now, accessed_at=now)
            self._evict_lru()

    def invalidate(self, key: str) -> bool:
        """Remove a single entry."""
        with self._lock:
            if self._items.pop(key, None) is None:
                return False
            self.logger.debug(f"Invalidated: {key}")
            return True

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._items.clear()

    def _evict_lru(self):
        while len(self._items) > self.maximum_size:
            lru_key, _ = self._items.popitem(last=False)
            self.evictions += 1
            self.logger.debug(f"Evicted: {lru_key}")

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            lookups = self.hits + self.misses
            return {
                "entries": len(self._items),
                "maximum_size": self.maximum_size,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "hit_rate": self.hits / lookups if lookups > 0 else 0.0,
            }
