"""
Render pipeline metrics collection.
"""

import threading
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List


class RenderMetrics:
    """
    Counts storage fetches, compiles, cache lookups and render outcomes.
    """

    def __init__(self):
        self.cache_hits = 0
        self.cache_misses = 0
        self.fetches = 0
        self.compiles = 0
        self.renders = 0
        self.failures: Dict[str, int] = defaultdict(int)
        self.render_times: List[float] = []
        self._lock = threading.Lock()

    def record_hit(self):
        with self._lock:
            self.cache_hits += 1

    def record_miss(self):
        with self._lock:
            self.cache_misses += 1

    def record_fetch(self):
        with self._lock:
            self.fetches += 1

    def record_compile(self):
        with self._lock:
            self.compiles += 1

    def record_render(self, render_time: float):
        """Record a completed render and its duration in seconds."""
        with self._lock:
            self.renders += 1
            self.render_times.append(render_time)
            # Keep only last 1000 render times
            if len(self.render_times) > 1000:
                self.render_times = self.render_times[-1000:]

    def record_failure(self, error: BaseException):
        with self._lock:
            self.failures[error.__class__.__name__] += 1

    @property
    def hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        return self.cache_hits / total if total > 0 else 0.0

    def get_average_render_time(self) -> float:
        if not self.render_times:
            return 0.0
        return sum(self.render_times) / len(self.render_times)

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Get comprehensive metrics summary."""
        with self._lock:
            failures = dict(self.failures)
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "fetches": self.fetches,
            "compiles": self.compiles,
            "renders": self.renders,
            "failures": failures,
            "average_render_time": self.get_average_render_time(),
            "timestamp": datetime.now().isoformat()
        }

    def reset_metrics(self):
        """Reset all metrics."""
        with self._lock:
            self.cache_hits = 0
            self.cache_misses = 0
            self.fetches = 0
            self.compiles = 0
            self.renders = 0
            self.failures.clear()
            self.render_times.clear()
