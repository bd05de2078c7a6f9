"""Memory profiling utilities."""

import gc
import logging
import time
import tracemalloc

log = logging.getLogger(__name__)


def bytes_to_mib(value: int) -> float:
    return value / 1024 / 1024


class MemoryProfiler:
    """Reports traced allocations and garbage collection activity."""

    def __init__(self):
        self.start_time = time.time()
        self._enabled = False
        self._started_tracing = False
        self._start_stats = None

    def enable(self):
        """Enable memory profiling."""
        if self._enabled:
            return

        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started_tracing = True
        self._enabled = True
        self._start_stats = gc.get_stats()
        self.start_time = time.time()

    def disable(self):
        """Disable memory profiling."""
        if not self._enabled:
            return

        if self._started_tracing:
            tracemalloc.stop()
            self._started_tracing = False
        self._enabled = False

    def get_stats(self):
        """Get allocation and GC statistics since enable()."""
        if not self._enabled or self._start_stats is None:
            return {
                "current_mib": 0.0,
                "peak_mib": 0.0,
                "collections": 0,
                "collections_by_gen": (0, 0, 0),
                "elapsed_time": time.time() - self.start_time,
            }

        current, peak = tracemalloc.get_traced_memory()
        current_stats = gc.get_stats()
        collections = tuple(
            current_stats[i]["collections"] - self._start_stats[i]["collections"]
            for i in range(3)
        )

        return {
            "current_mib": bytes_to_mib(current),
            "peak_mib": bytes_to_mib(peak),
            "collections": sum(collections),
            "collections_by_gen": collections,
            "elapsed_time": time.time() - self.start_time,
        }

    def log_stats(self, label: str) -> None:
        if not self._enabled:
            return
        stats = self.get_stats()
        log.info(
            f"[{label}] Alloc = {stats['current_mib']:.1f} MiB, "
            f"Peak = {stats['peak_mib']:.1f} MiB, NumGC = {stats['collections']}"
        )

    def __enter__(self):
        self.enable()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disable()
        return False
