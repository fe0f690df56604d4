"""
Palette Service Metrics Collection
In-process metrics collection for monitoring and performance tracking.
"""
import time
from collections import defaultdict, deque, Counter
from typing import Any, Deque, Dict, Optional
from threading import Lock


# Most recent samples kept per timed operation
MAX_TIMING_SAMPLES = 1000


class MetricsCollector:
    """Simple in-process metrics collector."""

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=MAX_TIMING_SAMPLES))
        self._cluster_counts: Dict[int, int] = Counter()
        self._start_time = time.time()

    def increment_request_count(self):
        """Increment total request counter."""
        with self._lock:
            self._counters["palette_requests_total"] += 1

    def increment_color_space_count(self, color_space: str):
        """Increment color space usage counter."""
        with self._lock:
            self._counters[f"palette_color_space_total_{color_space}"] += 1

    def increment_failure_count(self, error_kind: str):
        """Increment failure counter by error kind."""
        with self._lock:
            self._counters[f"palette_failed_total_{error_kind}"] += 1

    def increment_nonconverged_count(self):
        """Increment counter of k-means runs that hit the iteration bound."""
        with self._lock:
            self._counters["palette_kmeans_nonconverged_total"] += 1

    def record_timing(self, operation: str, duration_ms: float):
        """Record timing for an operation."""
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def record_cluster_count(self, k: int):
        """Record the cluster count of a successful build."""
        with self._lock:
            self._cluster_counts[k] += 1

    def get_counters(self) -> Dict[str, int]:
        """Get current counter values."""
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Get timing statistics."""
        with self._lock:
            stats = {}
            for operation, timings in self._timings.items():
                if timings:
                    stats[operation] = {
                        "count": len(timings),
                        "mean": sum(timings) / len(timings),
                        "min": min(timings),
                        "max": max(timings),
                        "p50": self._percentile(timings, 50),
                        "p95": self._percentile(timings, 95)
                    }
            return stats

    def get_cluster_count_histogram(self) -> Dict[str, int]:
        """Get requested cluster counts keyed by k."""
        with self._lock:
            return {str(k): n for k, n in sorted(self._cluster_counts.items())}

    def get_uptime_seconds(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "cluster_count_histogram": self.get_cluster_count_histogram()
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._cluster_counts.clear()
            self._start_time = time.time()

    @staticmethod
    def _percentile(data: Deque[float], percentile: int) -> float:
        """Calculate percentile of data."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        k = (len(sorted_data) - 1) * percentile / 100
        f = int(k)
        c = k - f

        if f + 1 < len(sorted_data):
            return sorted_data[f] + c * (sorted_data[f + 1] - sorted_data[f])
        else:
            return sorted_data[f]


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
