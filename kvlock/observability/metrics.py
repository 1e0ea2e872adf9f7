"""Lock metrics collector: counters and latency histograms. Thread-safe, in-memory."""

import threading
from typing import Any


class MetricsCollector:
    """
    In-memory registry for lock outcomes (acquired, contended, takeover, released, release lost/error)
    and acquire latency. Optional namespace label per observation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        self._counters_by_namespace: dict[str, dict[str, float]] = {}
        self._histograms: dict[str, list[float]] = {}

    @staticmethod
    def _bucket(name: str, namespace: str | None) -> str:
        return name if namespace is None else f"{name}:namespace={namespace}"

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        namespace: str | None = None,
    ) -> None:
        """Increment a counter. Labelled counters are kept apart from unlabelled ones."""
        with self._lock:
            if namespace is None:
                self._counters[name] = self._counters.get(name, 0) + value
                return
            series = self._counters_by_namespace.setdefault(name, {})
            key = self._bucket(name, namespace)
            series[key] = series.get(key, 0) + value

    def observe_latency(
        self,
        name: str,
        latency_ms: float,
        *,
        namespace: str | None = None,
    ) -> None:
        with self._lock:
            self._histograms.setdefault(self._bucket(name, namespace), []).append(latency_ms)

    def count(self, name: str, *, namespace: str | None = None) -> float:
        """Current value of one counter (0 if never incremented)."""
        with self._lock:
            if namespace is None:
                return self._counters.get(name, 0)
            return self._counters_by_namespace.get(name, {}).get(self._bucket(name, namespace), 0)

    def export_metrics(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_namespace": {
                    k: dict(v) for k, v in self._counters_by_namespace.items()
                },
                "histograms": {
                    k: {"count": len(v), "sum": sum(v), "values": list(v)}
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_namespace.clear()
            self._histograms.clear()
