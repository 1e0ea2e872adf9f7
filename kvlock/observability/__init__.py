"""Observability: in-memory lock metrics."""

from kvlock.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
