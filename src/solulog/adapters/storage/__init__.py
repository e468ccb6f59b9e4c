"""Metrics storage adapters implementing MetricsStoragePort."""

from solulog.adapters.storage.in_memory import InMemoryMetricsStorage
from solulog.adapters.storage.ring_buffer import RingBufferMetricsStorage

__all__ = ["InMemoryMetricsStorage", "RingBufferMetricsStorage"]
