"""Ring buffer metrics storage adapter.

Provides bounded in-memory storage that automatically evicts oldest
samples when the buffer is full. Useful for long-running services that
record a counter sample per log write and need predictable memory usage.
"""

import threading
from collections import deque
from collections.abc import Iterable

from solulog.core.models import MetricSample


class RingBufferMetricsStorage:
    """Ring buffer implementation of MetricsStoragePort.

    Stores metric samples in a fixed-size circular buffer. When the buffer
    is full, the oldest sample is automatically evicted to make room for
    new samples.

    Args:
        max_size: Maximum number of samples to store.
    """

    def __init__(self, max_size: int) -> None:
        self._buffer: deque[MetricSample] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        with self._lock:
            self._buffer.append(sample)

    def scrape(self) -> Iterable[MetricSample]:
        """Scrape all current metric samples."""
        with self._lock:
            return list(self._buffer)
