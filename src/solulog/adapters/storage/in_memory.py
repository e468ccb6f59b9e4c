"""In-memory metrics storage adapter."""

import threading
from collections.abc import Iterable

from solulog.core.models import MetricSample


class InMemoryMetricsStorage:
    """In-memory implementation of MetricsStoragePort.

    Stores metric samples in a list. Suitable for testing and
    low-volume applications where persistence is not required.
    """

    def __init__(self) -> None:
        self._samples: list[MetricSample] = []
        self._lock = threading.Lock()

    def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        with self._lock:
            self._samples.append(sample)

    def scrape(self) -> Iterable[MetricSample]:
        """Scrape all current metric samples."""
        with self._lock:
            return list(self._samples)

    def total(self, name: str, **labels: str) -> float:
        """Sum the values of samples named ``name`` whose labels include ``labels``."""
        return sum(
            s.value
            for s in self.scrape()
            if s.name == name and all(s.labels.get(k) == v for k, v in labels.items())
        )
