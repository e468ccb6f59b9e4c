"""Port interfaces for sinks and the metrics collaborator.

These protocols define the contracts that adapters must implement.
The core pipeline depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from solulog.core.models import MetricSample


@runtime_checkable
class SinkPort(Protocol):
    """Port for destinations of encoded log records.

    Adapters implementing this protocol receive one encoded record per write.
    Examples: RotatingFileWriter, ConsoleWriter, InMemorySink.
    """

    def write(self, data: bytes) -> int:
        """Write encoded bytes and return the number of bytes written.

        Raises:
            OSError: If the underlying destination fails.
        """
        ...

    def sync(self) -> None:
        """Flush buffered bytes to the destination."""
        ...

    def close(self) -> None:
        """Release the destination."""
        ...


@runtime_checkable
class MetricsStoragePort(Protocol):
    """Port for metrics storage operations.

    Adapters implementing this protocol can store and retrieve metric samples.
    Examples: InMemoryMetricsStorage, RingBufferMetricsStorage.
    """

    def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        ...

    def scrape(self) -> Iterable[MetricSample]:
        """Scrape all current metric samples.

        Returns:
            Iterable of MetricSample objects representing current state.
        """
        ...
