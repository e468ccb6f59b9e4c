"""Metric helpers for sink outcome counters."""

import time

from solulog.core.models import MetricSample
from solulog.core.ports import MetricsStoragePort

FILE_WRITE_COUNTER = "solulog_file_write_total"
FILE_ROTATE_COUNTER = "solulog_file_rotate_total"
CONSOLE_WRITE_COUNTER = "solulog_console_write_total"

OUTCOME_OK = "ok"
OUTCOME_ERROR = "error"


def counter(
    name: str,
    value: float = 1.0,
    labels: dict[str, str] | None = None,
) -> MetricSample:
    """Create a counter metric sample.

    Args:
        name: Metric name (e.g., "solulog_file_write_total")
        value: Increment value (default: 1.0)
        labels: Optional dimension labels

    Returns:
        MetricSample with current timestamp
    """
    return MetricSample(
        name=name,
        timestamp=time.time(),
        value=value,
        labels=labels or {},
    )


class SinkMetrics:
    """Records sink outcomes as counter samples in a metrics storage.

    Sinks call ``increment`` once per write or rotation attempt; the
    outcome lands in the ``state`` label.
    """

    def __init__(self, storage: MetricsStoragePort) -> None:
        self._storage = storage

    @property
    def storage(self) -> MetricsStoragePort:
        return self._storage

    def increment(self, name: str, outcome: str) -> None:
        """Record one occurrence of ``outcome`` for counter ``name``."""
        self._storage.write(counter(name, labels={"state": outcome}))


def record_outcome(metrics: SinkMetrics | None, name: str, failed: bool) -> None:
    """Increment ``name`` with ok/error when a metrics recorder is configured."""
    if metrics is None:
        return
    metrics.increment(name, OUTCOME_ERROR if failed else OUTCOME_OK)
