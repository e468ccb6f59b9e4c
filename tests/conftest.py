"""Shared test fixtures for all test modules."""

from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest

from solulog import registry
from solulog.adapters.sinks.memory import InMemorySink
from solulog.adapters.storage.in_memory import InMemoryMetricsStorage
from solulog.core.fanout import SinkFanout
from solulog.core.metrics import SinkMetrics
from solulog.core.models import Level
from solulog.logger import Logger
from tests.clock import FakeClock


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Provide a not-yet-created directory for file sink tests."""
    return tmp_path / "logs"


@pytest.fixture
def clock() -> FakeClock:
    """Fake wall clock fixed at 2024-05-10 12:30:00 local time."""
    return FakeClock(datetime(2024, 5, 10, 12, 30, 0).timestamp())


@pytest.fixture
def metrics_storage() -> InMemoryMetricsStorage:
    return InMemoryMetricsStorage()


@pytest.fixture
def sink_metrics(metrics_storage: InMemoryMetricsStorage) -> SinkMetrics:
    return SinkMetrics(metrics_storage)


@pytest.fixture
def memory_sink() -> InMemorySink:
    return InMemorySink()


@pytest.fixture
def make_logger(memory_sink: InMemorySink) -> Callable[..., Logger]:
    """Factory for loggers writing to ``memory_sink``."""

    def _make(level: Level = Level.DEBUG, **kwargs: object) -> Logger:
        return Logger(SinkFanout([memory_sink], level=level, **kwargs))  # type: ignore[arg-type]

    return _make


@pytest.fixture
def logger(make_logger: Callable[..., Logger]) -> Logger:
    """Debug-level logger writing to ``memory_sink``."""
    return make_logger()


@pytest.fixture
def clean_registry() -> Iterator[None]:
    """Reset the process-wide registry around a test."""
    registry.reset()
    yield
    registry.reset()
