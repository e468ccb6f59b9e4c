"""Integration tests: a configured logger writing through a rotating file."""

import json
from pathlib import Path

import pytest

from solulog.adapters.sinks.file import RotatingFileWriter
from solulog.adapters.storage.in_memory import InMemoryMetricsStorage
from solulog.config import FileSinkConfig, LoggerConfig, build_logger
from solulog.core.fanout import SinkFanout
from solulog.core.metrics import FILE_ROTATE_COUNTER, FILE_WRITE_COUNTER, SinkMetrics
from solulog.core.models import Level, RotationPolicy
from solulog.core.tracing import fork
from solulog.logger import Logger
from tests.clock import FakeClock

pytestmark = [pytest.mark.integration, pytest.mark.tier(2)]


def _read_all(directory: Path) -> list[dict[str, object]]:
    records = []
    for path in sorted(directory.iterdir()):
        for line in path.read_text(encoding="utf-8").splitlines():
            records.append(json.loads(line))
    return records


def test_records_survive_size_rotation_intact(log_dir: Path) -> None:
    logger = build_logger(
        LoggerConfig(
            level="debug",
            file=FileSinkConfig("svc.log", directory=str(log_dir), max_size=2048),
        )
    )
    for i in range(200):
        logger.with_fields(i=i).debug("tick")
    logger.close()

    assert len(list(log_dir.iterdir())) > 1
    assert all(p.stat().st_size <= 2048 for p in log_dir.iterdir())
    assert sorted(r["i"] for r in _read_all(log_dir)) == list(range(200))


def test_calendar_rotation_through_logger(
    log_dir: Path, clock: FakeClock, metrics_storage: InMemoryMetricsStorage
) -> None:
    writer = RotatingFileWriter(
        log_dir,
        "svc.log",
        rotation=RotationPolicy.DAILY,
        metrics=SinkMetrics(metrics_storage),
        clock=clock,
    )
    logger = Logger(SinkFanout([writer], level=Level.DEBUG))
    ctx = fork()

    logger.in_context(ctx).info("first day")
    clock.advance(24 * 3600)
    logger.in_context(ctx).info("second day")
    logger.close()

    backup = log_dir / "svc.log-20240511000000"
    first = json.loads(backup.read_text(encoding="utf-8"))
    second = json.loads((log_dir / "svc.log").read_text(encoding="utf-8"))
    assert first["message"] == "first day"
    assert second["message"] == "second day"
    assert first["trace-id"] == second["trace-id"] == ctx.trace_id
    assert metrics_storage.total(FILE_WRITE_COUNTER, state="ok") == 2
    assert metrics_storage.total(FILE_ROTATE_COUNTER, state="ok") == 1
