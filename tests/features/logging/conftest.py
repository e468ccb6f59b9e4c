"""BDD step definitions for rotation and trace propagation features."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from solulog.adapters.sinks.file import RotatingFileWriter
from solulog.adapters.sinks.memory import InMemorySink
from solulog.core.fanout import SinkFanout
from solulog.core.models import Level, RotationPolicy
from solulog.core.tracing import (
    EMPTY_CONTEXT,
    INVALID_TRACE_ID,
    TraceContext,
    fork,
    merge_trace,
)
from solulog.logger import Logger
from tests.clock import FakeClock

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
START = datetime(2024, 5, 10, 12, 30, 0)


@dataclass
class RotationScenarioContext:
    """Shared state between steps in a rotation scenario."""

    directory: Path
    clock: FakeClock = field(default_factory=lambda: FakeClock(START.timestamp()))
    writer: RotatingFileWriter | None = None

    def backups(self) -> list[Path]:
        return [p for p in self.directory.iterdir() if p.name != "app.log"]


@dataclass
class TraceScenarioContext:
    """Shared state between steps in a tracing scenario."""

    sink: InMemorySink = field(default_factory=InMemorySink)
    incoming: TraceContext = EMPTY_CONTEXT
    record: dict[str, Any] = field(default_factory=dict)


@pytest.fixture
def rotation_ctx(tmp_path: Path) -> RotationScenarioContext:
    return RotationScenarioContext(directory=tmp_path / "logs")


@pytest.fixture
def trace_ctx() -> TraceScenarioContext:
    return TraceScenarioContext()


# === Rotation ===


@given(parsers.parse("a file writer with a size limit of {limit:d} bytes"))
def given_size_limited_writer(rotation_ctx: RotationScenarioContext, limit: int) -> None:
    rotation_ctx.writer = RotatingFileWriter(
        rotation_ctx.directory, "app.log", max_size=limit, clock=rotation_ctx.clock
    )


@given(parsers.parse("a file writer rotating {policy}"))
def given_calendar_writer(rotation_ctx: RotationScenarioContext, policy: str) -> None:
    rotation_ctx.writer = RotatingFileWriter(
        rotation_ctx.directory,
        "app.log",
        rotation=RotationPolicy(policy),
        clock=rotation_ctx.clock,
    )


@when(parsers.parse("{count:d} bytes are written"))
def when_bytes_written(rotation_ctx: RotationScenarioContext, count: int) -> None:
    assert rotation_ctx.writer is not None
    rotation_ctx.writer.write(b"x" * count)


@when(parsers.parse('the clock moves to "{moment}"'))
def when_clock_moves(rotation_ctx: RotationScenarioContext, moment: str) -> None:
    rotation_ctx.clock.set(datetime.strptime(moment, TIME_FORMAT))


@then(parsers.parse("the active file holds {count:d} bytes"))
def then_active_file_size(rotation_ctx: RotationScenarioContext, count: int) -> None:
    assert rotation_ctx.writer is not None
    rotation_ctx.writer.sync()
    assert (rotation_ctx.directory / "app.log").stat().st_size == count


@then(parsers.parse("there is {count:d} backup file"))
def then_backup_count(rotation_ctx: RotationScenarioContext, count: int) -> None:
    assert len(rotation_ctx.backups()) == count


@then(parsers.parse('a backup named "{name}" holds {count:d} bytes'))
def then_named_backup(rotation_ctx: RotationScenarioContext, name: str, count: int) -> None:
    assert (rotation_ctx.directory / name).stat().st_size == count


@then(parsers.parse('the next rotation is at "{moment}"'))
def then_next_rotation(rotation_ctx: RotationScenarioContext, moment: str) -> None:
    assert rotation_ctx.writer is not None
    expected = datetime.strptime(moment, TIME_FORMAT).timestamp()
    assert rotation_ctx.writer.deadline == expected


# === Tracing ===


@given(parsers.parse('an incoming carrier "{carrier}"'))
def given_incoming_carrier(trace_ctx: TraceScenarioContext, carrier: str) -> None:
    trace_ctx.incoming = merge_trace(EMPTY_CONTEXT, carrier)


@when(parsers.parse('the operation forks a span and logs "{message}"'))
def when_fork_and_log(trace_ctx: TraceScenarioContext, message: str) -> None:
    logger = Logger(SinkFanout([trace_ctx.sink], level=Level.DEBUG))
    logger.in_context(fork(trace_ctx.incoming)).info(message)
    (trace_ctx.record,) = trace_ctx.sink.records()


@then(parsers.parse('the record has trace id "{trace_id}"'))
def then_record_trace_id(trace_ctx: TraceScenarioContext, trace_id: str) -> None:
    assert trace_ctx.record["trace-id"] == trace_id


@then(parsers.parse('the record span id differs from "{span_id}"'))
def then_record_span_differs(trace_ctx: TraceScenarioContext, span_id: str) -> None:
    assert len(trace_ctx.record["span-id"]) == 16
    assert trace_ctx.record["span-id"] != span_id


@then("the record has a freshly minted trace id")
def then_fresh_trace_id(trace_ctx: TraceScenarioContext) -> None:
    trace_id = trace_ctx.record["trace-id"]
    assert len(trace_id) == 32
    assert trace_id != INVALID_TRACE_ID
