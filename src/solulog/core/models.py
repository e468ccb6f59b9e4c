"""Core domain models for structured logging."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class Level(IntEnum):
    """Ordered record severity.

    DPANIC marks a should-never-happen condition; it is delivered like an
    ERROR record with a stack trace and never unwinds. PANIC sits between
    DPANIC and FATAL: it is delivered like any other record and then unwinds
    the caller with ``LoggerPanic``.
    """

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    DPANIC = 45
    PANIC = 50
    FATAL = 60

    @property
    def label(self) -> str:
        """Lowercase name used in encoded records."""
        return self.name.lower()


# Level names accepted as a logger's minimum level
CONFIGURABLE_LEVELS: dict[str, Level] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "error": Level.ERROR,
    "fatal": Level.FATAL,
}


class RotationPolicy(Enum):
    """Calendar boundary at which a file sink starts a new file."""

    NONE = "none"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class LogRecord:
    """A single log event, created at emit time and encoded once.

    Attributes:
        level: Record severity.
        message: The log message.
        timestamp: Unix timestamp in seconds.
        fields: Ordered (key, value) pairs, bound fields first.
        name: Dot-joined logger name, empty for the root logger.
        caller: Short ``dir/file.py:line`` of the emitting call site.
        trace_id: 32-hex trace id or empty.
        span_id: 16-hex span id or empty.
        stacktrace: Formatted stack for DPANIC, PANIC and FATAL records.
    """

    level: Level
    message: str
    timestamp: float
    fields: tuple[tuple[str, Any], ...] = ()
    name: str = ""
    caller: str | None = None
    trace_id: str = ""
    span_id: str = ""
    stacktrace: str | None = None


@dataclass(frozen=True)
class MetricSample:
    """A single metric measurement.

    Attributes:
        name: Metric name (e.g., solulog_file_write_total).
        timestamp: Unix timestamp in seconds.
        value: The metric value.
        labels: Key-value pairs for metric dimensions.
    """

    name: str
    timestamp: float
    value: float
    labels: dict[str, str] = field(default_factory=dict)
