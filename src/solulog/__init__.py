"""solulog: structured logging with rotating file sinks and trace propagation.

Example:
    ```python
    import solulog

    logger = solulog.build_logger(
        solulog.LoggerConfig(
            level="info",
            file=solulog.FileSinkConfig("app.log", directory="logs",
                                        max_size=64 << 20, rotation="daily"),
        )
    )
    ctx = solulog.fork()
    logger.in_context(ctx).named("billing").info("charged", amount=42)
    ```
"""

from solulog.adapters.sinks import ConsoleWriter, InMemorySink, RotatingFileWriter
from solulog.adapters.storage import InMemoryMetricsStorage, RingBufferMetricsStorage
from solulog.config import (
    FileSinkConfig,
    LoggerConfig,
    SamplingConfig,
    build_logger,
)
from solulog.core.encoding import EncoderKeys
from solulog.core.errors import ConfigurationError, LoggerPanic, TraceparentFormatError
from solulog.core.models import Level, LogRecord, MetricSample, RotationPolicy
from solulog.core.tracing import (
    TraceContext,
    current_trace,
    fork,
    merge_trace,
    parse_traceparent,
    span_with,
    trace,
    trace_with,
    traceparent_value,
    use_trace,
)
from solulog.logger import Logger
from solulog.registry import (
    debug,
    dpanic,
    error,
    fatal,
    get_logger,
    in_context,
    info,
    init,
    named,
    panic,
    sync,
    warn,
    with_fields,
)

__all__ = [
    "ConfigurationError",
    "ConsoleWriter",
    "EncoderKeys",
    "FileSinkConfig",
    "InMemoryMetricsStorage",
    "InMemorySink",
    "Level",
    "LogRecord",
    "Logger",
    "LoggerConfig",
    "LoggerPanic",
    "MetricSample",
    "RingBufferMetricsStorage",
    "RotatingFileWriter",
    "RotationPolicy",
    "SamplingConfig",
    "TraceContext",
    "TraceparentFormatError",
    "build_logger",
    "current_trace",
    "debug",
    "dpanic",
    "error",
    "fatal",
    "fork",
    "get_logger",
    "in_context",
    "info",
    "init",
    "merge_trace",
    "named",
    "panic",
    "parse_traceparent",
    "span_with",
    "sync",
    "trace",
    "trace_with",
    "traceparent_value",
    "use_trace",
    "warn",
    "with_fields",
]
