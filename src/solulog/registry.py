"""Process-wide logger registry.

Call ``init`` once at startup, before anything logs through the module-level
functions. The first ``get_logger`` call (made by every module-level helper)
freezes the registry; ``init`` after that raises ``ConfigurationError``.
Until ``init`` runs, the registry logger writes every level to standard
output.

Code that can receive a ``Logger`` explicitly should prefer that over the
registry.
"""

import threading
from collections.abc import Sequence
from typing import Any

from solulog.adapters.sinks.console import ConsoleWriter
from solulog.config import LoggerConfig, build_logger
from solulog.core.errors import ConfigurationError
from solulog.core.fanout import SinkFanout
from solulog.core.models import Level
from solulog.core.ports import MetricsStoragePort, SinkPort
from solulog.core.tracing import TraceContext
from solulog.logger import Logger

_lock = threading.Lock()
_logger: Logger | None = None
_used = False


def _default_logger() -> Logger:
    return Logger(SinkFanout([ConsoleWriter()], level=Level.DEBUG))


def init(
    config: LoggerConfig,
    *,
    sinks: Sequence[SinkPort] = (),
    metrics: MetricsStoragePort | None = None,
) -> Logger:
    """Build the process logger from ``config`` and install it.

    Raises:
        ConfigurationError: If the configuration is invalid, or if the
            registry logger has already been used.
    """
    global _logger
    with _lock:
        if _used:
            raise ConfigurationError("init() must run before the first log call")
        logger = build_logger(config, sinks=sinks, metrics=metrics)
        _logger = logger
        return logger


def get_logger() -> Logger:
    """Return the process logger, freezing the registry."""
    global _logger, _used
    with _lock:
        if _logger is None:
            _logger = _default_logger()
        _used = True
        return _logger


def reset() -> None:
    """Close the installed logger and return to the uninitialized state.

    Meant for process shutdown and for tests.
    """
    global _logger, _used
    with _lock:
        if _logger is not None:
            _logger.close()
        _logger = None
        _used = False


def with_fields(**fields: Any) -> Logger:
    return get_logger().with_fields(**fields)


def named(name: str) -> Logger:
    return get_logger().named(name)


def in_context(ctx: TraceContext | None = None) -> Logger:
    """Process logger bound to the trace ids of ``ctx`` (or the ambient ones)."""
    return get_logger().in_context(ctx)


def debug(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.DEBUG, message, args, fields, 2)


def info(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.INFO, message, args, fields, 2)


def warn(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.WARN, message, args, fields, 2)


def error(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.ERROR, message, args, fields, 2)


def dpanic(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.DPANIC, message, args, fields, 2)


def panic(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.PANIC, message, args, fields, 2)


def fatal(message: str, *args: Any, **fields: Any) -> None:
    get_logger()._log(Level.FATAL, message, args, fields, 2)


def sync() -> None:
    get_logger().sync()
