"""Python logging handler adapter for solulog.

This adapter bridges Python's standard library logging module to a solulog
Logger, so records from third-party libraries pass through the same sinks,
level gate and sampler as the application's own records.
"""

import logging
import traceback

from solulog.core.models import Level
from solulog.logger import Logger, short_location

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def level_for(levelno: int) -> Level:
    """Map a stdlib level number to the closest solulog Level.

    CRITICAL maps to ERROR: a third-party CRITICAL record must not exit the
    process or raise.
    """
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class SolulogHandler(logging.Handler):
    """Logging handler that forwards stdlib records to a solulog Logger.

    The stdlib logger name becomes the solulog name suffix and the emitting
    ``dir/file.py:line`` becomes the record caller. ``extra`` attributes
    become fields, and exception info becomes an ``error`` field plus an
    ``exc_traceback`` field.

    Example:
        ```python
        from solulog import LoggerConfig, build_logger
        from solulog.adapters.logging import SolulogHandler

        logger = build_logger(LoggerConfig(console=True))
        logging.getLogger().addHandler(SolulogHandler(logger))
        ```
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET) -> None:
        """Initialize the handler with a target logger.

        Args:
            logger: Logger receiving the forwarded records.
            level: Minimum stdlib level handled.
        """
        super().__init__(level)
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a stdlib record.

        Args:
            record: The log record to emit.
        """
        fields: dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and not key.startswith("_"):
                fields[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                fields["error"] = f"{exc_type.__name__}: {exc_value}"
                fields["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        try:
            message = record.getMessage()
            target = self._logger.named(record.name) if record.name != "root" else self._logger
            # extra keys such as "level" are bound as a mapping, never as kwargs
            target.with_fields(fields)._log(
                level_for(record.levelno),
                message,
                (),
                {},
                2,
                caller=short_location(record.pathname, record.lineno),
            )
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
