"""Logger facade.

A ``Logger`` is an immutable handle. ``with_fields``, ``named`` and
``in_context`` return new handles that share the parent's sinks, level and
sampler but own their fields, name and trace context. Deriving never
mutates the parent, so handles can be passed between threads freely.
"""

from __future__ import annotations

import os
import sys
import time
import traceback
from collections.abc import Mapping
from types import FrameType
from typing import Any

from solulog.core.errors import LoggerPanic
from solulog.core.fanout import SinkFanout
from solulog.core.models import Level, LogRecord
from solulog.core.tracing import TraceContext, current_trace, trace


def short_location(path: str, lineno: int) -> str:
    """Render ``path:lineno`` as ``dir/file.py:lineno``."""
    parent = os.path.basename(os.path.dirname(path))
    name = os.path.basename(path)
    location = f"{parent}/{name}" if parent else name
    return f"{location}:{lineno}"


def _short_caller(frame: FrameType) -> str:
    return short_location(frame.f_code.co_filename, frame.f_lineno)


def _format_message(message: str, args: tuple[Any, ...]) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *map(str, args)])


class Logger:
    """Leveled, structured logger bound to a sink fan-out.

    Args:
        fanout: Shared delivery pipeline.
        fields: Fields bound to every record of this handle.
        name: Dot-joined hierarchical name.
        trace_context: Trace ids attached to every record. When None, records
            carry the ambient trace installed with ``use_trace``.
    """

    __slots__ = ("_fanout", "_fields", "_name", "_trace")

    def __init__(
        self,
        fanout: SinkFanout,
        fields: tuple[tuple[str, Any], ...] = (),
        name: str = "",
        trace_context: TraceContext | None = None,
    ) -> None:
        self._fanout = fanout
        self._fields = fields
        self._name = name
        self._trace = trace_context

    @property
    def fanout(self) -> SinkFanout:
        return self._fanout

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> tuple[tuple[str, Any], ...]:
        return self._fields

    @property
    def trace_context(self) -> TraceContext | None:
        return self._trace

    def _derive(self, **changes: Any) -> Logger:
        state = {
            "fanout": self._fanout,
            "fields": self._fields,
            "name": self._name,
            "trace_context": self._trace,
        }
        state.update(changes)
        return Logger(**state)

    # --- Derivation ---

    def with_fields(self, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> Logger:
        """Return a handle that adds ``fields`` to every record.

        A mapping allows keys that are not valid identifiers.
        """
        added = tuple((fields or {}).items()) + tuple(kwargs.items())
        if not added:
            return self._derive()
        return self._derive(fields=self._fields + added)

    def named(self, name: str) -> Logger:
        """Return a handle whose name has ``name`` appended with a dot."""
        if not name:
            return self._derive()
        joined = f"{self._name}.{name}" if self._name else name
        return self._derive(name=joined)

    def in_context(self, ctx: TraceContext | None = None) -> Logger:
        """Return a handle whose records carry the trace ids of ``ctx``.

        Without ``ctx`` the ambient trace context is used. A context with no
        trace id gets a freshly minted one.
        """
        ctx = ctx if ctx is not None else current_trace()
        if not ctx.has_trace:
            ctx = trace(ctx)
        return self._derive(trace_context=ctx)

    # --- Emission ---

    def enabled(self, level: Level) -> bool:
        return self._fanout.enabled(level)

    def log(self, level: Level, message: str, *args: Any, **fields: Any) -> None:
        """Emit a record at ``level``."""
        self._log(level, message, args, fields, 2)

    def _log(
        self,
        level: Level,
        message: str,
        args: tuple[Any, ...],
        fields: dict[str, Any],
        depth: int,
        caller: str | None = None,
    ) -> None:
        terminal = level >= Level.PANIC
        if not terminal and not self._fanout.enabled(level):
            return
        frame = sys._getframe(depth)
        stack = "".join(traceback.format_stack(frame)) if level >= Level.DPANIC else None
        ctx = self._trace if self._trace is not None else current_trace()
        text = _format_message(message, args)
        record = LogRecord(
            level=level,
            message=text,
            timestamp=time.time(),
            fields=self._fields + tuple(fields.items()),
            name=self._name,
            caller=caller if caller is not None else _short_caller(frame),
            trace_id=ctx.trace_id,
            span_id=ctx.span_id,
            stacktrace=stack,
        )
        self._fanout.emit(record)
        if level is Level.FATAL:
            self._fanout.sync()
            sys.exit(1)
        if level is Level.PANIC:
            raise LoggerPanic(text)

    def debug(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(Level.DEBUG, message, args, fields, 2)

    def info(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(Level.INFO, message, args, fields, 2)

    def warn(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(Level.WARN, message, args, fields, 2)

    def error(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(Level.ERROR, message, args, fields, 2)

    def dpanic(self, message: str, *args: Any, **fields: Any) -> None:
        """Emit at DPANIC: an ERROR-grade record with a stack trace."""
        self._log(Level.DPANIC, message, args, fields, 2)

    def panic(self, message: str, *args: Any, **fields: Any) -> None:
        """Emit at PANIC, then raise ``LoggerPanic``."""
        self._log(Level.PANIC, message, args, fields, 2)

    def fatal(self, message: str, *args: Any, **fields: Any) -> None:
        """Emit at FATAL, flush the sinks, then exit the process with status 1."""
        self._log(Level.FATAL, message, args, fields, 2)

    warning = warn

    # --- Lifecycle ---

    def sync(self) -> None:
        """Flush every sink."""
        self._fanout.sync()

    def close(self) -> None:
        """Close every sink. Shared by all handles derived from the same root."""
        self._fanout.close()

    def __repr__(self) -> str:
        return f"Logger(name={self._name!r}, level={self._fanout.level.label})"
