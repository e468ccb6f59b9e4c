"""Trace and span identifiers and the traceparent carrier.

Identifiers travel in an immutable ``TraceContext``. Every operation that
changes an id returns a new context; the input is never modified.

The carrier string follows the W3C trace-context layout
``version-traceid-spanid-flags`` with version and flags fixed to "00".
See https://w3c.github.io/trace-context
"""

import secrets
import string
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace

from solulog.core.errors import TraceparentFormatError

TRACE_VERSION = "00"
TRACE_FLAGS = "00"

TRACE_ID_BYTES = 16
SPAN_ID_BYTES = 8

INVALID_TRACE_ID = "0" * (TRACE_ID_BYTES * 2)
INVALID_SPAN_ID = "0" * (SPAN_ID_BYTES * 2)

_HEX_DIGITS = frozenset(string.hexdigits.lower())


@dataclass(frozen=True)
class TraceContext:
    """Trace and span ids of the current operation; "" means absent."""

    trace_id: str = ""
    span_id: str = ""

    @property
    def has_trace(self) -> bool:
        return bool(self.trace_id)

    @property
    def has_span(self) -> bool:
        return bool(self.span_id)


EMPTY_CONTEXT = TraceContext()


def _new_id(nbytes: int, invalid: str) -> str:
    while True:
        value = secrets.token_hex(nbytes)
        if value != invalid:
            return value


def new_trace_id() -> str:
    """Return a random 32-hex-char trace id, never the all-zero sentinel."""
    return _new_id(TRACE_ID_BYTES, INVALID_TRACE_ID)


def new_span_id() -> str:
    """Return a random 16-hex-char span id, never the all-zero sentinel."""
    return _new_id(SPAN_ID_BYTES, INVALID_SPAN_ID)


def trace_with(ctx: TraceContext | None, trace_id: str) -> TraceContext:
    """Return a copy of ``ctx`` carrying ``trace_id``."""
    return replace(ctx or EMPTY_CONTEXT, trace_id=trace_id)


def span_with(ctx: TraceContext | None, span_id: str) -> TraceContext:
    """Return a copy of ``ctx`` carrying ``span_id``."""
    return replace(ctx or EMPTY_CONTEXT, span_id=span_id)


def trace(ctx: TraceContext | None = None) -> TraceContext:
    """Start a new logical operation chain with a fresh trace id."""
    return trace_with(ctx, new_trace_id())


def fork(ctx: TraceContext | None = None) -> TraceContext:
    """Open a child span of ``ctx``.

    The trace id is kept when present and minted otherwise; the span id is
    always fresh.
    """
    ctx = ctx or EMPTY_CONTEXT
    if not ctx.has_trace:
        ctx = trace(ctx)
    return span_with(ctx, new_span_id())


def traceparent_value(ctx: TraceContext | None) -> str:
    """Render the carrier string; absent ids render as all-zero sentinels."""
    ctx = ctx or EMPTY_CONTEXT
    trace_id = ctx.trace_id or INVALID_TRACE_ID
    span_id = ctx.span_id or INVALID_SPAN_ID
    return f"{TRACE_VERSION}-{trace_id}-{span_id}-{TRACE_FLAGS}"


def _valid_id(value: str, invalid: str) -> str:
    if len(value) != len(invalid) or value == invalid:
        return ""
    if not set(value) <= _HEX_DIGITS:
        return ""
    return value


def parse_traceparent(value: str) -> tuple[str, str]:
    """Parse a carrier string into ``(trace_id, span_id)``.

    Version and flags are ignored. A content field that is the all-zero
    sentinel, has the wrong length or is not lowercase hex comes back as "".

    Raises:
        TraceparentFormatError: If the value does not have exactly four
            hyphen-delimited fields.
    """
    parts = value.split("-")
    if len(parts) != 4:
        raise TraceparentFormatError(f"invalid traceparent value: {value!r}")
    return _valid_id(parts[1], INVALID_TRACE_ID), _valid_id(parts[2], INVALID_SPAN_ID)


def merge_trace(ctx: TraceContext | None, carrier: str | None) -> TraceContext:
    """Fill ids missing from ``ctx`` with the ones carried by ``carrier``.

    Existing ids are never overwritten. A missing or malformed carrier
    returns ``ctx`` unchanged.
    """
    ctx = ctx or EMPTY_CONTEXT
    if not carrier:
        return ctx
    try:
        trace_id, span_id = parse_traceparent(carrier)
    except TraceparentFormatError:
        return ctx
    if not ctx.has_trace and trace_id:
        ctx = trace_with(ctx, trace_id)
    if not ctx.has_span and span_id:
        ctx = span_with(ctx, span_id)
    return ctx


_current_trace: ContextVar[TraceContext] = ContextVar(
    "solulog_trace", default=EMPTY_CONTEXT
)


def current_trace() -> TraceContext:
    """Return the trace context installed for the running task or thread."""
    return _current_trace.get()


@contextmanager
def use_trace(ctx: TraceContext) -> Iterator[TraceContext]:
    """Install ``ctx`` as the ambient trace context for the enclosed block."""
    token = _current_trace.set(ctx)
    try:
        yield ctx
    finally:
        _current_trace.reset(token)
