"""JSON-lines encoder for log records."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from solulog.core.models import LogRecord


@dataclass(frozen=True)
class EncoderKeys:
    """Key names used in encoded records. An empty name omits the entry."""

    time: str = "time"
    level: str = "level"
    name: str = "logger"
    caller: str = "caller"
    message: str = "message"
    stacktrace: str = "stacktrace"
    trace_id: str = "trace-id"
    span_id: str = "span-id"


DEFAULT_KEYS = EncoderKeys()


def _format_time(timestamp: float) -> str:
    """RFC 3339 with the local UTC offset, second precision."""
    return datetime.fromtimestamp(timestamp).astimezone().isoformat(timespec="seconds")


def _default(value: Any) -> str:
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


def record_to_dict(record: LogRecord, keys: EncoderKeys = DEFAULT_KEYS) -> dict[str, Any]:
    """Build the ordered mapping that ``encode_record`` serializes.

    Fixed entries come first, then fields in bind order; a later field with
    the same key overwrites an earlier one in place.
    """
    obj: dict[str, Any] = {}
    if keys.time:
        obj[keys.time] = _format_time(record.timestamp)
    if keys.level:
        obj[keys.level] = record.level.label
    if keys.name and record.name:
        obj[keys.name] = record.name
    if keys.caller and record.caller:
        obj[keys.caller] = record.caller
    if keys.message:
        obj[keys.message] = record.message
    if keys.trace_id and record.trace_id:
        obj[keys.trace_id] = record.trace_id
    if keys.span_id and record.span_id:
        obj[keys.span_id] = record.span_id
    for key, value in record.fields:
        obj[key] = value
    if keys.stacktrace and record.stacktrace:
        obj[keys.stacktrace] = record.stacktrace
    return obj


def _dumps(obj: dict[Any, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, default=_default)


def _with_field_errors(obj: dict[Any, Any]) -> dict[Any, Any]:
    """Replace every entry that fails to encode with a ``<key>Error`` entry."""
    safe: dict[Any, Any] = {}
    for key, value in obj.items():
        try:
            _dumps({key: value})
        except Exception as exc:
            safe[f"{key}Error"] = f"{type(exc).__name__}: {exc}"
        else:
            safe[key] = value
    return safe


def encode_record(record: LogRecord, keys: EncoderKeys = DEFAULT_KEYS) -> bytes:
    """Encode a record as one UTF-8 JSON object terminated by a newline.

    A field whose value cannot be serialized (a dict with non-string keys, a
    self-referencing container, a ``__str__`` that raises) is replaced by a
    ``<key>Error`` entry describing the failure; encoding itself never raises.

    Args:
        record: The record to encode.
        keys: Key names for the fixed entries.

    Returns:
        The encoded line as bytes.
    """
    obj = record_to_dict(record, keys)
    try:
        line = _dumps(obj)
    except Exception:
        line = _dumps(_with_field_errors(obj))
    return (line + "\n").encode("utf-8")
