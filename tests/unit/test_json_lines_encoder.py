"""Tests for the JSON-lines record encoder."""

import json
from datetime import datetime

import pytest

from solulog.core.encoding.json_lines import (
    DEFAULT_KEYS,
    EncoderKeys,
    encode_record,
    record_to_dict,
)
from solulog.core.models import Level, LogRecord

TS = datetime(2024, 5, 10, 12, 30, 15).timestamp()


def _record(**overrides: object) -> LogRecord:
    values: dict[str, object] = {"level": Level.INFO, "message": "hello", "timestamp": TS}
    values.update(overrides)
    return LogRecord(**values)  # type: ignore[arg-type]


@pytest.mark.core
class TestEncodeRecord:
    """Tests for encode_record()."""

    def test_one_newline_terminated_line(self) -> None:
        data = encode_record(_record())
        assert isinstance(data, bytes)
        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1

    def test_valid_json(self) -> None:
        obj = json.loads(encode_record(_record()))
        assert obj["message"] == "hello"
        assert obj["level"] == "info"

    def test_time_is_rfc3339_local(self) -> None:
        obj = json.loads(encode_record(_record()))
        parsed = datetime.fromisoformat(obj["time"])
        assert parsed.tzinfo is not None
        assert parsed.timestamp() == TS

    def test_newline_in_message_is_escaped(self) -> None:
        data = encode_record(_record(message="line1\nline2"))
        assert data.count(b"\n") == 1
        assert json.loads(data)["message"] == "line1\nline2"

    def test_non_ascii_stays_utf8(self) -> None:
        data = encode_record(_record(message="grüße"))
        assert "grüße".encode() in data

    def test_non_json_values_are_stringified(self) -> None:
        obj = json.loads(encode_record(_record(fields=(("when", datetime(2024, 1, 2)),))))
        assert obj["when"] == "2024-01-02 00:00:00"

    def test_exception_values_render_type_and_message(self) -> None:
        obj = json.loads(encode_record(_record(fields=(("error", KeyError("x")),))))
        assert obj["error"] == "KeyError: 'x'"

    @pytest.mark.parametrize("level", list(Level))
    def test_level_labels(self, level: Level) -> None:
        obj = json.loads(encode_record(_record(level=level)))
        assert obj["level"] == level.name.lower()


@pytest.mark.core
class TestRecordLayout:
    """Tests for key order and optional entries."""

    def test_fixed_key_order(self) -> None:
        record = _record(
            name="api.http",
            caller="app/main.py:10",
            trace_id="a" * 32,
            span_id="b" * 16,
            fields=(("user", 7),),
            stacktrace="stack",
        )
        assert list(record_to_dict(record)) == [
            "time",
            "level",
            "logger",
            "caller",
            "message",
            "trace-id",
            "span-id",
            "user",
            "stacktrace",
        ]

    def test_empty_optional_entries_are_omitted(self) -> None:
        obj = record_to_dict(_record())
        assert set(obj) == {"time", "level", "message"}

    def test_fields_keep_bind_order(self) -> None:
        obj = record_to_dict(_record(fields=(("b", 1), ("a", 2), ("c", 3))))
        assert list(obj)[-3:] == ["b", "a", "c"]

    def test_duplicate_field_last_value_wins(self) -> None:
        obj = record_to_dict(_record(fields=(("k", 1), ("k", 2))))
        assert obj["k"] == 2


@pytest.mark.core
class TestEncoderKeys:
    """Tests for configurable key names."""

    def test_defaults(self) -> None:
        assert DEFAULT_KEYS.trace_id == "trace-id"
        assert DEFAULT_KEYS.span_id == "span-id"
        assert DEFAULT_KEYS.name == "logger"

    def test_renamed_keys(self) -> None:
        keys = EncoderKeys(time="ts", message="msg", level="lvl")
        obj = record_to_dict(_record(), keys)
        assert set(obj) == {"ts", "lvl", "msg"}

    def test_empty_key_omits_entry(self) -> None:
        keys = EncoderKeys(time="", caller="")
        obj = record_to_dict(_record(caller="x/y.py:1"), keys)
        assert "time" not in obj
        assert "caller" not in obj


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no text form")


@pytest.mark.core
class TestUnencodableFields:
    """Tests for fields json cannot serialize."""

    def test_non_string_dict_keys_become_error_entry(self) -> None:
        record = _record(fields=(("data", {(1, 2): "x"}), ("user", "ana")))
        obj = json.loads(encode_record(record))
        assert "data" not in obj
        assert obj["dataError"].startswith("TypeError: keys must be")
        assert obj["user"] == "ana"
        assert obj["message"] == "hello"

    def test_self_referencing_list_becomes_error_entry(self) -> None:
        loop: list[object] = [1]
        loop.append(loop)
        obj = json.loads(encode_record(_record(fields=(("data", loop),))))
        assert obj["dataError"] == "ValueError: Circular reference detected"

    def test_raising_str_becomes_error_entry(self) -> None:
        obj = json.loads(encode_record(_record(fields=(("thing", Unprintable()),))))
        assert obj["thingError"] == "RuntimeError: no text form"

    def test_key_order_is_kept_around_the_error_entry(self) -> None:
        record = _record(fields=(("a", 1), ("bad", {(0,): 0}), ("z", 2)))
        obj = json.loads(encode_record(record))
        assert list(obj)[-3:] == ["a", "badError", "z"]
