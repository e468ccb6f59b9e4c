"""Sink adapters implementing SinkPort."""

from solulog.adapters.sinks.console import ConsoleWriter
from solulog.adapters.sinks.file import RotatingFileWriter
from solulog.adapters.sinks.memory import InMemorySink

__all__ = ["ConsoleWriter", "InMemorySink", "RotatingFileWriter"]
