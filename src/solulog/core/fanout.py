"""Sink fan-out: level gate, sampling gate, single encode, ordered delivery."""

import logging
from collections.abc import Sequence

from solulog.core.encoding.json_lines import DEFAULT_KEYS, EncoderKeys, encode_record
from solulog.core.models import Level, LogRecord
from solulog.core.ports import SinkPort
from solulog.core.sampling import Sampler

_log = logging.getLogger(__name__)


class SinkFanout:
    """Delivers encoded records to every configured sink.

    A fan-out is shared by a logger and all handles derived from it. Its
    configuration is fixed at construction; the sampler carries the only
    mutable state and guards it with its own lock.

    Args:
        sinks: Destinations, written in this order.
        level: Minimum level; lower records are dropped.
        sampler: Optional sampling policy.
        keys: Key names for the encoded records.
    """

    def __init__(
        self,
        sinks: Sequence[SinkPort],
        level: Level = Level.INFO,
        sampler: Sampler | None = None,
        keys: EncoderKeys = DEFAULT_KEYS,
    ) -> None:
        self._sinks = tuple(sinks)
        self.level = level
        self.sampler = sampler
        self.keys = keys

    @property
    def sinks(self) -> tuple[SinkPort, ...]:
        return self._sinks

    def enabled(self, level: Level) -> bool:
        """Return True if records at ``level`` pass the level gate."""
        return level >= self.level

    def emit(self, record: LogRecord) -> bool:
        """Gate, encode and deliver ``record``.

        Sink failures are isolated: every sink is attempted and nothing is
        raised to the caller.

        Returns:
            True if the record passed both gates and was handed to the sinks.
        """
        if not self.enabled(record.level):
            return False
        if self.sampler is not None and not self.sampler.allow(
            record.level, record.message
        ):
            return False
        data = encode_record(record, self.keys)
        for sink in self._sinks:
            try:
                sink.write(data)
            except Exception:
                _log.debug("sink %r failed to write record", sink, exc_info=True)
        return True

    def sync(self) -> None:
        """Flush every sink, continuing past failures."""
        for sink in self._sinks:
            try:
                sink.sync()
            except Exception:
                _log.debug("sink %r failed to sync", sink, exc_info=True)

    def close(self) -> None:
        """Close every sink, continuing past failures."""
        for sink in self._sinks:
            try:
                sink.close()
            except Exception:
                _log.debug("sink %r failed to close", sink, exc_info=True)
