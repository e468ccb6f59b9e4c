"""Console sink."""

import io
import sys
from typing import Any

from solulog.core.metrics import CONSOLE_WRITE_COUNTER, SinkMetrics, record_outcome


class ConsoleWriter:
    """Forwards encoded records to a fixed output stream.

    Binary streams receive the bytes as-is. Text streams receive them through
    their ``buffer`` when they have one, otherwise decoded as UTF-8.

    No lock is taken: concurrent writers are only as safe as the stream
    itself, and lines from different threads may interleave on streams that
    split writes.

    Args:
        stream: Destination stream (default: sys.stdout at construction).
        metrics: Optional recorder for write outcomes.
    """

    def __init__(self, stream: Any = None, metrics: SinkMetrics | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._metrics = metrics

    @property
    def stream(self) -> Any:
        return self._stream

    def _forward(self, data: bytes) -> int:
        stream = self._stream
        buffer = getattr(stream, "buffer", None)
        if buffer is not None:
            stream.flush()
            n = buffer.write(data)
            buffer.flush()
            return len(data) if n is None else n
        if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
            n = stream.write(data)
        else:
            stream.write(data.decode("utf-8", errors="replace"))
            n = len(data)
        stream.flush()
        return len(data) if n is None else n

    def write(self, data: bytes) -> int:
        """Write ``data`` to the stream and return the byte count.

        Raises:
            OSError: If the stream rejects the write.
        """
        failed = True
        try:
            n = self._forward(data)
            failed = False
            return n
        finally:
            record_outcome(self._metrics, CONSOLE_WRITE_COUNTER, failed)

    def sync(self) -> None:
        """Flush the stream."""
        self._stream.flush()

    def close(self) -> None:
        """Flush the stream; the stream itself is owned by the caller."""
        self._stream.flush()

    def __repr__(self) -> str:
        return f"ConsoleWriter(stream={getattr(self._stream, 'name', self._stream)!r})"
