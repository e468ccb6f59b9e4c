"""In-memory sink for tests and embedding applications."""

import json
import threading
from collections import deque
from typing import Any


class InMemorySink:
    """Keeps encoded records in memory.

    Suitable for testing and for applications that inspect recent records
    themselves. With ``max_records`` set, the oldest records are evicted.

    Args:
        max_records: Maximum number of records kept (default: unbounded).
    """

    def __init__(self, max_records: int | None = None) -> None:
        self._lines: deque[bytes] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        """Store one encoded record."""
        with self._lock:
            self._lines.append(bytes(data))
        return len(data)

    def sync(self) -> None:
        pass

    def close(self) -> None:
        pass

    @property
    def lines(self) -> list[bytes]:
        """Stored records in write order."""
        with self._lock:
            return list(self._lines)

    def records(self) -> list[dict[str, Any]]:
        """Stored records decoded from JSON."""
        return [json.loads(line) for line in self.lines]

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
