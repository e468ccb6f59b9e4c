"""Rotating file sink.

Rotation is checked inline on every write; there is no timer thread. A
writer that receives nothing after its deadline rotates on the next write.
"""

import os
import threading
import time
from collections.abc import Callable
from datetime import datetime
from typing import BinaryIO

from solulog.core.deadline import next_deadline
from solulog.core.metrics import (
    FILE_ROTATE_COUNTER,
    FILE_WRITE_COUNTER,
    SinkMetrics,
    record_outcome,
)
from solulog.core.models import RotationPolicy

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def backup_suffix(timestamp: float) -> str:
    """Render ``timestamp`` (unix seconds, local time) for a backup name."""
    return datetime.fromtimestamp(timestamp).strftime(BACKUP_TIMESTAMP_FORMAT)


class RotatingFileWriter:
    """Append-only log file rotated by size and by calendar boundary.

    The writer exclusively owns its file handle, byte count and deadline;
    all three change only while holding the writer's lock.

    Args:
        directory: Directory holding the active file and its backups.
            Created at construction.
        filename: Name of the active file.
        max_size: Rotate before a write that would push the file past this
            many bytes. 0 disables size rotation.
        rotation: Calendar rotation policy.
        metrics: Optional recorder for write and rotate outcomes.
        clock: Wall-clock time source in unix seconds.
    """

    def __init__(
        self,
        directory: str | os.PathLike[str],
        filename: str,
        max_size: int = 0,
        rotation: RotationPolicy = RotationPolicy.NONE,
        metrics: SinkMetrics | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = os.fspath(directory)
        self.filename = filename
        self.max_size = max_size
        self.rotation = rotation
        self._metrics = metrics
        self._clock = clock
        self._lock = threading.Lock()
        self._file: BinaryIO | None = None
        self._size = 0
        self._deadline = next_deadline(clock(), rotation)
        os.makedirs(self.directory, exist_ok=True)

    @property
    def path(self) -> str:
        """Path of the active log file."""
        return os.path.join(self.directory, self.filename)

    @property
    def size(self) -> int:
        """Bytes written since the file was last opened."""
        return self._size

    @property
    def deadline(self) -> float:
        """Next time-rotation instant in unix seconds, 0.0 when disabled."""
        return self._deadline

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def _open(self) -> BinaryIO:
        os.makedirs(self.directory, exist_ok=True)
        self._file = open(self.path, "ab")
        self._size = 0
        return self._file

    def _backup_path(self, timestamp: float) -> str:
        base = f"{self.path}-{backup_suffix(timestamp)}"
        candidate = base
        n = 0
        while os.path.exists(candidate):
            n += 1
            candidate = f"{base}.{n}"
        return candidate

    def _rotate(self, timestamp: float) -> BinaryIO:
        failed = True
        try:
            if self._file is not None:
                stale, self._file = self._file, None
                stale.close()
            if os.path.exists(self.path):
                os.rename(self.path, self._backup_path(timestamp))
            handle = self._open()
            failed = False
        finally:
            record_outcome(self._metrics, FILE_ROTATE_COUNTER, failed)
        return handle

    def rotate(self) -> None:
        """Move the active file to a timestamped backup and start a new one.

        Raises:
            OSError: If closing, renaming or reopening fails. The writer is
                then left without an open file and reopens on the next write.
        """
        with self._lock:
            self._rotate(self._clock())

    def write(self, data: bytes) -> int:
        """Append ``data``, rotating first when a deadline or the size limit
        is crossed.

        Returns:
            Number of bytes written.

        Raises:
            OSError: If opening, rotating or writing fails.
        """
        with self._lock:
            failed = True
            try:
                n = self._write(data)
                failed = False
                return n
            finally:
                record_outcome(self._metrics, FILE_WRITE_COUNTER, failed)

    def _write(self, data: bytes) -> int:
        handle = self._file if self._file is not None else self._open()
        if self._deadline:
            now = self._clock()
            if now > self._deadline:
                handle = self._rotate(self._deadline)
                self._deadline = next_deadline(now, self.rotation)
        if self.max_size > 0 and self._size + len(data) > self.max_size:
            handle = self._rotate(self._clock())
        n = handle.write(data)
        handle.flush()
        self._size += n
        return n

    def sync(self) -> None:
        """Flush the active file to stable storage."""
        with self._lock:
            if self._file is None:
                return
            self._file.flush()
            os.fsync(self._file.fileno())

    def close(self) -> None:
        """Close the active file. A later write reopens it."""
        with self._lock:
            if self._file is None:
                return
            handle, self._file = self._file, None
            handle.close()

    def __enter__(self) -> "RotatingFileWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"RotatingFileWriter(path={self.path!r}, max_size={self.max_size}, "
            f"rotation={self.rotation.value})"
        )
