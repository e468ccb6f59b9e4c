"""First-N/thereafter-M record sampling.

Counters are keyed by (level, message). The table is bounded: when it is
full, counters whose window has expired are dropped first, then the
oldest ones.
"""

import threading
import time
from collections.abc import Callable

from solulog.core.models import Level

MAX_SAMPLING_KEYS = 4096


class _Counter:
    __slots__ = ("count", "resets_at")

    def __init__(self) -> None:
        self.count = 0
        self.resets_at = 0.0


class Sampler:
    """Lets the first ``first`` records per key and window through, then every
    ``thereafter``-th one.

    Args:
        first: Records passed unconditionally per key in each window.
        thereafter: After ``first``, pass every Nth record; 0 drops them all.
        tick: Window length in seconds.
        clock: Monotonic time source.
        max_keys: Upper bound on tracked (level, message) keys.
    """

    def __init__(
        self,
        first: int,
        thereafter: int,
        tick: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = MAX_SAMPLING_KEYS,
    ) -> None:
        self.first = first
        self.thereafter = thereafter
        self._tick = tick
        self._clock = clock
        self._max_keys = max_keys
        self._lock = threading.Lock()
        self._counters: dict[tuple[Level, str], _Counter] = {}

    def _evict(self, now: float) -> None:
        expired = [k for k, c in self._counters.items() if c.resets_at <= now]
        for key in expired:
            del self._counters[key]
        while len(self._counters) >= self._max_keys:
            del self._counters[next(iter(self._counters))]

    def _count(self, level: Level, message: str) -> int:
        key = (level, message)
        now = self._clock()
        with self._lock:
            counter = self._counters.get(key)
            if counter is None:
                if len(self._counters) >= self._max_keys:
                    self._evict(now)
                counter = self._counters[key] = _Counter()
            if now >= counter.resets_at:
                counter.count = 0
                counter.resets_at = now + self._tick
            counter.count += 1
            return counter.count

    def allow(self, level: Level, message: str) -> bool:
        """Return True if a record with this level and message should pass."""
        n = self._count(level, message)
        if n <= self.first:
            return True
        if self.thereafter > 0 and (n - self.first) % self.thereafter == 0:
            return True
        return False
