"""
Snowflake-style id generator.

Id layout (64-bit signed range):
    [milliseconds since 2022-01-01T00:00:00Z (43 bits) | sequence (20 bits)]

The sequence counts ids minted within the same millisecond and resets when
the millisecond changes. The generator is injected into the vault rather
than held as process-wide state.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Callable


EPOCH = datetime(2022, 1, 1, tzinfo=timezone.utc)
EPOCH_MS = int(EPOCH.timestamp() * 1000)

SEQUENCE_BITS = 20
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class FlakeIdGenerator:
    """
    Thread-safe monotonic id source.

    Example:
        >>> ids = FlakeIdGenerator()
        >>> a, b = ids.next(), ids.next()
        >>> a < b
        True
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        """
        Args:
            clock: Returns the current Unix time in milliseconds
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def next(self) -> int:
        """Mint the next id."""
        with self._lock:
            now = max(self._clock() - EPOCH_MS, self._last_ms)

            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    # Sequence exhausted for this millisecond; borrow the next one
                    now += 1
            else:
                self._sequence = 0

            self._last_ms = now
            return (now << SEQUENCE_BITS) | self._sequence

    __call__ = next
