"""Time-ordered unique identifiers for generated routes.

Identifiers follow the flake layout: 42 bits of milliseconds since
``EPOCH_MS``, 10 bits of worker id and a 12 bit per-millisecond sequence,
rendered as a zero-padded decimal string so they sort as text and can be
embedded in a URL path segment.
"""

from __future__ import annotations

import secrets
import threading
import time

EPOCH_MS = 1_577_836_800_000  # 2020-01-01T00:00:00Z

WORKER_BITS = 10
SEQUENCE_BITS = 12
MAX_WORKER_ID = (1 << WORKER_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1

# Zero-padded width of the decimal form, so string order matches creation order.
ID_WIDTH = 20


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class FlakeIdGenerator:
    """Thread-safe generator of unique, roughly time-sortable identifiers."""

    def __init__(self, worker_id: int | None = None, *, clock=_now_ms) -> None:
        if worker_id is None:
            worker_id = secrets.randbelow(MAX_WORKER_ID + 1)
        if not 0 <= worker_id <= MAX_WORKER_ID:
            raise ValueError(f"worker_id must be between 0 and {MAX_WORKER_ID}")
        self._worker_id = worker_id
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    @property
    def worker_id(self) -> int:
        return self._worker_id

    def next_int(self) -> int:
        with self._lock:
            now = max(self._clock(), self._last_ms)
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    # Sequence exhausted; borrow the next millisecond.
                    now = max(self._clock(), self._last_ms + 1)
            else:
                self._sequence = 0
            self._last_ms = now
            return (
                ((now - EPOCH_MS) << (WORKER_BITS + SEQUENCE_BITS))
                | (self._worker_id << SEQUENCE_BITS)
                | self._sequence
            )

    def next(self) -> str:
        return f"{self.next_int():0{ID_WIDTH}d}"

    __call__ = next
