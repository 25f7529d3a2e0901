"""Time-ordered record IDs for chat messages and moderation entries.

An id packs milliseconds since 2025-01-01 UTC, the node number from
``settings.NODE_ID`` and a per-millisecond counter into one integer, sent
as a decimal string. Newer ids compare greater, which is what lets the
directory tie-break on id when two rows share a ``created_at``.
"""

import threading
import time
from collections.abc import Callable

from config.settings import settings

ID_EPOCH_MS = 1_735_689_600_000
NODE_BITS = 10
COUNTER_BITS = 12
MAX_NODE = (1 << NODE_BITS) - 1
MAX_COUNTER = (1 << COUNTER_BITS) - 1


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class RecordIdGenerator:
    def __init__(self, node_id: int = 0, clock: Callable[[], int] = _wall_clock_ms) -> None:
        if node_id < 0 or node_id > MAX_NODE:
            raise ValueError(f"node_id must be within 0..{MAX_NODE}, got {node_id}")
        self._node_id = node_id
        self._clock = clock
        self._ms = 0
        self._counter = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            # a clock that steps backwards keeps issuing from the last millisecond
            ms = max(self._clock(), self._ms)
            if ms == self._ms:
                self._counter += 1
                if self._counter > MAX_COUNTER:
                    ms += 1
                    self._counter = 0
            else:
                self._counter = 0
            self._ms = ms
            counter = self._counter
        packed = (ms - ID_EPOCH_MS) << (NODE_BITS + COUNTER_BITS)
        return str(packed | self._node_id << COUNTER_BITS | counter)


_generator = RecordIdGenerator(node_id=settings.NODE_ID)


def generate_id() -> str:
    return _generator.next_id()
