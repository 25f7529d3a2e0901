"""Tests for sh_common.id_generator and sh_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.sh_common.datetime_utils import utc_now
from src.sh_common.id_generator import (
    COUNTER_BITS,
    ID_EPOCH_MS,
    MAX_COUNTER,
    NODE_BITS,
    RecordIdGenerator,
    generate_id,
)

_T0 = ID_EPOCH_MS + 86_400_000


def _fixed_clock(*readings: int):  # type: ignore[no-untyped-def]
    values = iter(readings)
    last = [readings[0]]

    def clock() -> int:
        last[0] = next(values, last[0])
        return last[0]

    return clock


class TestRecordIdGenerator:
    def test_unique_ids(self) -> None:
        gen = RecordIdGenerator(node_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = RecordIdGenerator(node_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_layout(self) -> None:
        gen = RecordIdGenerator(node_id=5, clock=lambda: _T0)
        value = int(gen.next_id())
        assert value >> (NODE_BITS + COUNTER_BITS) == _T0 - ID_EPOCH_MS
        assert (value >> COUNTER_BITS) & ((1 << NODE_BITS) - 1) == 5

    def test_clock_going_backwards_still_increases(self) -> None:
        gen = RecordIdGenerator(clock=_fixed_clock(_T0 + 10, _T0 + 3))
        first = int(gen.next_id())
        assert int(gen.next_id()) > first

    def test_counter_overflow_moves_to_next_ms(self) -> None:
        gen = RecordIdGenerator(clock=lambda: _T0)
        ids = [int(gen.next_id()) for _ in range(MAX_COUNTER + 2)]
        assert ids == sorted(set(ids))
        assert ids[-1] >> (NODE_BITS + COUNTER_BITS) == _T0 + 1 - ID_EPOCH_MS

    def test_fits_id_column(self) -> None:
        assert len(generate_id()) <= 20

    @pytest.mark.parametrize("node_id", [-1, 1024])
    def test_node_id_range(self, node_id: int) -> None:
        with pytest.raises(ValueError):
            RecordIdGenerator(node_id=node_id)


class TestUtcNow:
    def test_returns_aware_utc(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.utcoffset() == UTC.utcoffset(None)
