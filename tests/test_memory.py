import pytest

from intcode_sim.core.errors import InvalidAddress, IntcodeError, MemoryBoundsError
from intcode_sim.core.memory import MAX_WORDS, Memory, to_index


def test_reads_program_words():
    mem = Memory([5, -6, 7])
    assert len(mem) == 3
    assert [mem.read(i) for i in range(3)] == [5, -6, 7]


def test_unallocated_read_is_zero_and_does_not_grow():
    mem = Memory([1, 2, 3], capacity=16)
    assert mem.read(10) == 0
    assert mem.read(15) == 0
    assert len(mem) == 3


def test_write_past_end_zero_fills():
    mem = Memory([1, 2, 3], capacity=16)
    mem.write(7, 42)
    assert len(mem) == 8
    assert mem.snapshot() == [1, 2, 3, 0, 0, 0, 0, 42]
    assert mem.read(7) == 42


def test_write_slot_grows_then_sets():
    mem = Memory([1], capacity=16)
    slot = mem.write_slot(4)
    assert len(mem) == 5
    assert slot.get() == 0
    slot.set(-9)
    assert mem.read(4) == -9


@pytest.mark.parametrize("addr", [16, 17, 1000])
def test_capacity_is_enforced(addr):
    mem = Memory([1, 2, 3], capacity=16)
    with pytest.raises(MemoryBoundsError):
        mem.read(addr)
    with pytest.raises(MemoryBoundsError):
        mem.write_slot(addr)
    assert len(mem) == 3


def test_default_capacity():
    mem = Memory()
    assert mem.read(MAX_WORDS - 1) == 0
    assert len(mem) == 0
    with pytest.raises(MemoryBoundsError) as exc:
        mem.read(MAX_WORDS)
    assert isinstance(exc.value, IndexError)


def test_negative_address_is_not_a_bounds_error():
    mem = Memory([1, 2, 3])
    with pytest.raises(InvalidAddress) as exc:
        mem.read(-1)
    assert not isinstance(exc.value, MemoryBoundsError)
    with pytest.raises(InvalidAddress):
        mem.write_slot(-3)
    assert isinstance(exc.value, IntcodeError)


def test_to_index():
    assert to_index(0) == 0
    assert to_index(12) == 12
    with pytest.raises(InvalidAddress):
        to_index(-5)


def test_snapshot_is_a_copy():
    program = [1, 2, 3]
    mem = Memory(program)
    snap = mem.snapshot()
    snap[0] = 99
    mem.write(1, 50)
    assert mem.read(0) == 1
    assert program == [1, 2, 3]
