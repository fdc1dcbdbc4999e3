import pytest

from intcode_sim.core.computer import Computer
from intcode_sim.core.errors import ImmediateWrite, InvalidAddress
from intcode_sim.core.memory import Slot
from intcode_sim.core.opcodes import ParameterMode
from intcode_sim.core.params import raw_parameters, reads, reads_then_write, resolve

P, I, R = ParameterMode.POSITION, ParameterMode.IMMEDIATE, ParameterMode.RELATIVE


def make(program, ip=0, base=0):
    computer = Computer(program)
    computer.ip = ip
    computer.relative_base = base
    return computer


def test_raw_parameters_follow_ip():
    computer = make([7, 1, 2, 3, 4], ip=1)
    assert raw_parameters(computer, 3) == [2, 3, 4]
    assert raw_parameters(computer, 0) == []


def test_raw_parameters_past_end_read_zero():
    computer = make([7, 1])
    assert raw_parameters(computer, 3) == [1, 0, 0]


def test_read_modes():
    computer = make([0, 4, 5, 2, 40, 50], base=1)
    assert reads(computer, (P, P, P, P), 3) == (40, 50, 5)
    assert reads(computer, (I, I, I, P), 3) == (4, 5, 2)
    assert reads(computer, (R, R, R, P), 3) == (50, 0, 2)


def test_write_modes_return_slots():
    computer = make([0, 4, 1, 0, 0], base=3)
    a, out = reads_then_write(computer, (I, P, P, P), 2)
    assert a == 4
    assert isinstance(out, Slot) and out.index == 1

    a, out = reads_then_write(computer, (I, R, P, P), 2)
    assert out.index == 4
    out.set(77)
    assert computer.memory.read(4) == 77


def test_write_slot_extends_memory():
    computer = make([0, 1, 2, 20])
    _, _, out = reads_then_write(computer, (I, I, P, P), 3)
    assert out.index == 20
    assert len(computer.memory) == 21


def test_immediate_write_is_rejected():
    computer = make([0, 1, 2, 3])
    with pytest.raises(ImmediateWrite):
        reads_then_write(computer, (P, P, I, P), 3)


def test_relative_below_zero_is_invalid():
    computer = make([0, 1], base=-5)
    with pytest.raises(InvalidAddress):
        reads(computer, (R, P, P, P), 1)
    with pytest.raises(InvalidAddress):
        resolve(computer, (R, P, P, P), 1, write=0)


def test_resolve_write_in_middle():
    computer = make([0, 9, 3, 8])
    a, out, c = resolve(computer, (I, P, I, P), 3, write=1)
    assert (a, c) == (9, 8)
    assert out.index == 3
