# params.py: raw parameter fetch and mode resolution
from typing import List, Optional, Tuple, Union

from .errors import ImmediateWrite
from .memory import Slot
from .opcodes import ParameterMode, ParameterModes

Resolved = Union[int, Slot]


def raw_parameters(computer, count: int) -> List[int]:
    """
    The `count` words following the instruction pointer, before any mode is
    applied. Does not advance the instruction pointer.
    """
    base = computer.ip + 1
    return [computer.memory.read(base + i) for i in range(count)]


def read_param(computer, mode: ParameterMode, raw: int) -> int:
    if mode == ParameterMode.POSITION:
        return computer.memory.read(raw)
    if mode == ParameterMode.IMMEDIATE:
        return raw
    return computer.memory.read(raw + computer.relative_base)


def write_param(computer, mode: ParameterMode, raw: int) -> Slot:
    if mode == ParameterMode.POSITION:
        return computer.memory.write_slot(raw)
    if mode == ParameterMode.RELATIVE:
        return computer.memory.write_slot(raw + computer.relative_base)
    raise ImmediateWrite()


def resolve(computer, modes: ParameterModes, arity: int,
            write: Optional[int] = None) -> Tuple[Resolved, ...]:
    """
    Resolve `arity` parameters left to right. Every position is a read value
    except `write`, which (when given) is resolved to a writable Slot.
    """
    raw = raw_parameters(computer, arity)
    out: List[Resolved] = []
    for i in range(arity):
        if i == write:
            out.append(write_param(computer, modes[i], raw[i]))
        else:
            out.append(read_param(computer, modes[i], raw[i]))
    return tuple(out)


def reads(computer, modes: ParameterModes, arity: int) -> Tuple[int, ...]:
    return resolve(computer, modes, arity)


def reads_then_write(computer, modes: ParameterModes, arity: int) -> Tuple[Resolved, ...]:
    """Shape used by every opcode that stores a result: N-1 reads then one Slot."""
    return resolve(computer, modes, arity, write=arity - 1)
