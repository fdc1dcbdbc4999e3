# opcodes.py: Opcode map, parameter modes and instruction decode
from enum import IntEnum
from typing import NamedTuple, Tuple

from .errors import UnknownOpcode, UnknownParameterMode

# Mode slots decoded per instruction; largest arity is 3, one slot spare
MAX_PARAMETERS = 4


class Opcode(IntEnum):
    ADD = 1
    MULTIPLY = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    RELATIVE_BASE_OFFSET = 9
    HALT = 99

    @property
    def arity(self) -> int:
        return ARITY[self]


ARITY = {
    Opcode.ADD:                  3,
    Opcode.MULTIPLY:             3,
    Opcode.INPUT:                1,
    Opcode.OUTPUT:               1,
    Opcode.JUMP_IF_TRUE:         2,
    Opcode.JUMP_IF_FALSE:        2,
    Opcode.LESS_THAN:            3,
    Opcode.EQUALS:               3,
    Opcode.RELATIVE_BASE_OFFSET: 1,
    Opcode.HALT:                 0,
}


class ParameterMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


ParameterModes = Tuple[ParameterMode, ParameterMode, ParameterMode, ParameterMode]


class Instruction(NamedTuple):
    opcode: Opcode
    modes: ParameterModes


def decode_opcode(code: int) -> Opcode:
    try:
        return Opcode(code)
    except ValueError:
        raise UnknownOpcode(code) from None


def decode_mode(digit: int) -> ParameterMode:
    try:
        return ParameterMode(digit)
    except ValueError:
        raise UnknownParameterMode(digit) from None


def decode_instruction(word: int) -> Instruction:
    """
    Split a raw word into its opcode (two low decimal digits) and four
    parameter modes (one decimal digit each, lowest first).
    """
    if word < 0:
        raise UnknownOpcode(word)
    opcode = decode_opcode(word % 100)
    rest = word // 100

    modes = []
    for _ in range(MAX_PARAMETERS):
        modes.append(decode_mode(rest % 10))
        rest //= 10

    if rest:
        # digits beyond the fourth mode slot
        raise UnknownParameterMode(rest)

    return Instruction(opcode, tuple(modes))


def encode_instruction(opcode: Opcode, *modes: ParameterMode) -> int:
    """Inverse of decode_instruction; missing modes default to POSITION."""
    if len(modes) > MAX_PARAMETERS:
        raise ValueError(f"at most {MAX_PARAMETERS} parameter modes")
    word = int(opcode)
    for i, mode in enumerate(modes):
        word += int(mode) * 10 ** (i + 2)
    return word
