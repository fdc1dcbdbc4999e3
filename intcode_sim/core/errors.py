# errors.py: Intcode error taxonomy
from typing import Optional


class IntcodeError(Exception):
    """Base class for every failure raised by the Intcode core."""


class UnknownOpcode(IntcodeError, ValueError):
    def __init__(self, code: int):
        super().__init__(f"unknown opcode: {code}")
        self.code = code


class UnknownParameterMode(IntcodeError, ValueError):
    def __init__(self, mode: int):
        super().__init__(f"unknown parameter mode: {mode}")
        self.mode = mode


class MemoryBoundsError(IntcodeError, IndexError):
    def __init__(self, index: int, capacity: int):
        super().__init__(f"address {index} exceeds memory capacity of {capacity} words")
        self.index = index
        self.capacity = capacity


class InvalidAddress(IntcodeError, ValueError):
    def __init__(self, word: int):
        super().__init__(f"failed to convert word {word} to a memory index")
        self.word = word


class ImmediateWrite(IntcodeError, ValueError):
    def __init__(self):
        super().__init__("write parameter declared in immediate mode")


class InputTimeout(IntcodeError, TimeoutError):
    def __init__(self, reason: str = "timed out"):
        super().__init__(f"input: {reason}")
        self.reason = reason


class OutputTimeout(IntcodeError, TimeoutError):
    def __init__(self, reason: str = "timed out"):
        super().__init__(f"output: {reason}")
        self.reason = reason


class Halt(IntcodeError):
    """
    Loop-termination sentinel raised by the Halt opcode.
    Computer.run() converts it into a normal return; it never reaches callers.
    """

    def __init__(self, ip: Optional[int] = None):
        super().__init__(f"encountered Halt opcode at instruction pointer {ip}")
        self.ip = ip
