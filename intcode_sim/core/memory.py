# memory.py: growable word store and writable slots
from typing import Iterable, List

from .errors import InvalidAddress, MemoryBoundsError

# Hard limit on addressable words (256 Mi)
MAX_WORDS = 256 * 1024 * 1024


def to_index(word: int) -> int:
    """Convert a signed word used as an address into a store index."""
    if word < 0:
        raise InvalidAddress(word)
    return int(word)


class Slot:
    """A writable location inside a Memory, as handed out by write_slot()."""

    __slots__ = ("memory", "index")

    def __init__(self, memory: "Memory", index: int):
        self.memory = memory
        self.index = index

    def get(self) -> int:
        return self.memory._words[self.index]

    def set(self, value: int):
        self.memory._words[self.index] = int(value)

    def __repr__(self):
        return f"Slot({self.index})"


class Memory:
    """
    Contiguous word store seeded from a program.

    Addresses past the current length but below capacity read as zero;
    writing to one extends the store, zero-filling the gap.
    """

    def __init__(self, program: Iterable[int] = (), capacity: int = MAX_WORDS):
        self._words: List[int] = [int(w) for w in program]
        self.capacity = capacity
        if len(self._words) > capacity:
            raise MemoryBoundsError(len(self._words) - 1, capacity)

    def __len__(self) -> int:
        return len(self._words)

    def _check(self, addr: int) -> int:
        index = to_index(addr)
        if index >= self.capacity:
            raise MemoryBoundsError(index, self.capacity)
        return index

    def _ensure_size(self, n_words: int):
        current = len(self._words)
        if current < n_words:
            self._words.extend([0] * (n_words - current))

    def read(self, addr: int) -> int:
        index = self._check(addr)
        if index >= len(self._words):
            return 0
        return self._words[index]

    def write_slot(self, addr: int) -> Slot:
        index = self._check(addr)
        self._ensure_size(index + 1)
        return Slot(self, index)

    def write(self, addr: int, value: int):
        self.write_slot(addr).set(value)

    def snapshot(self) -> List[int]:
        return list(self._words)
