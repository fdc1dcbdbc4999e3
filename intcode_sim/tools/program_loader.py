# program_loader.py: comma-separated program text <-> word lists
from pathlib import Path
from typing import List, Sequence, Union


def parse_program(line: str) -> List[int]:
    """Parse one line of comma-separated decimal words."""
    words = []
    for i, tok in enumerate(line.split(",")):
        tok = tok.strip()
        if not tok:
            raise ValueError(f"empty word at position {i}")
        words.append(int(tok, 10))
    return words


def parse_programs(text: str) -> List[List[int]]:
    """One program per non-blank line."""
    return [parse_program(line) for line in text.splitlines() if line.strip()]


def load_programs(path: Union[str, Path]) -> List[List[int]]:
    return parse_programs(Path(path).read_text(encoding="utf-8"))


def format_program(words: Sequence[int]) -> str:
    return ",".join(str(w) for w in words)
