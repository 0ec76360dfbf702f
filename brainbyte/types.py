"""Type definitions for brainbyte.

This module defines the values shared by the loader and the execution
engine: the instruction alphabet, the loaded `Program` (a compacted
instruction sequence plus its jump table) and `ErrorVal`, the record
carried by every brainbyte exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Tuple


# Op-codes are the raw source bytes themselves.
PTR_RIGHT = ord('>')
PTR_LEFT = ord('<')
CELL_INC = ord('+')
CELL_DEC = ord('-')
OUTPUT = ord('.')
INPUT = ord(',')
LOOP_OPEN = ord('[')
LOOP_CLOSE = ord(']')

INSTRUCTION_CHARS = '><+-.,[]'


@dataclass(frozen=True)
class ErrorVal:
    """Describes a brainbyte error by `name` (e.g. 'InputExhausted') and message."""
    name: str
    message: str

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


@dataclass(frozen=True)
class Program:
    """A loaded program.

    `instructions` holds only op-code bytes, comments removed, so a
    position is an index into it. `jumps` maps the position of every
    loop-open to its matching loop-close and back again.
    """
    instructions: bytes
    jumps: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self):
        # freeze the jump table so a running engine cannot alter it
        object.__setattr__(self, 'jumps', MappingProxyType(dict(self.jumps)))

    def __len__(self) -> int:
        return len(self.instructions)

    @property
    def loop_count(self) -> int:
        return len(self.jumps) // 2

    def loop_pairs(self) -> Tuple[Tuple[int, int], ...]:
        """Return the (open, close) position pairs in source order."""
        return tuple(sorted((i, j) for i, j in self.jumps.items() if i < j))

    def as_tuple(self) -> Tuple[bytes, Dict[int, int]]:
        return self.instructions, dict(self.jumps)

    def __repr__(self) -> str:
        return f"<Program {len(self.instructions)} instructions, {self.loop_count} loops>"
