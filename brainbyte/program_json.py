"""JSON serialization/deserialization for loaded programs.

A loaded `Program` is stored as its instruction characters plus the
(open, close) pairs of its jump table. Reading one back re-loads the
instruction string, so a file whose pairs disagree with its brackets is
rejected rather than trusted.
"""

from __future__ import annotations

from typing import Any, Dict

from .errors import LoadError
from .parser import load_program
from .types import INSTRUCTION_CHARS, Program


def program_to_obj(program: Program) -> Dict[str, Any]:
    return {
        "type": "Program",
        "instructions": program.instructions.decode('ascii'),
        "jumps": [list(pair) for pair in program.loop_pairs()],
    }


def program_from_obj(obj: Any) -> Program:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise LoadError("not a serialized program")
    text = obj.get("instructions")
    if not isinstance(text, str):
        raise LoadError("serialized program has no instruction string")
    for i, c in enumerate(text):
        if c not in INSTRUCTION_CHARS:
            raise LoadError(f"invalid instruction {c!r} in serialized program", position=i)
    program = load_program(text)
    try:
        pairs = sorted((int(i), int(j)) for i, j in obj.get("jumps", []))
    except (TypeError, ValueError):
        raise LoadError("malformed jump table in serialized program") from None
    if tuple(pairs) != program.loop_pairs():
        raise LoadError("jump table does not match the program's brackets")
    return program
