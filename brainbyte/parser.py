"""Program loader for brainbyte.

Loading happens in two stages:

1. **Parsing**: the raw source is decoded as latin-1 (one character per
   byte, so character offsets are byte offsets) and fed into a Lark LALR
   parser. The grammar knows only the eight instruction characters;
   every other byte is an ignored comment terminal. Brackets must nest,
   so an unbalanced program fails here, before anything runs.

2. **Flattening**: the parse tree of nested loops is turned into the
   compacted instruction sequence and the jump table. Loops are
   flattened with an explicit stack rather than recursion, so deeply
   nested programs load regardless of the interpreter's recursion limit.

`load_program` is the public entry point and returns a `Program`;
`build` returns the same result as an (instructions, jump table) pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from lark import Lark, Token
from lark.exceptions import UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.visitors import Transformer_NonRecursive

from .errors import UnbalancedBrackets
from .types import LOOP_CLOSE, LOOP_OPEN, Program


BRAINBYTE_GRAMMAR = r"""
    start: _item*
    _item: OP | loop
    loop: "[" _item* "]"

    OP: /[<>+\-.,]/

    // Anything that is not an instruction is a comment
    COMMENT: /[^<>+\-.,\[\]]+/
    %ignore COMMENT
"""


BRAINBYTE_PARSER = Lark(
    BRAINBYTE_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=False,
)


@dataclass
class Loop:
    body: List[Union[Token, 'Loop']]


class LoopTransformer(Transformer_NonRecursive):
    """Turns `loop` subtrees into Loop nodes and `start` into a plain list."""

    def start(self, items):
        return list(items)

    def loop(self, items):
        return Loop(list(items))


def flatten(items: List[Union[Token, Loop]]) -> Program:
    """Lay out a list of ops and loops as a Program.

    Each loop-open is appended at the current length of the output, and
    its position is kept on `opens` until the body has been laid out and
    the matching loop-close is appended.
    """
    instructions = bytearray()
    jumps: Dict[int, int] = {}
    opens: List[int] = []
    pending = [iter(items)]
    while pending:
        for item in pending[-1]:
            if isinstance(item, Loop):
                opens.append(len(instructions))
                instructions.append(LOOP_OPEN)
                pending.append(iter(item.body))
                break
            instructions.append(ord(item))
        else:
            pending.pop()
            # every iterator but the outermost belongs to an open loop
            if pending:
                open_pos = opens.pop()
                close_pos = len(instructions)
                instructions.append(LOOP_CLOSE)
                jumps[open_pos] = close_pos
                jumps[close_pos] = open_pos
    return Program(bytes(instructions), jumps)


def _decode(source: Union[bytes, bytearray, str]) -> str:
    if isinstance(source, str):
        # characters outside latin-1 can only ever be comments
        source = source.encode('latin-1', errors='replace')
    return bytes(source).decode('latin-1')


def _line_col(text: str, position: int) -> Tuple[int, int]:
    line = text.count('\n', 0, position) + 1
    column = position - (text.rfind('\n', 0, position) + 1) + 1
    return line, column


def _innermost_unclosed(text: str) -> int:
    opens: List[int] = []
    for i, c in enumerate(text):
        if c == '[':
            opens.append(i)
        elif c == ']' and opens:
            opens.pop()
    return opens[-1]


def load_program(source: Union[bytes, bytearray, str]) -> Program:
    """Load raw program text into a Program.

    Raises UnbalancedBrackets when a loop-close has no loop-open or a
    loop-open is never closed.
    """
    text = _decode(source)
    try:
        tree = BRAINBYTE_PARSER.parse(text)
    except UnexpectedInput as e:
        if isinstance(e, UnexpectedEOF) or (
                isinstance(e, UnexpectedToken) and e.token.type == '$END'):
            position = _innermost_unclosed(text)
            line, column = _line_col(text, position)
            raise UnbalancedBrackets(
                "unmatched '[': loop is never closed",
                position=position, line=line, column=column,
            ) from None
        position = e.pos_in_stream
        line, column = _line_col(text, position)
        raise UnbalancedBrackets(
            "unmatched ']': no loop is open",
            position=position, line=line, column=column,
        ) from None
    return flatten(LoopTransformer().transform(tree))


def build(source: Union[bytes, bytearray, str]) -> Tuple[bytes, Dict[int, int]]:
    """Load `source` and return (instruction sequence, jump table)."""
    return load_program(source).as_tuple()
