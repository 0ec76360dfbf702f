"""Execution engine for brainbyte.

The `Interpreter` runs a loaded `Program` against a growable byte tape,
pulling input bytes from a byte source and pushing output bytes to a
byte sink. Dispatch is a single loop over the instruction sequence: each
instruction runs and then the program counter advances by one. Loop
brackets jump to their partner's position via the jump table and rely
on that same advance to step past it.

`run_interpreter` is the public entry point (load, then run); it raises
a `LoadError` before anything executes when brackets are unbalanced, and
an `ExecutionError` when the run fails part way. Output written before a
failure is left in the sink.
"""

from __future__ import annotations

import io
from typing import Any, Optional, Union

from .errors import ExecutionError, InputExhausted, LoadError, PointerUnderflow
from .io import as_sink, as_source
from .parser import load_program
from .tape import DEFAULT_TAPE_SIZE, Tape
from .types import (
    CELL_DEC, CELL_INC, INPUT, LOOP_CLOSE, LOOP_OPEN, OUTPUT, PTR_LEFT, PTR_RIGHT,
    Program,
)


class Interpreter:
    """Runs loaded programs. State from the last run stays readable afterwards."""
    def __init__(self, tape_size: int = DEFAULT_TAPE_SIZE, debug_level: int = 0,
                 debug_file: str = 'debug.txt'):
        if tape_size < 1:
            raise ValueError(f'tape size must be positive, got {tape_size}')
        self.tape_size = tape_size
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        self.tape: Optional[Tape] = None
        self.pc = 0
        self.ptr = 0
        self.steps = 0

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def load(self, source: Union[bytes, bytearray, str]) -> Program:
        try:
            program = load_program(source)
        except LoadError as e:
            self.debug(f"load failed: {e}")
            self.close()
            raise
        self.debug(f"loaded {len(source)} source bytes -> {program!r}")
        if self.debug_level >= 2:
            for open_pos, close_pos in program.loop_pairs():
                self.debug(f"  loop [{open_pos} .. {close_pos}]")
        return program

    def run(self, program: Program, input_source: Any, output_sink: Any) -> None:
        """Execute `program` until the program counter runs off the end.

        `input_source` needs `read_byte()` returning an int or None when
        exhausted; `output_sink` needs `write_byte(int)`. Binary streams
        (and, for input, plain bytes) are wrapped automatically.
        """
        source = as_source(input_source)
        sink = as_sink(output_sink)
        instructions = program.instructions
        jumps = program.jumps
        end = len(instructions)
        tape = self.tape = Tape(self.tape_size)
        cells = tape.cells  # grows in place, so this reference stays valid
        pc = ptr = steps = 0
        try:
            while pc < end:
                op = instructions[pc]
                if op == CELL_INC:
                    cells[ptr] = (cells[ptr] + 1) & 0xFF
                elif op == CELL_DEC:
                    cells[ptr] = (cells[ptr] - 1) & 0xFF
                elif op == PTR_RIGHT:
                    ptr += 1
                    grown = tape.reach(ptr)
                    if grown and self.debug_level >= 2:
                        self.debug(f"tape grown to {grown} cells at pc {pc}")
                elif op == PTR_LEFT:
                    if ptr == 0:
                        raise PointerUnderflow('cannot move the cell pointer left of cell 0', pc)
                    ptr -= 1
                elif op == LOOP_OPEN:
                    if cells[ptr] == 0:
                        pc = jumps[pc]
                elif op == LOOP_CLOSE:
                    if cells[ptr] != 0:
                        pc = jumps[pc]
                elif op == OUTPUT:
                    sink.write_byte(cells[ptr])
                elif op == INPUT:
                    value = source.read_byte()
                    if value is None:
                        raise InputExhausted('input exhausted while executing ,', pc)
                    cells[ptr] = value
                pc += 1
                steps += 1
        except ExecutionError as e:
            if e.pc is None:
                e.pc = pc
            self.debug(f"run failed at pc {pc} (cell {ptr}): {e}")
            raise
        finally:
            self.pc, self.ptr, self.steps = pc, ptr, steps
            self.debug(
                f"run ended after {steps} steps; highest cell {tape.high_water}, "
                f"tape grew {tape.grow_count} times to {len(tape)} cells, "
                f"read {getattr(source, 'bytes_read', '?')} bytes, "
                f"wrote {getattr(sink, 'bytes_written', '?')} bytes"
            )
            self.close()


def run_interpreter(source_bytes: Union[bytes, bytearray, str], input_source: Any,
                    output_sink: Any, tape_size: int = DEFAULT_TAPE_SIZE,
                    debug_level: int = 0, debug_file: str = 'debug.txt') -> None:
    """Load `source_bytes` and run it against the given input and output."""
    interpreter = Interpreter(tape_size=tape_size, debug_level=debug_level, debug_file=debug_file)
    program = interpreter.load(source_bytes)
    interpreter.run(program, input_source, output_sink)


def run_program(source: Union[bytes, bytearray, str], input_data: bytes = b'',
                debug_level: int = 0) -> bytes:
    """Convenience function: run `source` on `input_data` and return its output."""
    out = io.BytesIO()
    run_interpreter(source, input_data, out, debug_level=debug_level)
    return out.getvalue()
