# brainbyte package
# An interpreter for the eight-instruction byte tape language.
from .interpreter import run_interpreter, run_program, Interpreter
from .parser import build, load_program
from .types import Program
from .errors import (
    BrainbyteError, LoadError, UnbalancedBrackets,
    ExecutionError, InputExhausted, IOFailure, PointerUnderflow,
)

__all__ = [
    'run_interpreter',
    'run_program',
    'Interpreter',
    'build',
    'load_program',
    'Program',
    'BrainbyteError',
    'LoadError',
    'UnbalancedBrackets',
    'ExecutionError',
    'InputExhausted',
    'IOFailure',
    'PointerUnderflow',
]
