from typing import Optional
from brainbyte.types import ErrorVal


class BrainbyteError(Exception):
    """Base exception; `err` carries the ErrorVal describing the failure."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name


class LoadError(BrainbyteError):
    """Raised before execution when the program text cannot be loaded."""
    def __init__(self, message: str, position: Optional[int] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(ErrorVal(type(self).__name__, message))
        self.position = position
        self.line = line
        self.column = column


class UnbalancedBrackets(LoadError):
    pass


class ExecutionError(BrainbyteError):
    """Raised by the engine; terminates the run at instruction `pc`."""
    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(ErrorVal(type(self).__name__, message))
        self.pc = pc


class InputExhausted(ExecutionError):
    pass


class IOFailure(ExecutionError):
    pass


class PointerUnderflow(ExecutionError):
    pass
