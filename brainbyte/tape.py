from typing import Optional


DEFAULT_TAPE_SIZE = 8096


class Tape:
    """The interpreter's memory: zeroed byte cells, unbounded to the right.

    Cells live in a bytearray, so every stored value is already in 0..255;
    callers wrap arithmetic with `& 0xFF`. The tape doubles whenever an
    index past its end is reached.
    """
    def __init__(self, size: int = DEFAULT_TAPE_SIZE):
        if size < 1:
            raise ValueError(f'tape size must be positive, got {size}')
        self.cells = bytearray(size)
        self.high_water = 0  # highest index touched so far
        self.grow_count = 0

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return self.cells[index]

    def __setitem__(self, index: int, value: int):
        self.cells[index] = value

    def reach(self, index: int) -> Optional[int]:
        """Make `index` addressable; returns the new length if the tape grew."""
        if index > self.high_water:
            self.high_water = index
        size = len(self.cells)
        if index < size:
            return None
        while size <= index:
            size *= 2
        self.cells.extend(bytes(size - len(self.cells)))
        self.grow_count += 1
        return size

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> bytes:
        """Copy of the cells in [start, end); `end` defaults to the highest index touched."""
        if end is None:
            end = self.high_water + 1
        return bytes(self.cells[start:end])
