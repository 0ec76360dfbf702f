from typing import BinaryIO, Optional
from brainbyte.errors import IOFailure


class ByteSource:
    """Pulls input bytes one at a time from a binary stream."""
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bytes_read = 0

    def read_byte(self) -> Optional[int]:
        """Return the next byte, or None once the stream is exhausted."""
        try:
            chunk = self.stream.read(1)
        except OSError as e:
            raise IOFailure(f'error reading input: {e}') from e
        if not chunk:
            return None
        self.bytes_read += 1
        return chunk[0]

    def read_exact(self, count: int) -> bytes:
        """Read up to `count` bytes, stopping early only at end of stream."""
        data = bytearray()
        while len(data) < count:
            try:
                chunk = self.stream.read(count - len(data))
            except OSError as e:
                raise IOFailure(f'error reading input: {e}') from e
            if not chunk:
                break
            data += chunk
        return bytes(data)


class ByteSink:
    """Pushes output bytes one at a time to a binary stream."""
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bytes_written = 0

    def write_byte(self, value: int):
        try:
            written = self.stream.write(bytes((value,)))
        except OSError as e:
            raise IOFailure(f'error writing output: {e}') from e
        if written == 0:
            raise IOFailure('short write: output accepted 0 of 1 bytes')
        self.bytes_written += 1

    def flush(self):
        try:
            self.stream.flush()
        except OSError as e:
            raise IOFailure(f'error flushing output: {e}') from e
