import io
from typing import Any

from .basic_io import ByteSink, ByteSource


def as_source(obj: Any) -> Any:
    """Adapt `obj` into something with `read_byte()`.

    Accepts an existing source, raw bytes, or a binary file object.
    """
    if hasattr(obj, 'read_byte'):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ByteSource(io.BytesIO(bytes(obj)))
    return ByteSource(obj)


def as_sink(obj: Any) -> Any:
    """Adapt `obj` into something with `write_byte()`."""
    if hasattr(obj, 'write_byte'):
        return obj
    return ByteSink(obj)


__all__ = ['ByteSource', 'ByteSink', 'as_source', 'as_sink']
