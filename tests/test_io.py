import io

import pytest

from brainbyte.errors import IOFailure
from brainbyte.io import ByteSink, ByteSource, as_sink, as_source


def test_source_signals_exhaustion():
    source = ByteSource(io.BytesIO(b"ab"))
    assert source.read_byte() == ord('a')
    assert source.read_byte() == ord('b')
    assert source.read_byte() is None
    assert source.bytes_read == 2


def test_read_exact_then_remainder():
    source = ByteSource(io.BytesIO(b",.rest"))
    assert source.read_exact(2) == b",."
    assert source.read_byte() == ord('r')


def test_read_exact_stops_at_end():
    source = ByteSource(io.BytesIO(b"abc"))
    assert source.read_exact(10) == b"abc"
    assert source.read_byte() is None


class FailingReader(io.RawIOBase):
    def readable(self):
        return True

    def readinto(self, buffer):
        raise OSError(5, 'Input/output error')


def test_read_error_is_io_failure():
    with pytest.raises(IOFailure) as excinfo:
        ByteSource(FailingReader()).read_byte()
    assert excinfo.value.pc is None


def test_sink_writes_bytes():
    out = io.BytesIO()
    sink = ByteSink(out)
    sink.write_byte(0)
    sink.write_byte(255)
    sink.flush()
    assert out.getvalue() == b"\x00\xff"
    assert sink.bytes_written == 2


def test_adapters():
    source = ByteSource(io.BytesIO())
    sink = ByteSink(io.BytesIO())
    assert as_source(source) is source
    assert as_sink(sink) is sink
    assert as_source(b"z").read_byte() == ord('z')
    assert isinstance(as_source(io.BytesIO()), ByteSource)
    assert isinstance(as_sink(io.BytesIO()), ByteSink)
