import io

import pytest

from brainbyte import (
    Interpreter, InputExhausted, IOFailure, PointerUnderflow, UnbalancedBrackets,
    load_program, run_interpreter, run_program,
)


def test_cell_increment_wraps():
    assert run_program(b"+" * 256 + b".") == b"\x00"
    assert run_program(b"+" * 255 + b".+.") == b"\xff\x00"


def test_cell_decrement_wraps():
    assert run_program(b"-.") == b"\xff"
    assert run_program(b"-.-.") == b"\xff\xfe"


def test_echo_one_byte():
    assert run_program(b",.", b"\x41") == b"\x41"
    assert run_program(b",.", b"\xff") == b"\xff"


def test_sixty_four():
    assert run_program(b"++++++++[>++++++++<-]>.") == bytes([64])


def test_nested_multiplication():
    assert run_program(b"++[>++[>+<-]<-]>>.") == b"\x04"


def test_empty_loop_is_skipped():
    interp = Interpreter()
    interp.run(load_program(b"[]"), b"", io.BytesIO())
    assert interp.steps == 1
    assert interp.pc == 2


def test_skipped_loop_body_never_runs():
    # the body would write output and read input
    assert run_program(b"[.,]") == b""


def test_clear_loop():
    interp = Interpreter()
    out = io.BytesIO()
    interp.run(load_program(b"+[-]"), b"", out)
    assert out.getvalue() == b""
    assert interp.tape[0] == 0
    assert interp.steps == 4


def test_tape_grows_transparently():
    interp = Interpreter(tape_size=4)
    out = io.BytesIO()
    interp.run(load_program(b">" * 100 + b"+++++." + b"<" * 100 + b"."), b"", out)
    assert out.getvalue() == b"\x05\x00"
    assert interp.tape[100] == 5
    assert interp.tape.snapshot(0, 100) == bytes(100)
    assert len(interp.tape) == 128
    assert interp.tape.high_water == 100


def test_input_exhausted():
    with pytest.raises(InputExhausted) as excinfo:
        run_program(b",,", b"x")
    assert excinfo.value.pc == 1
    assert excinfo.value.name == 'InputExhausted'


def test_output_before_failure_is_kept():
    out = io.BytesIO()
    with pytest.raises(InputExhausted):
        run_interpreter(b"+.,", b"", out)
    assert out.getvalue() == b"\x01"


def test_pointer_underflow_at_start():
    with pytest.raises(PointerUnderflow) as excinfo:
        run_program(b"<")
    assert excinfo.value.pc == 0


def test_pointer_underflow_after_moving():
    interp = Interpreter()
    with pytest.raises(PointerUnderflow) as excinfo:
        interp.run(load_program(b">+<<"), b"", io.BytesIO())
    assert excinfo.value.pc == 3
    assert interp.ptr == 0
    assert interp.tape[1] == 1


def test_unbalanced_program_never_runs():
    out = io.BytesIO()
    with pytest.raises(UnbalancedBrackets):
        run_interpreter(b"+.]", b"", out)
    assert out.getvalue() == b""


class BrokenPipe(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        raise BrokenPipeError(32, 'Broken pipe')


class ZeroWriter(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        return 0


def test_output_failure_is_io_failure():
    with pytest.raises(IOFailure) as excinfo:
        run_interpreter(b"++.", b"", BrokenPipe())
    assert excinfo.value.pc == 2
    assert isinstance(excinfo.value.__cause__, BrokenPipeError)


def test_short_write_is_io_failure():
    with pytest.raises(IOFailure) as excinfo:
        run_interpreter(b".", b"", ZeroWriter())
    assert 'short write' in str(excinfo.value)


class ListSource:
    def __init__(self, values):
        self.values = list(values)

    def read_byte(self):
        return self.values.pop(0) if self.values else None


class ListSink:
    def __init__(self):
        self.values = []

    def write_byte(self, value):
        self.values.append(value)


def test_custom_source_and_sink():
    sink = ListSink()
    run_interpreter(b",+.,+.", ListSource([1, 41]), sink)
    assert sink.values == [2, 42]


def test_debug_file(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    run_interpreter(b"+[-]", b"", io.BytesIO(), debug_level=2, debug_file=str(debug_file))
    text = debug_file.read_text()
    assert 'loaded 4 source bytes' in text
    assert 'loop [1 .. 3]' in text
    assert 'run ended after 4 steps' in text


def test_debug_file_records_failure(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    with pytest.raises(InputExhausted):
        run_interpreter(b",", b"", io.BytesIO(), debug_level=1, debug_file=str(debug_file))
    assert 'run failed at pc 0' in debug_file.read_text()


def test_no_debug_file_by_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_program(b"+.")
    assert not (tmp_path / 'debug.txt').exists()


def test_invalid_tape_size():
    with pytest.raises(ValueError):
        Interpreter(tape_size=0)


def test_debug_file_records_tape_growth(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    run_interpreter(b">" * 10, b"", io.BytesIO(), tape_size=4, debug_level=2,
                    debug_file=str(debug_file))
    text = debug_file.read_text()
    assert 'tape grown to 8 cells at pc 3' in text
    assert 'tape grown to 16 cells at pc 7' in text
    assert 'tape grew 2 times to 16 cells' in text
