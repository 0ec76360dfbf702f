"""CLI entry point for the brainbyte interpreter.

Usage:
    python -m brainbyte [-v|-vv] LENGTH
    python -m brainbyte [-v...] --file PROGRAM
    python -m brainbyte [-v...] --emit-json PROGRAM
    python -m brainbyte [-v...] --json PROGRAM_JSON_FILE

With LENGTH, the first LENGTH bytes of standard input are the program
and the rest of standard input is the program's input. With --file or
--json the program comes from a file and all of standard input is the
program's input. --emit-json writes the loaded form of a program next to
it as PROGRAM.json and prints its path.

Options:
  -v             Increase debug verbosity (can be repeated)
  --debug-file   Where debug output goes (default: debug.txt)
  --tape-size    Initial number of tape cells (default: 8096)

Exits 0 on success and 1 on a load or runtime error, which is reported
on standard error. Output produced before an error is still flushed.
"""

import argparse
import json
import sys
from pathlib import Path

from .errors import ExecutionError, LoadError
from .interpreter import Interpreter
from .io import ByteSink, ByteSource
from .program_json import program_from_obj, program_to_obj
from .tape import DEFAULT_TAPE_SIZE


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="brainbyte tape interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving debug output')
    parser.add_argument('--tape-size', type=int, default=DEFAULT_TAPE_SIZE, help='initial number of tape cells')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--file', metavar='PROGRAM', help='read the program from a file')
    group.add_argument('--emit-json', metavar='PROGRAM', help='write the loaded form of PROGRAM as JSON')
    group.add_argument('--json', metavar='PROGRAM_JSON', help='run a program written by --emit-json')
    parser.add_argument('length', nargs='?', type=int, help='number of program bytes to read from stdin')
    args = parser.parse_args(argv)

    from_file = args.file or args.emit_json or args.json
    if from_file and args.length is not None:
        parser.error('LENGTH cannot be combined with --file/--emit-json/--json')
    if not from_file and args.length is None:
        parser.error('missing program LENGTH; or use --file/--emit-json/--json')
    if args.length is not None and args.length < 0:
        parser.error('LENGTH must not be negative')
    if args.tape_size < 1:
        parser.error('--tape-size must be positive')

    stdin = ByteSource(sys.stdin.buffer)
    stdout = ByteSink(sys.stdout.buffer)

    if from_file:
        program_file = Path(from_file)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)

    interpreter = Interpreter(tape_size=args.tape_size, debug_level=args.v, debug_file=args.debug_file)
    try:
        if args.json:
            with open(program_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            program = program_from_obj(data)
            interpreter.debug(f"loaded {program!r} from {program_file}")
        elif from_file:
            program = interpreter.load(program_file.read_bytes())
        else:
            # the program and its input share stdin; LENGTH splits them
            source = stdin.read_exact(args.length)
            if len(source) < args.length:
                interpreter.debug(f"stdin ended after {len(source)} of {args.length} program bytes")
            program = interpreter.load(source)
    except (LoadError, ValueError) as e:
        interpreter.close()
        print(f"Load error: {e}", file=sys.stderr)
        sys.exit(1)
    except ExecutionError as e:
        interpreter.close()
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        interpreter.close()
        print(f"Error: cannot read {from_file or 'stdin'}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.emit_json:
        interpreter.close()
        out_path = program_file.with_name(program_file.name + '.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(program), out, indent=2)
        print(str(out_path))
        return

    try:
        try:
            interpreter.run(program, stdin, stdout)
        finally:
            stdout.flush()
    except ExecutionError as e:
        where = f" at instruction {e.pc}" if e.pc is not None else ""
        print(f"Runtime error{where}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
