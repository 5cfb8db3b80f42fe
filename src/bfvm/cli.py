from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import BinaryIO, List, Optional

from .api import read_program_file
from .config import (
    CELL_DTYPES,
    DEFAULT_TAPE_SIZE,
    EOF_POLICIES,
    OVERFLOW_POLICIES,
    UNDERFLOW_POLICIES,
    VMConfig,
)
from .errors import BFError, ProgramFileError, RuntimeFault
from .loader import load_program
from .vm import Interpreter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Run a Brainfuck program on a bounded, bounds-checked tape.",
    )
    parser.add_argument("program", help="Path to the program file")
    parser.add_argument("--tape-size", type=int, default=DEFAULT_TAPE_SIZE,
                        help=f"Number of tape cells (default {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--cell-width", type=int, choices=sorted(CELL_DTYPES), default=8,
                        help="Cell width in bits (default 8)")
    parser.add_argument("--overflow", choices=OVERFLOW_POLICIES, default="wrap",
                        help="What '+' does on a full cell (default wrap)")
    parser.add_argument("--underflow", choices=UNDERFLOW_POLICIES, default="trap",
                        help="What '-' does on a zero cell (default trap)")
    parser.add_argument("--eof", choices=EOF_POLICIES, default="zero",
                        help="What ',' does at end of input (default zero)")
    parser.add_argument("--input", metavar="FILE", help="Read ',' input from FILE instead of stdin")
    parser.add_argument("--stats", action="store_true",
                        help="Print timing, step count and the first tape cells to stderr")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _open_input(path: Optional[str]) -> BinaryIO:
    if path is None:
        return sys.stdin.buffer
    try:
        return open(path, 'rb')
    except OSError as exc:
        raise ProgramFileError(message=f"Error while opening input {path}: {exc.strerror or exc}", path=path) from exc


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = VMConfig(
            tape_size=args.tape_size,
            cell_width=args.cell_width,
            overflow=args.overflow,
            underflow=args.underflow,
            eof=args.eof,
        )
        source = read_program_file(args.program)

        start = time.perf_counter()
        program = load_program(source)
        load_time = time.perf_counter() - start

        input_source = _open_input(args.input)
    except BFError as exc:
        print(exc, file=sys.stderr)
        return 1

    stdout = sys.stdout.buffer
    vm = Interpreter(program, config, output=stdout, input_source=input_source)
    start = time.perf_counter()
    fault: Optional[RuntimeFault] = None
    try:
        try:
            vm.run()
        except RuntimeFault as exc:
            fault = exc
        stdout.flush()
    except OSError as exc:
        print(f"Error while writing output: {exc.strerror or exc}", file=sys.stderr)
        return 1
    finally:
        if args.input is not None:
            input_source.close()
    run_time = time.perf_counter() - start

    status = 0
    if fault is not None:
        print(f"\n{fault.kind}: {fault.message}", file=sys.stderr)
        print(fault.describe(), file=sys.stderr)
        status = 1

    if args.stats:
        print("================", file=sys.stderr)
        print(f"Loading took {load_time * 1000:.2f} ms", file=sys.stderr)
        print(f"Execution took {run_time * 1000:.2f} ms ({vm.steps} steps)", file=sys.stderr)
        print(vm.tape.dump(), file=sys.stderr)

    return status


if __name__ == "__main__":
    raise SystemExit(main())
