from __future__ import annotations

import io
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import VMConfig
from .errors import ProgramFileError, RuntimeFault
from .loader import Source, load_program
from .vm import Interpreter, Snapshot

MAX_PROGRAM_SIZE = 1024 * 1024


@dataclass(frozen=True)
class RunOptions:
    config: VMConfig = field(default_factory=VMConfig)
    input_data: Optional[bytes] = None


@dataclass(frozen=True)
class RunResult:
    output: bytes
    fault: Optional[RuntimeFault]
    snapshot: Snapshot
    elapsed: float

    @property
    def ok(self) -> bool:
        return self.fault is None


def run_bytes(source: Source, *, options: Optional[RunOptions] = None) -> RunResult:
    """Load and run a program, collecting its output in memory.

    UnbalancedBrackets propagates since nothing ran; a runtime fault is
    returned in the result alongside whatever output came before it.
    """
    options = options if options is not None else RunOptions()
    program = load_program(source)
    sink = io.BytesIO()
    vm = Interpreter(program, options.config, output=sink, input_source=options.input_data)

    fault: Optional[RuntimeFault] = None
    start = time.perf_counter()
    try:
        vm.run()
    except RuntimeFault as exc:
        fault = exc
    elapsed = time.perf_counter() - start

    return RunResult(output=sink.getvalue(), fault=fault, snapshot=vm.snapshot(), elapsed=elapsed)


def run_string(source: str, *, options: Optional[RunOptions] = None) -> RunResult:
    return run_bytes(source, options=options)


def read_program_file(path: str | Path, *, max_size: int = MAX_PROGRAM_SIZE) -> bytes:
    p = Path(path)
    try:
        with p.open('rb') as f:
            data = f.read(max_size + 1)
    except OSError as exc:
        raise ProgramFileError(message=f"Error while reading {p}: {exc.strerror or exc}", path=str(p)) from exc
    if len(data) > max_size:
        raise ProgramFileError(message=f"Error while reading {p}: file exceeds {max_size} bytes", path=str(p))
    return data


def run_file(path: str | Path, *, options: Optional[RunOptions] = None) -> RunResult:
    return run_bytes(read_program_file(path), options=options)
