from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from .config import VMConfig
from .errors import EmptyProgram, InputExhausted, InterpreterSpent, RuntimeFault
from .loader import Program
from .tape import Tape

logger = logging.getLogger(__name__)

InputSource = Union[bytes, bytearray, BinaryIO]


@dataclass(frozen=True)
class Snapshot:
    ip: int
    head: int
    op: Optional[str]
    cell: int
    steps: int


class Interpreter:
    """
    Executes a loaded Program against a fresh tape.

    Execution State:
    - ip: index into the program; len(program) means halted
    - tape: fixed cells plus the head (see Tape)
    - steps: instructions executed so far, comments included

    A run is single-shot. On a fault the state is left exactly as it was
    when the faulting instruction was fetched, so snapshot() describes it.
    """

    def __init__(
        self,
        program: Program,
        config: Optional[VMConfig] = None,
        *,
        output: Optional[BinaryIO] = None,
        input_source: Optional[InputSource] = None,
    ):
        self.program = program
        self.config = config if config is not None else VMConfig()
        self.tape = Tape(self.config)
        self.ip = 0
        self.steps = 0
        self.output = output if output is not None else sys.stdout.buffer
        if isinstance(input_source, (bytes, bytearray)):
            input_source = io.BytesIO(bytes(input_source))
        self.input = input_source
        self._started = False

    @property
    def head(self) -> int:
        return self.tape.head

    @property
    def halted(self) -> bool:
        return self.ip >= len(self.program)

    def current_op(self) -> Optional[str]:
        if self.halted:
            return None
        return chr(self.program.code[self.ip])

    def snapshot(self) -> Snapshot:
        return Snapshot(
            ip=self.ip,
            head=self.tape.head,
            op=self.current_op(),
            cell=self.tape.read(),
            steps=self.steps,
        )

    def run(self) -> None:
        if self._started:
            raise InterpreterSpent(message="interpreter has already run; load the program into a new one")
        self._started = True

        if len(self.program) == 0:
            raise EmptyProgram(message="Code cannot be empty!", ip=0, head=0, op=None, cell=self.tape.read())

        code = self.program.code
        end = len(code)
        try:
            while self.ip < end:
                self._execute(code[self.ip])
                self.steps += 1
        except RuntimeFault as fault:
            fault.ip = self.ip
            fault.op = chr(code[self.ip])
            logger.info("fault %s at %s: %s", fault.kind, fault.describe(), fault.message)
            raise

        logger.debug("halted after %d steps", self.steps)

    # ===== Instruction Semantics =====

    def _execute(self, byte: int) -> None:
        tape = self.tape
        if byte == 62:  # '>'
            tape.right()
        elif byte == 60:  # '<'
            tape.left()
        elif byte == 43:  # '+'
            tape.increment()
        elif byte == 45:  # '-'
            tape.decrement()
        elif byte == 46:  # '.'
            self._emit(tape.read())
        elif byte == 44:  # ','
            self._read_input()
        elif byte == 91:  # '['
            if tape.read() == 0:
                self.ip = self.program.target(self.ip) + 1
                return
        elif byte == 93:  # ']'
            if tape.read() != 0:
                self.ip = self.program.target(self.ip) + 1
                return
        self.ip += 1

    def _emit(self, value: int) -> None:
        if value > 0xFF:
            logger.debug("skipping output of %d at ip %d: does not fit in a byte", value, self.ip)
            return
        self.output.write(bytes((value,)))
        self.output.flush()

    def _read_input(self) -> None:
        data = self.input.read(1) if self.input is not None else b''
        if data:
            self.tape.write(data[0])
            return

        policy = self.config.eof
        if policy == 'zero':
            self.tape.write(0)
        elif policy == 'fault':
            raise InputExhausted(message="no more input to read", head=self.tape.head, cell=self.tape.read())
