from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

import numpy as np

from .errors import make_unbalanced_error

logger = logging.getLogger(__name__)

NO_JUMP = -1

OPEN = ord('[')
CLOSE = ord(']')

Source = Union[bytes, bytearray, memoryview, str]


def build_jump_table(program: Union[bytes, bytearray, memoryview]) -> np.ndarray:
    """Match every bracket in `program` with its partner.

    Returns an array of the program's length where each `[`/`]` position
    holds the index of its partner and every other position holds NO_JUMP.
    Raises UnbalancedBrackets on the first `]` with no opener, or on the
    innermost `[` still open at the end. Text must be encoded first
    (see load_program).
    """
    if isinstance(program, str):
        raise TypeError("build_jump_table expects bytes, not str")
    program = bytes(program)
    table = np.full(len(program), NO_JUMP, dtype=np.intp)
    stack: List[int] = []

    for pos, byte in enumerate(program):
        if byte == OPEN:
            stack.append(pos)
        elif byte == CLOSE:
            if not stack:
                raise make_unbalanced_error(source=program, position=pos)
            start = stack.pop()
            table[start] = pos
            table[pos] = start

    if stack:
        raise make_unbalanced_error(source=program, position=stack[-1])

    return table


@dataclass(frozen=True)
class Program:
    code: bytes
    jumps: np.ndarray

    def __len__(self) -> int:
        return len(self.code)

    def target(self, ip: int) -> int:
        dest = int(self.jumps[ip])
        if dest == NO_JUMP:
            raise ValueError(f"no jump target recorded for position {ip}")
        return dest

    def pairs(self) -> Iterator[Tuple[int, int]]:
        for pos in np.flatnonzero(self.jumps != NO_JUMP):
            pos = int(pos)
            if self.code[pos] == OPEN:
                yield pos, int(self.jumps[pos])


def load_program(source: Source, *, encoding: str = 'utf-8') -> Program:
    if isinstance(source, str):
        code = source.encode(encoding)
    else:
        code = bytes(source)

    jumps = build_jump_table(code)
    jumps.flags.writeable = False
    logger.debug("loaded program: %d bytes, %d bracket pairs", len(code), int(np.count_nonzero(jumps != NO_JUMP)) // 2)
    return Program(code=code, jumps=jumps)
