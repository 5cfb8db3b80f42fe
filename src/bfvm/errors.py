from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple


def _line_col(source: bytes, position: int) -> Tuple[int, int]:
    before = source[:position]
    line = before.count(b'\n') + 1
    line_start = before.rfind(b'\n') + 1
    column = len(before[line_start:].decode('utf-8', errors='replace')) + 1
    return line, column


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"  {'':4s} | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(bracket: str) -> Optional[str]:
    if bracket == ']':
        return 'Remove the stray "]" or add the "[" that should open this loop.'
    if bracket == '[':
        return 'Add the missing "]" that closes this loop.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigError(BFError, ValueError):
    pass


@dataclass
class ProgramFileError(BFError, OSError):
    path: str = ''


@dataclass
class InterpreterSpent(BFError, RuntimeError):
    pass


@dataclass
class UnbalancedBrackets(BFError):
    position: int
    bracket: str
    line: int
    column: int
    context: str


@dataclass
class RuntimeFault(BFError):
    kind: ClassVar[str] = 'RuntimeFault'

    ip: int = 0
    head: int = 0
    op: Optional[str] = None
    cell: Optional[int] = None

    def describe(self) -> str:
        op = '-' if self.op is None else repr(self.op)
        cell = '-' if self.cell is None else str(self.cell)
        return f"ip={self.ip} head={self.head} op={op} cell={cell}"


@dataclass
class EmptyProgram(RuntimeFault):
    kind: ClassVar[str] = 'EmptyProgram'


@dataclass
class HeadOverflow(RuntimeFault):
    kind: ClassVar[str] = 'HeadOverflow'


@dataclass
class HeadUnderflow(RuntimeFault):
    kind: ClassVar[str] = 'HeadUnderflow'


@dataclass
class DataOverflow(RuntimeFault):
    kind: ClassVar[str] = 'DataOverflow'


@dataclass
class DataUnderflow(RuntimeFault):
    kind: ClassVar[str] = 'DataUnderflow'


@dataclass
class InputExhausted(RuntimeFault):
    kind: ClassVar[str] = 'InputExhausted'


def make_unbalanced_error(*, source: bytes, position: int) -> UnbalancedBrackets:
    bracket = chr(source[position])
    line, column = _line_col(source, position)
    lines = source.decode('utf-8', errors='replace').split('\n')
    ctx = _build_context(lines, line, column)
    what = 'closing' if bracket == ']' else 'opening'
    message = f"unmatched {what} bracket '{bracket}' at position {position}"
    hint = _hint_for(bracket)
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnbalancedBrackets(
        message=f"UnbalancedBrackets: {message} (line {line}, column {column})\n{ctx}{hint_block}",
        position=position,
        bracket=bracket,
        line=line,
        column=column,
        context=ctx,
    )
