from .api import RunOptions, RunResult, read_program_file, run_bytes, run_file, run_string
from .config import VMConfig
from .errors import (
    BFError,
    ConfigError,
    DataOverflow,
    DataUnderflow,
    EmptyProgram,
    HeadOverflow,
    HeadUnderflow,
    InputExhausted,
    InterpreterSpent,
    ProgramFileError,
    RuntimeFault,
    UnbalancedBrackets,
)
from .loader import NO_JUMP, Program, build_jump_table, load_program
from .tape import Tape
from .vm import Interpreter, Snapshot

__all__ = [
    'Interpreter',
    'Snapshot',
    'Tape',
    'VMConfig',
    'Program',
    'NO_JUMP',
    'build_jump_table',
    'load_program',
    'RunOptions',
    'RunResult',
    'run_bytes',
    'run_string',
    'run_file',
    'read_program_file',
    'BFError',
    'ConfigError',
    'ProgramFileError',
    'InterpreterSpent',
    'UnbalancedBrackets',
    'RuntimeFault',
    'EmptyProgram',
    'HeadOverflow',
    'HeadUnderflow',
    'DataOverflow',
    'DataUnderflow',
    'InputExhausted',
]
