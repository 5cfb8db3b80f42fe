from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from .errors import ConfigError

DEFAULT_TAPE_SIZE = 30000

CELL_DTYPES: Dict[int, type] = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
}

OVERFLOW_POLICIES = ('wrap', 'trap')
UNDERFLOW_POLICIES = ('trap', 'wrap')
EOF_POLICIES = ('zero', 'keep', 'fault')


@dataclass(frozen=True)
class VMConfig:
    """Construction parameters for an interpreter.

    Defaults follow the classic dialect (30000 cells of 8 bits, `+` wraps)
    except that `-` on a zero cell traps instead of wrapping.
    """

    tape_size: int = DEFAULT_TAPE_SIZE
    cell_width: int = 8
    overflow: str = 'wrap'
    underflow: str = 'trap'
    eof: str = 'zero'

    def __post_init__(self) -> None:
        if not isinstance(self.tape_size, int) or self.tape_size < 1:
            raise ConfigError(f"tape_size must be a positive integer, got {self.tape_size!r}")
        if self.cell_width not in CELL_DTYPES:
            widths = ', '.join(str(w) for w in CELL_DTYPES)
            raise ConfigError(f"cell_width must be one of {widths}, got {self.cell_width!r}")
        if self.overflow not in OVERFLOW_POLICIES:
            raise ConfigError(f"overflow policy must be 'wrap' or 'trap', got {self.overflow!r}")
        if self.underflow not in UNDERFLOW_POLICIES:
            raise ConfigError(f"underflow policy must be 'trap' or 'wrap', got {self.underflow!r}")
        if self.eof not in EOF_POLICIES:
            raise ConfigError(f"eof policy must be 'zero', 'keep' or 'fault', got {self.eof!r}")

    @property
    def dtype(self) -> type:
        return CELL_DTYPES[self.cell_width]

    @property
    def cell_max(self) -> int:
        return (1 << self.cell_width) - 1
