from __future__ import annotations

import numpy as np

from .config import VMConfig
from .errors import DataOverflow, DataUnderflow, HeadOverflow, HeadUnderflow


class Tape:
    """Fixed-length zeroed memory plus the head that addresses it.

    All head movement and cell arithmetic goes through here so the bounds
    and wrap/trap rules live in one place. Faults raised from this class
    carry `head` and `cell`; the interpreter fills in `ip` and `op`.
    """

    def __init__(self, config: VMConfig):
        self.config = config
        self.cells = np.zeros(config.tape_size, dtype=config.dtype)
        self.head = 0
        self._mask = config.cell_max

    def __len__(self) -> int:
        return len(self.cells)

    def read(self) -> int:
        return int(self.cells[self.head])

    def write(self, value: int) -> None:
        self.cells[self.head] = value & self._mask

    def right(self) -> None:
        if self.head >= len(self.cells) - 1:
            raise HeadOverflow(
                message=f"head would move past the last cell ({len(self.cells) - 1})",
                head=self.head,
                cell=self.read(),
            )
        self.head += 1

    def left(self) -> None:
        if self.head == 0:
            raise HeadUnderflow(message="head would move below cell 0", head=self.head, cell=self.read())
        self.head -= 1

    def increment(self) -> None:
        value = self.read()
        if value == self._mask and self.config.overflow == 'trap':
            raise DataOverflow(
                message=f"cell {self.head} is already at its maximum ({self._mask})",
                head=self.head,
                cell=value,
            )
        self.write(value + 1)

    def decrement(self) -> None:
        value = self.read()
        if value == 0 and self.config.underflow == 'trap':
            raise DataUnderflow(message=f"cell {self.head} is already 0", head=self.head, cell=value)
        self.write(value - 1)

    def dump(self, count: int = 64, *, per_row: int = 8) -> str:
        values = [int(v) for v in self.cells[:count]]
        rows = []
        for i in range(0, len(values), per_row):
            rows.append(f"{i:5d}: " + " ".join(str(v) for v in values[i:i + per_row]))
        return "\n".join(rows)
