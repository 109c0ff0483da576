"""Error-diffusion kernel for the six-cell tile and its rolling buffers.

This follows the Floyd-Steinberg idea of pushing each quantisation error
forward to pixels not yet visited, but the neighbours are cells: other
cells of the same tile, the tile to the right, and the tiles in the row
below.  The weights are fixed constants for this one template, kept here
as a literal table so the propagation itself stays generic.

Buffer addressing: ``row`` 0 is the current-row buffer (column offset 0
being the tile under the cursor), ``row`` 1 the next-row buffer.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from brick_mosaic.template import CELL_COUNT


class Carry(NamedTuple):
    """Share of a residual owed to one destination cell."""

    row: int
    col: int
    cell: int
    weight: float


# (source cell, carries) in processing order
DIFFUSION_KERNEL: tuple[tuple[int, tuple[Carry, ...]], ...] = (
    # cell 4, large round
    (4, (
        Carry(0, 0, 2, 3 / 16),
        Carry(1, 0, 4, 4 / 16),
        Carry(0, 0, 5, 4 / 16),
        Carry(0, 1, 4, 5 / 16),
    )),
    # cell 2, bottom-left quadrant
    (2, (
        Carry(0, 1, 0, 7 / 16),
        Carry(0, 0, 5, 3 / 16),
        Carry(0, 0, 3, 5 / 16),
        Carry(0, 1, 4, 1 / 16),
    )),
    # cell 5, small round
    (5, (
        Carry(0, 0, 1, 3 / 16),
        Carry(0, 0, 3, 5 / 16),
        Carry(0, 1, 0, 7 / 16),
        Carry(0, 1, 1, 1 / 16),
    )),
    # cell 0, top-left quadrant
    (0, (
        Carry(1, -1, 2, 3 / 16),
        Carry(1, 0, 0, 5 / 16),
        Carry(1, 0, 4, 1 / 16),
        Carry(0, 0, 3, 7 / 16),
    )),
    # cell 1, top-right quadrant
    (1, (
        Carry(1, -1, 2, 3 / 16),
        Carry(1, 0, 0, 5 / 16),
        Carry(1, 0, 4, 1 / 16),
        Carry(0, 0, 3, 7 / 16),
    )),
    # cell 3, bottom-right quadrant
    (3, (
        Carry(0, 1, 1, 7 / 16),
        Carry(1, 0, 4, 3 / 16),
        Carry(1, 0, 2, 5 / 16),
        Carry(1, 1, 0, 1 / 16),
    )),
)

PROCESSING_ORDER: tuple[int, ...] = tuple(cell for cell, _ in DIFFUSION_KERNEL)

# Spare columns past the last tile; ``col + 1`` carries land there unread.
SPARE_COLUMNS = 2


class DiffusionState:
    """Error owed to the current row and to the row below.

    Both buffers have shape ``(n_cols + SPARE_COLUMNS, CELL_COUNT, 3)``.
    Carries addressed to column -1 are not stored; their sum is kept in
    :attr:`dropped` so the total error stays accountable.
    """

    def __init__(self, n_cols: int, channels: int = 3) -> None:
        if n_cols < 1:
            msg = f"n_cols must be >= 1, got {n_cols}"
            raise ValueError(msg)
        self.n_cols = n_cols
        self._shape = (n_cols + SPARE_COLUMNS, CELL_COUNT, channels)
        self.current = np.zeros(self._shape, dtype=np.float64)
        self.following = np.zeros(self._shape, dtype=np.float64)
        self.dropped = np.zeros(channels, dtype=np.float64)

    def pending(self, col: int, cell: int) -> np.ndarray:
        """Error accumulated so far for *cell* of the tile at *col*."""
        return self.current[col, cell]

    def deposit(self, col: int, carry: Carry, residual: np.ndarray) -> None:
        """Add ``residual * carry.weight`` to the carry's destination."""
        target = col + carry.col
        share = residual * carry.weight
        if target < 0:
            self.dropped += share
            return
        buf = self.current if carry.row == 0 else self.following
        buf[target, carry.cell] += share

    def spread(
        self, col: int, carries: tuple[Carry, ...], residual: np.ndarray,
    ) -> None:
        for carry in carries:
            self.deposit(col, carry, residual)

    def end_row(self) -> None:
        """Promote the next-row buffer and start a fresh one."""
        self.current = self.following
        self.following = np.zeros(self._shape, dtype=np.float64)
