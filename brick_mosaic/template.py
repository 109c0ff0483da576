"""The six-cell tile stencil.

One tile is four square 1x1 pieces under a 2x2 round dish with a 1x1
round piece on top.  Seen from above this gives six visible cells::

    +---------+---------+
    |  0    .-+-.    1  |
    |     /   4   \\     |
    +----+  ( 5 )  +----+
    |     \\       /     |
    |  2    '-+-'    3  |
    +---------+---------+
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from brick_mosaic.catalog import ShapeCategory

CELL_COUNT = 6

# cell id -> physical shape
CELL_SHAPES: tuple[int, ...] = (
    ShapeCategory.TILE_1X1,
    ShapeCategory.TILE_1X1,
    ShapeCategory.TILE_1X1,
    ShapeCategory.TILE_1X1,
    ShapeCategory.ROUND_2X2,
    ShapeCategory.ROUND_1X1,
)


@dataclass(frozen=True)
class TileTemplate:
    """Square stencil mapping each tile pixel to a cell id."""

    stencil: np.ndarray  # (side, side) uint8, values 0..5
    cell_shapes: tuple[int, ...] = CELL_SHAPES

    @property
    def side(self) -> int:
        return self.stencil.shape[0]

    @property
    def shapes_used(self) -> frozenset[int]:
        return frozenset(self.cell_shapes)

    def shape_of(self, cell: int) -> int:
        return self.cell_shapes[cell]


def _fill_disk(mask: np.ndarray, centre: int, radius: int, value: int) -> None:
    yy, xx = np.ogrid[: mask.shape[0], : mask.shape[1]]
    mask[(yy - centre) ** 2 + (xx - centre) ** 2 <= radius ** 2] = value


def circle_template(tiles_long_side: int, image_long_side: int) -> TileTemplate:
    """Build the stencil for tiles of ``image_long_side // tiles_long_side`` px.

    Quadrants are drawn first, then the large circle, then the small one;
    later draws overwrite earlier ones.

    Raises:
        ValueError: the tiles would be smaller than one pixel.
    """
    side = image_long_side // tiles_long_side
    if side < 1:
        msg = (
            f"{tiles_long_side} tiles do not fit on a long side of "
            f"{image_long_side} px"
        )
        raise ValueError(msg)

    half = side // 2
    mask = np.zeros((side, side), dtype=np.uint8)
    mask[:half, :half] = 0
    mask[:half, half:] = 1
    mask[half:, :half] = 2
    mask[half:, half:] = 3
    _fill_disk(mask, half, side // 2, 4)
    _fill_disk(mask, half, side // 5, 5)
    mask.setflags(write=False)
    return TileTemplate(stencil=mask)
