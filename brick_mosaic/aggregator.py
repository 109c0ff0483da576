"""Per-tile, per-cell colour averages."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from brick_mosaic.template import CELL_COUNT, TileTemplate


@dataclass
class TileView:
    """One tile of the image with its clipped stencil."""

    row: int
    col: int
    pixels: np.ndarray  # (h, w, 3) view into the image
    stencil: np.ndarray  # (h, w) uint8
    averages: np.ndarray  # (CELL_COUNT, 3)


def grid_shape(image_shape: tuple[int, ...], side: int) -> tuple[int, int]:
    """Number of tile rows and columns, counting clipped border tiles."""
    h, w = image_shape[:2]
    return -(-h // side), -(-w // side)


def tile_origins(
    image_shape: tuple[int, ...], side: int,
) -> Iterator[tuple[int, int, int, int]]:
    """Yield ``(row, col, y0, x0)`` for every tile in raster order."""
    h, w = image_shape[:2]
    for row, y0 in enumerate(range(0, h, side)):
        for col, x0 in enumerate(range(0, w, side)):
            yield row, col, y0, x0


def cell_averages(pixels: np.ndarray, stencil: np.ndarray) -> np.ndarray:
    """Mean colour of each cell.

    Args:
        pixels:  (h, w, 3) float tile.
        stencil: (h, w) cell ids.

    Returns:
        (CELL_COUNT, 3) float64; cells without pixels are zero.
    """
    ids = stencil.ravel()
    counts = np.bincount(ids, minlength=CELL_COUNT)[:CELL_COUNT]
    flat = pixels.reshape(-1, pixels.shape[-1])
    sums = np.stack(
        [
            np.bincount(ids, weights=flat[:, ch], minlength=CELL_COUNT)[:CELL_COUNT]
            for ch in range(flat.shape[1])
        ],
        axis=1,
    )
    return sums / np.maximum(counts, 1)[:, np.newaxis]


def iter_tiles(image: np.ndarray, template: TileTemplate) -> Iterator[TileView]:
    """Walk *image* tile by tile, reusing the same stencil everywhere.

    Tiles on the right and bottom border are clipped to the image and use
    the matching top-left part of the stencil.
    """
    side = template.side
    h, w = image.shape[:2]
    for row, col, y0, x0 in tile_origins(image.shape, side):
        y1, x1 = min(y0 + side, h), min(x0 + side, w)
        pixels = image[y0:y1, x0:x1]
        stencil = template.stencil[: y1 - y0, : x1 - x0]
        yield TileView(row, col, pixels, stencil, cell_averages(pixels, stencil))
