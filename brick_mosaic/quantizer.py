"""Constrained-palette error-diffusion quantizer."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from brick_mosaic.aggregator import grid_shape, iter_tiles
from brick_mosaic.catalog import ColorCatalog
from brick_mosaic.diffusion import DIFFUSION_KERNEL, DiffusionState
from brick_mosaic.template import CELL_COUNT, TileTemplate

logger = logging.getLogger(__name__)


@dataclass
class QuantizedMosaic:
    """Result of one full pass.

    Attributes:
        image:       (H, W, 3) Lab image, every pixel set to its swatch colour.
        assignments: (rows, cols, CELL_COUNT) catalog indices, cell order.
    """

    image: np.ndarray
    assignments: np.ndarray

    @property
    def tile_count(self) -> int:
        rows, cols = self.assignments.shape[:2]
        return rows * cols


class ErrorDiffusingQuantizer:
    """Quantizes one image pass, tile by tile in raster order.

    The diffusion buffers belong to the instance, so a quantizer serves a
    single pass; create a new one to start over.
    """

    def __init__(
        self,
        catalog: ColorCatalog,
        template: TileTemplate,
        n_cols: int,
        luminance_weight: float = 1.0,
    ) -> None:
        self.catalog = catalog
        self.template = template
        self.n_cols = n_cols
        self.luminance_weight = luminance_weight
        self.state = DiffusionState(n_cols)

    def quantize_tile(
        self, col: int, averages: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Pick a swatch for every cell of the tile at *col*.

        Args:
            col:      Tile column in the current row.
            averages: (CELL_COUNT, 3) Lab cell means.

        Returns:
            ``(indices, residuals)``: (CELL_COUNT,) catalog indices and
            (CELL_COUNT, 3) quantisation errors, both in cell order.

        Raises:
            NoEligibleSwatchError: a cell's shape has no catalog colour.
        """
        indices = np.empty(CELL_COUNT, dtype=np.intp)
        residuals = np.zeros((CELL_COUNT, averages.shape[1]), dtype=np.float64)
        lab = self.catalog.lab
        for cell, carries in DIFFUSION_KERNEL:
            target = averages[cell] + self.state.pending(col, cell)
            idx = self.catalog.nearest_index(
                target, self.template.shape_of(cell), self.luminance_weight,
            )
            residual = target - lab[idx]
            self.state.spread(col, carries, residual)
            indices[cell] = idx
            residuals[cell] = residual
        return indices, residuals

    def end_row(self) -> None:
        self.state.end_row()


def quantize_image(
    image: np.ndarray,
    template: TileTemplate,
    catalog: ColorCatalog,
    luminance_weight: float = 1.0,
) -> QuantizedMosaic:
    """Run one complete quantisation pass over a Lab image.

    The input is not modified; the returned image is a copy in which every
    pixel carries the Lab colour of its cell's swatch.

    Raises:
        NoEligibleSwatchError: see :meth:`ErrorDiffusingQuantizer.quantize_tile`.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        msg = f"Expected an (H, W, 3) image, got shape {image.shape}"
        raise ValueError(msg)

    out = np.array(image, dtype=np.float64, copy=True)
    rows, cols = grid_shape(out.shape, template.side)
    assignments = np.empty((rows, cols, CELL_COUNT), dtype=np.intp)
    quantizer = ErrorDiffusingQuantizer(catalog, template, cols, luminance_weight)
    lab = catalog.lab

    logger.info(
        "Quantizing %dx%d tiles (side %d px, %d colours)",
        cols, rows, template.side, len(catalog),
    )
    t0 = time.perf_counter()
    current_row = 0
    for tile in iter_tiles(out, template):
        if tile.row != current_row:
            quantizer.end_row()
            current_row = tile.row
        indices, _ = quantizer.quantize_tile(tile.col, tile.averages)
        tile.pixels[...] = lab[indices[tile.stencil]]
        assignments[tile.row, tile.col] = indices
    logger.info("Quantization done  (%.2f s)", time.perf_counter() - t0)

    return QuantizedMosaic(image=out, assignments=assignments)
