"""Build-instruction (LDraw) and part-list output."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple

import numpy as np

from brick_mosaic.catalog import SHAPE_COUNT, ColorCatalog, Swatch
from brick_mosaic.template import TileTemplate

logger = logging.getLogger(__name__)

# LDraw units between tile origins (one 2x2 base)
TILE_PITCH = 40


class Placement(NamedTuple):
    """Where one cell's part sits relative to its tile origin."""

    cell: int
    dx: int
    dy: int
    dz: int
    part: str


# Emission order is fixed, independent of the diffusion order.
PLACEMENTS: tuple[Placement, ...] = (
    Placement(5, 0, -16, 10, "6141"),
    Placement(4, 0, -8, 10, "18674"),
    Placement(0, -10, 0, 0, "3024"),
    Placement(1, -10, 0, 20, "3024"),
    Placement(2, 10, 0, 0, "3024"),
    Placement(3, 10, 0, 20, "3024"),
)


def format_tile(row: int, col: int, swatches: list[Swatch]) -> list[str]:
    """LDraw type-1 lines for one tile, one per cell.

    Args:
        row, col: Tile position.
        swatches: Chosen swatch per cell, in cell order.
    """
    lines = []
    for p in PLACEMENTS:
        x = col * TILE_PITCH + p.dx
        z = -row * TILE_PITCH + p.dz
        lines.append(
            f"1 0x2{swatches[p.cell].hex} {x} {p.dy} {z} "
            f"1 0 0 0 1 0 -0 0 1 {p.part}.dat"
        )
    return lines


def build_lines(assignments: np.ndarray, catalog: ColorCatalog) -> Iterable[str]:
    """Yield the build file lines for a whole mosaic in tile raster order."""
    rows, cols = assignments.shape[:2]
    for row in range(rows):
        for col in range(cols):
            swatches = [catalog[int(i)] for i in assignments[row, col]]
            yield from format_tile(row, col, swatches)


def write_build_file(
    path: str | Path, assignments: np.ndarray, catalog: ColorCatalog,
) -> int:
    """Write the LDraw build file; returns the number of parts written."""
    lines = list(build_lines(assignments, catalog))
    with Path(path).open("w", encoding="utf-8", newline="\n") as fh:
        fh.writelines(line + "\n" for line in lines)
    logger.info("Build file: %s (%d parts)", path, len(lines))
    return len(lines)


def count_parts(
    assignments: np.ndarray,
    catalog: ColorCatalog,
    template: TileTemplate,
) -> dict[str, list[int]]:
    """Count parts per swatch name and shape.

    Every catalog name is present, with zeros where unused.  Swatches
    sharing a name share one row.
    """
    counts: dict[str, list[int]] = {s.name: [0] * SHAPE_COUNT for s in catalog}
    flat = assignments.reshape(-1, assignments.shape[-1])
    for cell, shape in enumerate(template.cell_shapes):
        used, n = np.unique(flat[:, cell], return_counts=True)
        for idx, k in zip(used, n, strict=True):
            counts[catalog[int(idx)].name][shape] += int(k)
    return counts


def format_part_list(counts: dict[str, list[int]]) -> str:
    """Render ``name,count0,...,count3`` rows sorted by name."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for name in sorted(counts):
        writer.writerow([name, *counts[name]])
    return buf.getvalue()


def write_part_list(path: str | Path, counts: dict[str, list[int]]) -> None:
    Path(path).write_text(format_part_list(counts), encoding="utf-8")
    logger.info("Part list: %s (%d colours)", path, len(counts))
