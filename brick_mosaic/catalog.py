"""Colour catalog: buildable colours with per-shape availability.

A catalog file is a comma-separated table with one header line and one
record per colour::

    id,name,rgb,hex,plate_1x1,tile_1x1,round_1x1,round_2x2
    1,White,"242,243,242",#F2F3F2,+,+,+,+

The hex column is informational only; the Lab representation is derived
from the RGB triple.  A shape flag counts as available when its first
non-blank character is ``+``.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

import numpy as np

from brick_mosaic.color_utils import rgb_to_lab, weighted_distances

logger = logging.getLogger(__name__)


class ShapeCategory(IntEnum):
    """Physical part shapes, in catalog column order."""

    PLATE_1X1 = 0
    TILE_1X1 = 1
    ROUND_1X1 = 2
    ROUND_2X2 = 3


SHAPE_COUNT = len(ShapeCategory)


class CatalogError(ValueError):
    """The catalog cannot serve the requested mosaic."""


class NoEligibleSwatchError(CatalogError):
    """No colour in the catalog is available for a shape in use."""

    def __init__(self, shape: int) -> None:
        self.shape = ShapeCategory(shape)
        super().__init__(
            f"No catalog colour is available as {self.shape.name}",
        )


@dataclass(frozen=True)
class Swatch:
    """One catalog entry."""

    id: str
    name: str
    rgb: tuple[int, int, int]
    lab: tuple[float, float, float]
    availability: tuple[bool, bool, bool, bool]

    def is_available(self, shape: int) -> bool:
        return self.availability[shape]

    @property
    def hex(self) -> str:
        r, g, b = self.rgb
        return f"{r:02x}{g:02x}{b:02x}"


class ColorCatalog:
    """Ordered, immutable collection of swatches.

    Lab values and the availability matrix are precomputed at construction
    so that :meth:`nearest_index` is a single vectorised scan.
    """

    def __init__(self, swatches: Sequence[Swatch]) -> None:
        if not swatches:
            msg = "Catalog contains no colours"
            raise CatalogError(msg)
        self._swatches = tuple(swatches)
        self._lab = np.array([s.lab for s in self._swatches], dtype=np.float64)
        self._available = np.array(
            [s.availability for s in self._swatches], dtype=bool,
        )
        self._lab.setflags(write=False)
        self._available.setflags(write=False)

    @classmethod
    def from_records(
        cls,
        records: Iterable[tuple[str, str, tuple[int, int, int], Sequence[bool]]],
    ) -> ColorCatalog:
        """Build a catalog from ``(id, name, rgb, availability)`` records.

        Lab values are computed in one batch with the same conversion used
        for images.
        """
        records = list(records)
        if not records:
            msg = "Catalog contains no colours"
            raise CatalogError(msg)
        rgb = np.array([r[2] for r in records], dtype=np.uint8)
        lab = rgb_to_lab(rgb)
        swatches = [
            Swatch(
                id=ident,
                name=name,
                rgb=tuple(int(c) for c in colour),
                lab=tuple(float(v) for v in lab[i]),
                availability=tuple(bool(f) for f in flags),
            )
            for i, (ident, name, colour, flags) in enumerate(records)
        ]
        return cls(swatches)

    def __len__(self) -> int:
        return len(self._swatches)

    def __getitem__(self, index: int) -> Swatch:
        return self._swatches[index]

    def __iter__(self):
        return iter(self._swatches)

    @property
    def swatches(self) -> tuple[Swatch, ...]:
        return self._swatches

    @property
    def lab(self) -> np.ndarray:
        """(N, 3) read-only Lab matrix, row *i* belongs to swatch *i*."""
        return self._lab

    def eligible(self, shape: int) -> np.ndarray:
        """Boolean mask of swatches available for *shape*."""
        return self._available[:, shape]

    def require_shapes(self, shapes: Iterable[int]) -> None:
        """Raise :class:`NoEligibleSwatchError` for the first unservable shape."""
        for shape in sorted(set(shapes)):
            if not self._available[:, shape].any():
                raise NoEligibleSwatchError(shape)

    def nearest_index(
        self,
        target: np.ndarray,
        shape: int,
        luminance_weight: float = 1.0,
    ) -> int:
        """Index of the closest swatch available for *shape*.

        Unavailable swatches are excluded outright.  Ties go to the
        earliest swatch in catalog order.

        Raises:
            NoEligibleSwatchError: nothing in the catalog exists in *shape*.
        """
        mask = self._available[:, shape]
        if not mask.any():
            raise NoEligibleSwatchError(shape)
        dist = weighted_distances(target, self._lab, luminance_weight)
        dist[~mask] = np.inf
        return int(np.argmin(dist))

    def nearest_match(
        self,
        target: np.ndarray,
        shape: int,
        luminance_weight: float = 1.0,
    ) -> Swatch:
        return self._swatches[self.nearest_index(target, shape, luminance_weight)]


# -- Loading -----------------------------------------------------------


def _parse_record(
    fields: list[str],
) -> tuple[str, str, tuple[int, int, int], tuple[bool, ...]] | None:
    if len(fields) < 4 + SHAPE_COUNT:
        return None
    ident, name, rgb_field = fields[0].strip(), fields[1].strip(), fields[2]
    try:
        rgb = tuple(int(c) for c in rgb_field.split(","))
    except ValueError:
        return None
    if len(rgb) != 3 or any(not 0 <= c <= 255 for c in rgb):
        return None
    flags = [f.strip() for f in fields[4 : 4 + SHAPE_COUNT]]
    if not all(flags):
        return None
    return ident, name, rgb, tuple(f[0] == "+" for f in flags)


def parse_catalog(lines: Iterable[str]) -> ColorCatalog:
    """Parse catalog text (header line included).

    Malformed records are skipped with a warning.
    """
    reader = csv.reader(lines)
    next(reader, None)  # header
    records = []
    for fields in reader:
        if not fields or not "".join(fields).strip():
            continue
        record = _parse_record(fields)
        if record is None:
            logger.warning(
                "Skipping malformed catalog record on line %d: %s",
                reader.line_num, ",".join(fields),
            )
            continue
        records.append(record)
    logger.debug("Parsed %d catalog colours", len(records))
    return ColorCatalog.from_records(records)


def load_catalog(path: str | Path) -> ColorCatalog:
    """Load a catalog file.

    Raises:
        FileNotFoundError: *path* does not exist.
        CatalogError: the file holds no valid colour.
    """
    with Path(path).open(newline="", encoding="utf-8") as fh:
        catalog = parse_catalog(fh)
    logger.info("Catalog: %d colours from %s", len(catalog), path)
    return catalog
