"""One render pass: sharpen, tile, quantize, count, export."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from brick_mosaic.catalog import ColorCatalog
from brick_mosaic.color_utils import image_to_lab, lab_to_image
from brick_mosaic.config import MosaicConfig
from brick_mosaic.export import count_parts, write_build_file, write_part_list
from brick_mosaic.image_io import load_and_align, resize_to_tiles, save_image
from brick_mosaic.quantizer import QuantizedMosaic, quantize_image
from brick_mosaic.sharpen import unsharp_mask
from brick_mosaic.template import TileTemplate, circle_template

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Everything one pass produces."""

    image_lab: np.ndarray
    template: TileTemplate
    mosaic: QuantizedMosaic | None = None
    part_counts: dict[str, list[int]] = field(default_factory=dict)

    @property
    def image_rgb(self) -> np.ndarray:
        return lab_to_image(self.image_lab)


def prepare_source(path: str | Path, cfg: MosaicConfig) -> np.ndarray:
    """Load an image, align it to the tile grid and convert it to Lab."""
    rgb = load_and_align(path, cfg.effective_tiles)
    h, w = rgb.shape[:2]
    logger.info("Source: %s -> %dx%d px", path, w, h)
    return image_to_lab(rgb)


def prepare_array(rgb: np.ndarray, cfg: MosaicConfig) -> np.ndarray:
    """Same as :func:`prepare_source` for an in-memory RGB array."""
    return image_to_lab(resize_to_tiles(rgb, cfg.effective_tiles))


def render_mosaic(
    source_lab: np.ndarray,
    catalog: ColorCatalog,
    cfg: MosaicConfig,
) -> RenderResult:
    """Render the mosaic for *source_lab* under *cfg*.

    The source is never modified; every call starts from a fresh copy, so
    results depend only on (source, catalog, cfg).

    Raises:
        NoEligibleSwatchError: the catalog lacks a colour for a shape in use.
        ValueError: the image is too small for the tile count.
    """
    t0 = time.perf_counter()
    image = unsharp_mask(
        np.array(source_lab, dtype=np.float64, copy=True),
        cfg.blur_sigma, cfg.blur_threshold, cfg.blur_amount,
    )
    template = circle_template(cfg.effective_tiles, max(image.shape[:2]))
    result = RenderResult(image_lab=image, template=template)

    if cfg.show_mosaic:
        catalog.require_shapes(template.shapes_used)
        mosaic = quantize_image(image, template, catalog, cfg.luminance_weight)
        result.image_lab = mosaic.image
        result.mosaic = mosaic
        result.part_counts = count_parts(mosaic.assignments, catalog, template)

    logger.debug("Render pass done  (%.2f s)", time.perf_counter() - t0)
    return result


def export_outputs(
    result: RenderResult,
    catalog: ColorCatalog,
    cfg: MosaicConfig,
    out_name: str | Path,
) -> list[Path]:
    """Write the mosaic image and, as configured, build file and part list.

    Returns:
        Paths written, image first.
    """
    out_name = Path(out_name)
    written = []

    image_path = out_name.with_name(f"{out_name.name}.{cfg.output_format}")
    save_image(result.image_rgb, image_path)
    written.append(image_path)

    if result.mosaic is None:
        return written

    if cfg.write_build_file:
        ldr_path = out_name.with_name(f"{out_name.name}.ldr")
        write_build_file(ldr_path, result.mosaic.assignments, catalog)
        written.append(ldr_path)

    if cfg.write_part_list:
        csv_path = out_name.with_name(f"{out_name.name}.csv")
        write_part_list(csv_path, result.part_counts)
        written.append(csv_path)

    return written
