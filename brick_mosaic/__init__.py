"""
Brick Mosaic Generator
======================

Turn a photo into a buildable mosaic of coloured parts. Each tile is four
1x1 pieces under a 2x2 round dish with a 1x1 round on top; every cell is
matched in CIELAB against a catalog of real colours, restricted to the
colours that exist for its shape, and the matching error is diffused to
the neighbouring cells and tiles.
"""

__version__ = "1.0.0"

from brick_mosaic.catalog import (
    CatalogError,
    ColorCatalog,
    NoEligibleSwatchError,
    ShapeCategory,
    Swatch,
    load_catalog,
    parse_catalog,
)
from brick_mosaic.config import MosaicConfig
from brick_mosaic.driver import (
    RenderResult,
    export_outputs,
    prepare_source,
    render_mosaic,
)
from brick_mosaic.quantizer import (
    ErrorDiffusingQuantizer,
    QuantizedMosaic,
    quantize_image,
)
from brick_mosaic.template import TileTemplate, circle_template

__all__ = [
    "CatalogError",
    "ColorCatalog",
    "ErrorDiffusingQuantizer",
    "MosaicConfig",
    "NoEligibleSwatchError",
    "QuantizedMosaic",
    "RenderResult",
    "ShapeCategory",
    "Swatch",
    "TileTemplate",
    "circle_template",
    "export_outputs",
    "load_catalog",
    "parse_catalog",
    "prepare_source",
    "quantize_image",
    "render_mosaic",
]
