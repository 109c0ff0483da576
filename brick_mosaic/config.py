"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass

# Upper bound shared by every slider-backed parameter
SLIDER_MAX = 1000


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for one render pass.

    Attributes:
        tiles_long_side:  Tiles along the longest image side.
        layers:           Build depth; 2- and 3-layer builds use a 2x2 base,
                          which halves the tile count.
        sigma:            Unsharp-mask blur radius, in 1/100 px.
        threshold:        Unsharp-mask low-contrast threshold, in 1/100 Lab units.
        amount:           Unsharp-mask strength, in 1/100.
        luminance_factor: Weight of the L channel in colour matching (500 = 1.0).
        show_mosaic:      Quantize the image; when off only the sharpened
                          source is rendered.
        write_build_file: Emit the LDraw build file.
        write_part_list:  Emit the part-count CSV.
        output_format:    Image format for the exported mosaic.
    """

    # Tiling
    tiles_long_side: int = 96
    layers: int = 3

    # Sharpening
    sigma: int = 200
    threshold: int = 500
    amount: int = 100

    # Matching
    luminance_factor: int = 500

    # Output
    show_mosaic: bool = True
    write_build_file: bool = False
    write_part_list: bool = False
    output_format: str = "jpg"

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp"}
    )

    def __post_init__(self) -> None:
        if self.tiles_long_side < 1:
            msg = f"tiles_long_side must be >= 1, got {self.tiles_long_side}"
            raise ValueError(msg)
        if self.layers not in (1, 2, 3):
            msg = f"layers must be 1, 2 or 3, got {self.layers}"
            raise ValueError(msg)
        if f".{self.output_format.lower()}" not in self.SUPPORTED_EXTENSIONS:
            supported = ", ".join(sorted(e[1:] for e in self.SUPPORTED_EXTENSIONS))
            msg = (
                f"Unsupported output format '{self.output_format}'. "
                f"Available: {supported}"
            )
            raise ValueError(msg)
        for name in ("sigma", "threshold", "amount", "luminance_factor"):
            value = getattr(self, name)
            if not 0 <= value <= SLIDER_MAX:
                msg = f"{name} must be in 0..{SLIDER_MAX}, got {value}"
                raise ValueError(msg)

    @property
    def effective_tiles(self) -> int:
        """Tile count actually laid along the long side."""
        if self.layers in (2, 3):
            return max(1, self.tiles_long_side // 2)
        return self.tiles_long_side

    @property
    def luminance_weight(self) -> float:
        return self.luminance_factor / 500.0

    @property
    def blur_sigma(self) -> float:
        return max(1, self.sigma) / 100.0

    @property
    def blur_threshold(self) -> float:
        return max(1, self.threshold) / 100.0

    @property
    def blur_amount(self) -> float:
        return max(1, self.amount) / 100.0
