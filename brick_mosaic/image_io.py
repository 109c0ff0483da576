"""Image loading, tile-aligned resizing and saving."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def compute_tile_aligned_size(
    original_width: int,
    original_height: int,
    tiles_long_side: int,
) -> tuple[int, int]:
    """Compute (w, h) whose long side is a multiple of *tiles_long_side*.

    The long side is trimmed down to the nearest multiple; the short side
    is scaled proportionally (minimum 1).

    Raises:
        ValueError: the long side is shorter than the tile count.
    """
    long_side = max(original_width, original_height)
    aligned = long_side - long_side % tiles_long_side
    if aligned == 0:
        msg = (
            f"Image of {original_width}x{original_height} px is too small "
            f"for {tiles_long_side} tiles"
        )
        raise ValueError(msg)
    if original_width >= original_height:
        w = aligned
        h = max(1, original_height * aligned // original_width)
    else:
        h = aligned
        w = max(1, original_width * aligned // original_height)
    return w, h


def load_image(path: str | Path) -> np.ndarray:
    """Load an image as an (H, W, 3) uint8 RGB array."""
    with Image.open(path) as img:
        return np.array(img.convert("RGB"), dtype=np.uint8)


def resize_to_tiles(image: np.ndarray, tiles_long_side: int) -> np.ndarray:
    """Resize an RGB array so its long side divides into *tiles_long_side*."""
    h, w = image.shape[:2]
    tw, th = compute_tile_aligned_size(w, h, tiles_long_side)
    if (tw, th) == (w, h):
        return image
    img = Image.fromarray(image).resize((tw, th), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def load_and_align(path: str | Path, tiles_long_side: int) -> np.ndarray:
    """Load an image and resize it to a tile-aligned size.

    Returns:
        (H, W, 3) uint8 array.
    """
    return resize_to_tiles(load_image(path), tiles_long_side)


def save_image(array: np.ndarray, path: str | Path) -> None:
    """Save an (H, W, 3) uint8 RGB array; format follows the extension."""
    Image.fromarray(array.astype(np.uint8)).save(path)
