"""Colour-space conversion and weighted colour distance."""

from __future__ import annotations

import numpy as np
from skimage.color import lab2rgb, rgb2lab


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3) uint8 RGB → (N, 3) float64 CIELAB."""
    return rgb2lab(rgb.astype(np.float64).reshape(1, -1, 3) / 255.0).reshape(-1, 3)


def image_to_lab(image: np.ndarray) -> np.ndarray:
    """Convert an (H, W, 3) uint8 RGB image to (H, W, 3) float64 CIELAB."""
    return rgb_to_lab(image.reshape(-1, 3)).reshape(image.shape)


def lab_to_image(lab: np.ndarray) -> np.ndarray:
    """Convert an (H, W, 3) CIELAB image back to (H, W, 3) uint8 RGB.

    Out-of-gamut values (sharpening overshoot) are clipped.
    """
    rgb = lab2rgb(lab.astype(np.float64))
    return np.round(np.clip(rgb, 0.0, 1.0) * 255.0).astype(np.uint8)


def weighted_distances(
    target: np.ndarray,
    candidates: np.ndarray,
    luminance_weight: float = 1.0,
) -> np.ndarray:
    """Squared CIELAB distance with a scaled lightness term.

    Args:
        target:     (3,) Lab colour.
        candidates: (N, 3) Lab colours.
        luminance_weight: Factor applied to the squared L difference.

    Returns:
        (N,) float64 distances.
    """
    diff = candidates - np.asarray(target, dtype=np.float64)
    return (
        luminance_weight * diff[:, 0] ** 2
        + diff[:, 1] ** 2
        + diff[:, 2] ** 2
    )
