"""Thresholded unsharp masking."""

from __future__ import annotations

import numpy as np
from scipy.ndimage import gaussian_filter


def unsharp_mask(
    image: np.ndarray,
    sigma: float,
    threshold: float,
    amount: float,
) -> np.ndarray:
    """Sharpen an (H, W, C) float image.

    ``sharpened = image * (1 + amount) - blurred * amount``, except where
    ``|image - blurred| < threshold``: those low-contrast values are kept
    unchanged so flat areas do not pick up noise.  Channels are blurred
    independently.
    """
    img = image.astype(np.float64, copy=False)
    blurred = gaussian_filter(img, sigma=(sigma, sigma, 0), mode="mirror")
    low_contrast = np.abs(img - blurred) < threshold
    sharpened = img * (1.0 + amount) - blurred * amount
    return np.where(low_contrast, img, sharpened)
