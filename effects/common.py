"""Helpers shared by the effect kernels."""

from __future__ import annotations

from typing import Sequence, Tuple

import cv2
import numpy as np

__all__ = [
    "to_gray",
    "to_uint8",
    "from_uint8",
    "gaussian_blur",
    "stretch",
    "color_vector",
    "flood_region",
]

_FLAT_RANGE = 1e-6


def to_gray(image: np.ndarray) -> np.ndarray:
    """Return a ``float32`` (H, W) luminance plane of an RGB, RGBA or grey image."""
    if image.ndim == 2:
        gray = image
    elif image.ndim == 3:
        channels = image.shape[2]
        if channels == 1:
            gray = image[:, :, 0]
        elif channels == 3:
            gray = cv2.cvtColor(image.astype(np.float32), cv2.COLOR_RGB2GRAY)
        elif channels == 4:
            gray = cv2.cvtColor(image.astype(np.float32), cv2.COLOR_RGBA2GRAY)
        else:
            raise ValueError(f"Unsupported channel count: {channels}")
    else:
        raise ValueError("Unsupported image shape")
    return gray.astype(np.float32, copy=False)


def to_uint8(image: np.ndarray) -> np.ndarray:
    return np.round(np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)


def from_uint8(image: np.ndarray) -> np.ndarray:
    return image.astype(np.float32) / np.float32(255.0)


def gaussian_blur(image: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian blur that keeps the input shape (OpenCV drops a trailing 1-channel axis)."""
    if sigma <= 0:
        return image.copy()
    blurred = cv2.GaussianBlur(image, (0, 0), sigma)
    return blurred.reshape(image.shape)


def stretch(values: np.ndarray, fallback: np.ndarray | None = None) -> np.ndarray:
    """Linearly map ``values`` onto [0, 1].

    A flat input has no range to stretch; it is returned unchanged, or
    ``fallback`` is returned in its place when given.
    """
    lo = float(values.min())
    hi = float(values.max())
    if hi - lo < _FLAT_RANGE:
        return (values if fallback is None else fallback).copy()
    return ((values - lo) / (hi - lo)).astype(values.dtype, copy=False)


def color_vector(color: Sequence[float], channels: int) -> np.ndarray:
    """Expand an RGB triple to a pixel value for an image with ``channels`` planes."""
    r, g, b = (float(c) for c in color)
    if channels == 1:
        values = [0.299 * r + 0.587 * g + 0.114 * b]
    elif channels == 2:
        values = [0.299 * r + 0.587 * g + 0.114 * b, 1.0]
    elif channels == 3:
        values = [r, g, b]
    elif channels == 4:
        values = [r, g, b, 1.0]
    else:
        raise ValueError(f"Unsupported channel count: {channels}")
    return np.asarray(values, dtype=np.float32)


def flood_region(match: np.ndarray, seed: Tuple[int, int]) -> np.ndarray:
    """Return the 4-connected region of ``True`` pixels in ``match`` containing ``seed`` (x, y)."""
    h, w = match.shape
    x, y = seed
    if not (0 <= x < w and 0 <= y < h):
        raise ValueError(f"Seed {seed} lies outside a {w}x{h} image")
    if not match[y, x]:
        return np.zeros((h, w), dtype=bool)
    image = match.astype(np.uint8)
    mask = np.zeros((h + 2, w + 2), dtype=np.uint8)
    flags = 4 | cv2.FLOODFILL_MASK_ONLY | (255 << 8)
    cv2.floodFill(image, mask, (int(x), int(y)), 255, loDiff=0, upDiff=0, flags=flags)
    return mask[1:-1, 1:-1] == 255
