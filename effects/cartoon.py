"""Cartoon stylisation: colour reduction plus an optional dark edge overlay."""

from __future__ import annotations

import cv2
import numpy as np

__all__ = ["METHODS", "posterize", "step_lut", "reduce_colors", "edge_mask", "cartoon"]

METHODS = (1, 2)

# 3x3 directional derivative kernels, unnormalised so 8-bit input gives exact integer responses
_KERNEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float32)
_KERNEL_Y = _KERNEL_X.T.copy()


def _median(image: np.ndarray, radius: int) -> np.ndarray:
    if radius <= 0:
        return image
    return cv2.medianBlur(image, 2 * int(radius) + 1)


def posterize(image: np.ndarray, levels: int) -> np.ndarray:
    """Round every channel of a ``uint8`` image to ``levels`` evenly spaced values."""
    steps = float(levels - 1)
    values = np.round(image.astype(np.float32) / 255.0 * steps) / steps
    return np.round(values * 255.0).astype(np.uint8)


def step_lut(levels: int) -> np.ndarray:
    """Monotonic 256-entry staircase with ``levels`` equal-width steps."""
    idx = np.arange(256)
    bins = np.minimum(idx * levels // 256, levels - 1)
    return np.round(bins * 255.0 / (levels - 1)).astype(np.uint8)


def reduce_colors(image: np.ndarray, method: int = 1, numcolors: int = 6,
                  median_radius: int = 0, sigma: float = 0.0) -> np.ndarray:
    """Colour-reduced (and optionally blurred) copy of an RGB ``uint8`` image."""
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")
    if not 2 <= numcolors <= 256:
        raise ValueError("numcolors must be between 2 and 256")
    source = _median(image, median_radius)
    if method == 1:
        reduced = posterize(source, numcolors)
    else:
        reduced = cv2.LUT(source, step_lut(numcolors))
    if sigma > 0:
        reduced = cv2.GaussianBlur(reduced, (0, 0), sigma)
    return reduced.reshape(image.shape)


def edge_mask(image: np.ndarray, pctedges: float, median_radius: int = 0) -> np.ndarray:
    """``uint8`` mask that is 0 on the strongest ``pctedges`` percent of gradients and 255 elsewhere."""
    if image.ndim == 3 and image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    else:
        gray = image.reshape(image.shape[:2])
    gray = _median(gray, median_radius)
    gx = cv2.filter2D(gray, cv2.CV_32F, _KERNEL_X)
    gy = cv2.filter2D(gray, cv2.CV_32F, _KERNEL_Y)
    magnitude = gx * gx + gy * gy
    strong = magnitude > 0
    if not np.any(strong) or pctedges <= 0:
        return np.full(gray.shape, 255, dtype=np.uint8)
    threshold = np.percentile(magnitude[strong], 100.0 - pctedges)
    edges = strong & (magnitude >= threshold)
    return np.where(edges, 0, 255).astype(np.uint8)


def cartoon(
    image: np.ndarray,
    method: int = 1,
    numcolors: int = 6,
    quant_median: int = 0,
    edge_median: int = 2,
    pctedges: float = 10.0,
    sigma: float = 0.0,
) -> np.ndarray:
    """Cartoon version of an RGB ``uint8`` image.

    With ``pctedges == 0`` the edge pass is skipped and the colour-reduced
    image is returned as is.
    """
    if not 0 <= pctedges <= 100:
        raise ValueError("pctedges must be between 0 and 100")
    reduced = reduce_colors(image, method, numcolors, quant_median, sigma)
    if pctedges == 0:
        return reduced
    mask = edge_mask(image, pctedges, edge_median)
    if reduced.ndim == 3:
        mask = cv2.merge([mask] * reduced.shape[2])
    return cv2.multiply(reduced, mask.reshape(reduced.shape), scale=1.0 / 255.0)
