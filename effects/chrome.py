"""Chrome relief effect: shaded height field remapped through a cyclic curve."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import cv2
import numpy as np

from .common import color_vector, flood_region, gaussian_blur, stretch, to_gray, to_uint8

__all__ = ["BACKGROUND_MODES", "chrome_lut", "relief_shade", "chrome"]

BACKGROUND_MODES = ("flatten", "transparent")


def chrome_lut(intensity: float, cycles: float) -> np.ndarray:
    """256-entry ``uint8`` curve: ``cycles`` cosine periods blended with an identity ramp.

    The sinusoid is weighted by ``intensity / (intensity + 1)`` and the ramp
    by the remainder.
    """
    if intensity < 0:
        raise ValueError("intensity must be >= 0")
    x = np.linspace(0.0, 1.0, 256)
    weight = intensity / (intensity + 1.0)
    wave = 0.5 - 0.5 * np.cos(2.0 * math.pi * cycles * x)
    curve = weight * wave + (1.0 - weight) * x
    return to_uint8(curve)


def relief_shade(height: np.ndarray, azimuth: float, elevation: float) -> np.ndarray:
    """Lambertian shading of a (H, W) height field in [0, 1].

    ``azimuth`` is counter-clockwise from +x, ``elevation`` above the image
    plane, both in degrees. Heights are scaled to 0..255 units per pixel.
    """
    heights = height.astype(np.float32) * 255.0
    gx = cv2.Sobel(heights, cv2.CV_32F, 1, 0, ksize=3) / 8.0
    gy = cv2.Sobel(heights, cv2.CV_32F, 0, 1, ksize=3) / 8.0
    az = math.radians(azimuth)
    el = math.radians(elevation)
    lx = math.cos(el) * math.cos(az)
    ly = -math.cos(el) * math.sin(az)
    lz = math.sin(el)
    shade = (-gx * lx - gy * ly + lz) / np.sqrt(gx * gx + gy * gy + 1.0)
    return np.clip(shade, 0.0, 1.0)


def _background_region(shaded: np.ndarray, fuzz: float) -> np.ndarray:
    seed = shaded[0, 0]
    match = np.abs(shaded - seed) <= fuzz
    return flood_region(match, (0, 0))


def chrome(
    image: np.ndarray,
    intensity: float = 1.0,
    cycles: float = 2.0,
    sigma: float = 2.0,
    azimuth: float = 135.0,
    elevation: float = 45.0,
    tint: Sequence[float] | None = None,
    background: Sequence[float] | None = None,
    fuzz: float = 0.1,
    mode: str = "flatten",
) -> Tuple[np.ndarray, np.ndarray | None]:
    """Return ``(rgb, alpha)``; ``alpha`` is only set for a transparent background.

    ``fuzz`` is a fraction of full scale used when flood-filling the
    background from the top-left corner of the shaded image.
    """
    if mode not in BACKGROUND_MODES:
        raise ValueError(f"Unknown background mode: {mode}")
    gray = gaussian_blur(to_gray(image), sigma)
    shaded = stretch(relief_shade(gray, azimuth, elevation))
    lut = chrome_lut(intensity, cycles)
    metal = cv2.LUT(to_uint8(shaded), lut).astype(np.float32) / 255.0

    if tint is not None:
        rgb = metal[:, :, None] * color_vector(tint, 3)[None, None, :]
    else:
        rgb = np.repeat(metal[:, :, None], 3, axis=2)

    alpha = None
    if background is not None:
        region = _background_region(shaded, fuzz)
        if mode == "flatten":
            rgb[region] = color_vector(background, 3)
        else:
            alpha = np.where(region, 0.0, 1.0).astype(np.float32)
    return rgb.astype(np.float32), alpha
