"""Multiscale retinex detail and colour enhancement."""

from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from .common import gaussian_blur, stretch, to_gray

__all__ = ["COLOR_MODELS", "DEFAULT_SCALES", "reflectance", "multiscale_reflectance", "retinex"]

COLOR_MODELS = ("RGB", "HSL")
DEFAULT_SCALES = (15.0, 80.0, 250.0)
DEFAULT_EPSILON = 1e-4


def reflectance(values: np.ndarray, sigma: float, epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    """``log(values / blur(values) + 1)`` with the blurred divisor floored at ``epsilon``."""
    blurred = gaussian_blur(values, sigma)
    return np.log(values / np.maximum(blurred, epsilon) + 1.0)


def multiscale_reflectance(values: np.ndarray, scales: Sequence[float],
                           epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    """Mean single-scale reflectance over ``scales``, stretched to [0, 1].

    A flat result carries no detail; ``values`` is returned unchanged then.
    """
    if len(scales) == 0:
        raise ValueError("at least one scale is required")
    total = np.zeros(values.shape, dtype=np.float64)
    for sigma in scales:
        total += reflectance(values, sigma, epsilon)
    return stretch(total / len(scales), fallback=values)


def _rgb_to_hls(rgb: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(np.clip(rgb, 0.0, 1.0).astype(np.float32), cv2.COLOR_RGB2HLS)


def _hls_to_rgb(hls: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(hls.astype(np.float32), cv2.COLOR_HLS2RGB)


def retinex(
    image: np.ndarray,
    colormodel: str = "HSL",
    boost: float = 0.0,
    contrast: float = 1.0,
    brightness: float = 1.0,
    saturation: float = 1.0,
    scales: Sequence[float] = DEFAULT_SCALES,
    epsilon: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """Enhance an (H, W, C) float image in [0, 1].

    ``RGB`` stretches every channel on its own, ``HSL`` only the lightness. ``boost``
    (0-100) blends toward a recoloured variant weighted by the per-channel
    ``log(I / grey(I) + 1)`` ratio. ``contrast`` is applied as a gamma,
    ``brightness`` and ``saturation`` as gains on lightness and saturation.
    Single-channel images are treated as ``RGB`` without colour steps.
    """
    colormodel = colormodel.upper()
    if colormodel not in COLOR_MODELS:
        raise ValueError(f"Unknown color model: {colormodel}")
    if not 0 <= boost <= 100:
        raise ValueError("boost must be between 0 and 100")
    if contrast <= 0:
        raise ValueError("contrast must be > 0")

    source = image.astype(np.float64)
    color = source.ndim == 3 and source.shape[2] == 3

    if color and colormodel == "HSL":
        hls = _rgb_to_hls(source).astype(np.float64)
        hls[:, :, 1] = multiscale_reflectance(hls[:, :, 1], scales, epsilon)
        result = _hls_to_rgb(hls).astype(np.float64)
    elif source.ndim == 3:
        planes = [multiscale_reflectance(source[:, :, c], scales, epsilon) for c in range(source.shape[2])]
        result = np.stack(planes, axis=2)
    else:
        result = multiscale_reflectance(source, scales, epsilon)

    if color and boost > 0:
        gray = to_gray(source.astype(np.float32)).astype(np.float64)[:, :, None]
        weight = stretch(np.log(source / np.maximum(gray, epsilon) + 1.0))
        boosted = stretch(result * weight, fallback=result)
        fraction = boost / 100.0
        result = (1.0 - fraction) * result + fraction * boosted

    result = np.clip(result, 0.0, 1.0)
    if contrast != 1.0:
        result = result ** (1.0 / contrast)
    if color and (brightness != 1.0 or saturation != 1.0):
        hls = _rgb_to_hls(result)
        hls[:, :, 1] = np.clip(hls[:, :, 1] * brightness, 0.0, 1.0)
        hls[:, :, 2] = np.clip(hls[:, :, 2] * saturation, 0.0, 1.0)
        result = _hls_to_rgb(hls)
    elif brightness != 1.0:
        result = np.clip(result * brightness, 0.0, 1.0)
    return result.astype(np.float32)
