"""Grow the canvas around an image and synthesise the new border."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import cv2
import numpy as np

from .common import color_vector, gaussian_blur

__all__ = ["METHODS", "BAYER_4X4", "default_border", "synthesize_border", "extend"]

METHODS = ("edge", "mirror", "tile", "random", "dither", "magnify", "average")

# Ordered-dither matrix used as a fixed inward offset pattern for ``dither``.
BAYER_4X4 = np.array(
    [[0, 8, 2, 10],
     [12, 4, 14, 6],
     [3, 11, 1, 9],
     [15, 7, 13, 5]],
    dtype=np.int64,
)

_PAD_MODES = {"edge": "edge", "mirror": "symmetric", "tile": "wrap"}


def default_border(width: int, height: int) -> Tuple[int, int]:
    """Border of 10% of the smaller image dimension on every side."""
    size = int(round(0.1 * min(width, height)))
    return size, size


def _planes(image: np.ndarray) -> np.ndarray:
    return image[:, :, None] if image.ndim == 2 else image


def _source_coords(length: int, border: int, total: int) -> np.ndarray:
    """Clamp canvas coordinates back into ``[0, length)``."""
    return np.clip(np.arange(total) - border, 0, length - 1)


def _dither_fill(image: np.ndarray, bw: int, bh: int) -> np.ndarray:
    h, w = image.shape[:2]
    ch, cw = h + 2 * bh, w + 2 * bw
    ys = np.arange(ch)[:, None]
    xs = np.arange(cw)[None, :]
    offset = BAYER_4X4[ys % 4, xs % 4]
    sy = np.broadcast_to(ys - bh, (ch, cw)).copy()
    sx = np.broadcast_to(xs - bw, (ch, cw)).copy()
    # push outside coordinates inwards by the tiled offset, then clamp
    sy = np.where(sy < 0, offset, np.where(sy >= h, h - 1 - offset, sy))
    sx = np.where(sx < 0, offset, np.where(sx >= w, w - 1 - offset, sx))
    return image[np.clip(sy, 0, h - 1), np.clip(sx, 0, w - 1)]


def _random_fill(image: np.ndarray, bw: int, bh: int, seed: int | None) -> np.ndarray:
    h, w = image.shape[:2]
    ch, cw = h + 2 * bh, w + 2 * bw
    rng = np.random.default_rng(seed)
    sy = rng.integers(0, h, size=(ch, cw))
    sx = rng.integers(0, w, size=(ch, cw))
    return image[sy, sx]


def _magnify_fill(image: np.ndarray, bw: int, bh: int) -> np.ndarray:
    h, w = image.shape[:2]
    ch, cw = h + 2 * bh, w + 2 * bw
    scale = max(cw / w, ch / h)
    nw = max(cw, int(math.ceil(w * scale)))
    nh = max(ch, int(math.ceil(h * scale)))
    scaled = cv2.resize(image, (nw, nh), interpolation=cv2.INTER_LINEAR).reshape(nh, nw, image.shape[2])
    y0 = (nh - ch) // 2
    x0 = (nw - cw) // 2
    return scaled[y0:y0 + ch, x0:x0 + cw]


def synthesize_border(image: np.ndarray, border: Tuple[int, int], method: str = "edge",
                      seed: int | None = None) -> np.ndarray:
    """Return the enlarged canvas filled by ``method``; the centre still holds ``image``."""
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")
    planes = _planes(image)
    bw, bh = border
    h, w = planes.shape[:2]
    if method in _PAD_MODES:
        canvas = np.pad(planes, ((bh, bh), (bw, bw), (0, 0)), mode=_PAD_MODES[method])
    elif method == "random":
        canvas = _random_fill(planes, bw, bh, seed)
    elif method == "dither":
        canvas = _dither_fill(planes, bw, bh)
    elif method == "magnify":
        canvas = _magnify_fill(planes, bw, bh)
    else:
        mean = planes.reshape(-1, planes.shape[2]).mean(axis=0)
        canvas = np.broadcast_to(mean, (h + 2 * bh, w + 2 * bw, planes.shape[2]))
    return np.array(canvas, dtype=np.float32)


def extend(
    image: np.ndarray,
    border: Tuple[int, int] | None = None,
    method: str = "edge",
    blur: float = 0.0,
    color: Sequence[float] | None = None,
    percent: float = 0.0,
    rimcolor: Sequence[float] | None = None,
    thickness: int = 0,
    seed: int | None = None,
) -> np.ndarray:
    """Place ``image`` at the centre of a synthesised border.

    The border is blurred by ``blur`` and blended ``percent`` % toward
    ``color``; blur comes first except for the noise-like ``random`` and
    ``dither`` fills, where it comes last. The original pixels are pasted
    back untouched and an optional ``rimcolor`` frame of ``thickness``
    pixels is drawn around them.
    """
    planes = _planes(image).astype(np.float32)
    h, w, channels = planes.shape
    bw, bh = border if border is not None else default_border(w, h)
    if bw < 0 or bh < 0:
        raise ValueError("border must be non-negative")
    if not 0 <= percent <= 100:
        raise ValueError("percent must be between 0 and 100")

    canvas = synthesize_border(planes, (bw, bh), method, seed)
    blur_after = method in ("random", "dither")
    if not blur_after:
        canvas = gaussian_blur(canvas, blur)
    if color is not None and percent > 0:
        fraction = percent / 100.0
        canvas = (1.0 - fraction) * canvas + fraction * color_vector(color, channels)
    if blur_after:
        canvas = gaussian_blur(canvas, blur)

    canvas[bh:bh + h, bw:bw + w] = planes
    if rimcolor is not None and thickness > 0:
        ty = min(thickness, bh)
        tx = min(thickness, bw)
        canvas[bh - ty:bh + h + ty, bw - tx:bw + w + tx] = color_vector(rimcolor, channels)
        canvas[bh:bh + h, bw:bw + w] = planes
    if image.ndim == 2:
        return canvas[:, :, 0]
    return canvas.astype(np.float32)
