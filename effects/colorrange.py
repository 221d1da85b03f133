"""Select pixels that fall inside an RGB box."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import cv2
import numpy as np

__all__ = ["MODES", "RangeResult", "channel_range", "locate_colors"]

MODES = ("and", "or")


@dataclass
class RangeResult:
    mask: np.ndarray  # (H, W) uint8, 255 where the pixel is selected
    count: int
    percent: float


def channel_range(values: np.ndarray, begin: int, end: int) -> np.ndarray:
    """0/255 mask of ``values`` (uint8 plane) within the closed range of two bounds."""
    lo, hi = sorted((int(begin), int(end)))
    if lo <= 0 and hi >= 255:
        return np.full(values.shape, 255, dtype=np.uint8)
    if lo == hi:
        return np.where(values == lo, 255, 0).astype(np.uint8)
    _, above = cv2.threshold(values, lo - 1, 255, cv2.THRESH_BINARY)
    _, below = cv2.threshold(values, hi, 255, cv2.THRESH_BINARY_INV)
    return cv2.multiply(above, below, scale=1.0 / 255.0)


def locate_colors(image: np.ndarray, begin: Sequence[int], end: Sequence[int], mode: str = "and") -> RangeResult:
    """Match an RGB ``uint8`` image against the box spanned by ``begin`` and ``end``.

    ``and`` needs every channel in range, ``or`` any channel.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError("locate_colors expects an RGB image")
    if len(begin) != 3 or len(end) != 3:
        raise ValueError("two RGB colors are required")

    masks = [channel_range(np.ascontiguousarray(image[:, :, c]), begin[c], end[c]) for c in range(3)]
    combined = masks[0]
    for mask in masks[1:]:
        if mode == "and":
            combined = cv2.multiply(combined, mask, scale=1.0 / 255.0)
        else:
            combined = cv2.add(combined, mask)
    total = combined.size
    count = int(np.count_nonzero(combined))
    percent = 100.0 * count / total if total else 0.0
    return RangeResult(mask=combined, count=count, percent=percent)
