from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import cv2
import numpy as np


@dataclass
class Raster:
    """
    In-memory image owned by one pipeline run.
    Colour planes and alpha are kept apart so tonal filters never touch alpha.
    """
    pixels: np.ndarray  # Shape (H, W, C), C in {1, 3}, float32, RGB order, nominal [0, 1].
    alpha: np.ndarray | None = None  # Shape (H, W), float32 [0, 1].
    depth: str = "8"  # "8", "16" or "float"; reused when writing back.
    path: Path | None = None  # Source of the image.

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    def with_pixels(self, pixels: np.ndarray, alpha: np.ndarray | None = None, keep_alpha: bool = True) -> "Raster":
        """Return a new raster with replaced pixels; alpha is kept unless given or dropped."""
        if pixels.ndim == 2:
            pixels = pixels[:, :, None]
        if alpha is None and keep_alpha:
            alpha = self.alpha
        return replace(self, pixels=pixels.astype(np.float32, copy=False), alpha=alpha)

    def stacked(self) -> np.ndarray:
        """Colour planes with alpha appended as the last channel, for geometric filters."""
        if self.alpha is None:
            return self.pixels
        return np.concatenate([self.pixels, self.alpha[:, :, None]], axis=2)

    def unstacked(self, array: np.ndarray) -> "Raster":
        """Inverse of :meth:`stacked` for an array produced by a geometric filter."""
        if array.ndim == 2:
            array = array[:, :, None]
        if self.alpha is None:
            return replace(self, pixels=array.astype(np.float32, copy=False))
        return replace(
            self,
            pixels=array[:, :, :-1].astype(np.float32, copy=False),
            alpha=array[:, :, -1].astype(np.float32, copy=False),
        )

    def to_rgb(self) -> "Raster":
        """Return a three-channel copy (grey is replicated)."""
        if self.channels == 3:
            return self
        return replace(self, pixels=np.repeat(self.pixels, 3, axis=2))

    def resized(self, size: tuple[int, int]) -> "Raster":
        """Resample to ``size`` (width, height) with area interpolation."""
        w, h = size
        stacked = self.stacked()
        resized = cv2.resize(stacked, (w, h), interpolation=cv2.INTER_AREA)
        return self.unstacked(resized)
