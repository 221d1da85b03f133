"""Resize an image until its encoded file size fits a byte limit."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from core.image_io import encode_image
from core.raster import Raster

__all__ = ["FitResult", "KILOBYTE", "fit_to_size"]

logger = logging.getLogger(__name__)

KILOBYTE = 1024
DEFAULT_MAX_ITERATIONS = 10


@dataclass
class FitResult:
    """Outcome of :func:`fit_to_size`."""

    data: bytes
    size: tuple[int, int]  # (width, height) of the encoded image
    iterations: int  # resize passes performed; 0 when the re-encoded input already fits
    converged: bool


def fit_to_size(
    raster: Raster,
    ext: str,
    target_bytes: int,
    tolerance: float = 5.0,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    quality: int | None = None,
) -> FitResult:
    """Shrink ``raster`` until its ``ext`` encoding is at most ``target_bytes * (1 + tolerance/100)``.

    The input is encoded in the output format first, because the compression
    ratio depends on the format. Every pass resamples the original by the
    cumulative scale ``prod(sqrt(target / size))``. If the cap is reached the
    first fitting attempt is returned, else the smallest one, with
    ``converged=False``.
    """
    if target_bytes <= 0:
        raise ValueError("target size must be > 0")
    if tolerance < 0:
        raise ValueError("tolerance must be >= 0")
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    limit = target_bytes * (1.0 + tolerance / 100.0)
    w, h = raster.width, raster.height
    data = encode_image(raster, ext, quality)
    logger.info("Input re-encoded as %s: %dx%d, %d bytes (limit %.0f)", ext, w, h, len(data), limit)
    if len(data) <= limit:
        return FitResult(data=data, size=(w, h), iterations=0, converged=True)

    smallest = FitResult(data=data, size=(w, h), iterations=0, converged=False)
    scale = 1.0
    current = (w, h)
    passes = 0
    for iteration in range(1, max_iterations + 1):
        scale *= math.sqrt(target_bytes / len(data))
        size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
        if size == current:
            size = (max(1, size[0] - 1), max(1, size[1] - 1))
            scale = min(size[0] / w, size[1] / h)
        if size == current:
            logger.warning("Cannot shrink below %dx%d", *size)
            break
        current = size
        data = encode_image(raster.resized(size), ext, quality)
        passes = iteration
        logger.info("Pass %d: scale %.4f -> %dx%d, %d bytes", iteration, scale, size[0], size[1], len(data))
        if len(data) <= limit:
            return FitResult(data=data, size=size, iterations=iteration, converged=True)
        if len(data) < len(smallest.data):
            smallest = FitResult(data=data, size=size, iterations=iteration, converged=False)

    logger.warning(
        "Size target of %d bytes not reached after %d pass(es); best attempt is %d bytes",
        target_bytes, passes, len(smallest.data),
    )
    return smallest
