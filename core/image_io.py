"""Raster loading, encoding and saving."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from .errors import ArgumentError, FilterError, InputError
from .raster import Raster

__all__ = [
    "SUPPORTED_FORMATS",
    "normalize_extension",
    "load_image",
    "encode_image",
    "supports_alpha",
    "write_bytes",
    "save_image",
    "detect_format",
]

logger = logging.getLogger(__name__)

FORMAT_ALIASES = {"jpeg": "jpg", "jpe": "jpg", "tif": "tiff"}
SUPPORTED_FORMATS = {"png", "jpg", "tiff", "bmp", "webp", "hdr", "exr"}
_FLOAT_FORMATS = {"hdr", "exr", "tiff"}
_SIXTEEN_BIT_FORMATS = {"png", "tiff"}
_ALPHA_FORMATS = {"png", "tiff", "webp", "exr"}
_PIL_FORMATS = {"JPEG": "jpg", "PNG": "png", "TIFF": "tiff", "BMP": "bmp", "WEBP": "webp"}


def normalize_extension(name: str | os.PathLike) -> str:
    """Return the canonical lower-case format name for a path or bare extension."""
    text = os.fspath(name)
    ext = os.path.splitext(text)[1] or text
    ext = ext.lstrip(".").lower()
    ext = FORMAT_ALIASES.get(ext, ext)
    if ext not in SUPPORTED_FORMATS:
        raise ArgumentError(f"Unsupported image format: {text!r}")
    return ext


def _depth_of(image: np.ndarray) -> tuple[str, float]:
    if image.dtype == np.uint8:
        return "8", 255.0
    if image.dtype == np.uint16:
        return "16", 65535.0
    if image.dtype in (np.float32, np.float64):
        return "float", 1.0
    raise InputError(f"Unsupported sample type: {image.dtype}")


def load_image(path: str | os.PathLike) -> Raster:
    """Load ``path`` into a :class:`Raster` with RGB float planes and separate alpha."""
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Input file does not exist: {path}")
    data = np.fromfile(str(path), dtype=np.uint8)
    if data.size == 0:
        raise InputError(f"Input file is empty: {path}")
    image = cv2.imdecode(data, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise InputError(f"Unrecognized image format: {path}")

    depth, scale = _depth_of(image)
    if image.ndim == 2:
        image = image[:, :, None]
    channels = image.shape[2]
    alpha = None
    if channels == 1:
        pixels = image
    elif channels == 2:
        pixels, alpha = image[:, :, :1], image[:, :, 1]
    elif channels == 3:
        pixels = image[:, :, ::-1]
    elif channels == 4:
        pixels, alpha = image[:, :, 2::-1], image[:, :, 3]
    else:
        raise InputError(f"Unsupported channel count {channels}: {path}")

    pixels = np.ascontiguousarray(pixels, dtype=np.float32) / np.float32(scale)
    if alpha is not None:
        alpha = np.clip(alpha.astype(np.float32) / np.float32(scale), 0.0, 1.0)
    h, w = pixels.shape[:2]
    logger.debug("loaded %s: %dx%d, %d channel(s), depth=%s", path, w, h, pixels.shape[2], depth)
    return Raster(pixels=pixels, alpha=alpha, depth=depth, path=path)


def _to_samples(plane: np.ndarray, ext: str, depth: str) -> np.ndarray:
    if ext in ("hdr", "exr") or (ext in _FLOAT_FORMATS and depth == "float"):
        return np.maximum(plane, 0.0).astype(np.float32)
    if depth == "16" and ext in _SIXTEEN_BIT_FORMATS:
        return np.round(np.clip(plane, 0.0, 1.0) * 65535.0).astype(np.uint16)
    return np.round(np.clip(plane, 0.0, 1.0) * 255.0).astype(np.uint8)


def encode_image(raster: Raster, ext: str, quality: int | None = None) -> bytes:
    """Encode ``raster`` in the format named by ``ext`` and return the bytes."""
    ext = normalize_extension(ext)
    pixels = raster.pixels
    alpha = raster.alpha if ext in _ALPHA_FORMATS else None
    if pixels.shape[2] == 1 and (ext == "hdr" or alpha is not None):
        pixels = np.repeat(pixels, 3, axis=2)

    if pixels.shape[2] == 3:
        planes = pixels[:, :, ::-1]
    else:
        planes = pixels
    if alpha is not None:
        planes = np.concatenate([planes, alpha[:, :, None]], axis=2)
    samples = _to_samples(np.ascontiguousarray(planes), ext, raster.depth)
    if samples.shape[2] == 1:
        samples = samples[:, :, 0]

    params: list[int] = []
    if quality is not None:
        if ext == "jpg":
            params = [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)]
        elif ext == "webp":
            params = [int(cv2.IMWRITE_WEBP_QUALITY), int(quality)]
    ok, buffer = cv2.imencode("." + ext, samples, params)
    if not ok:
        raise FilterError(f"Failed to encode image as {ext}")
    return buffer.tobytes()


def supports_alpha(ext: str | os.PathLike) -> bool:
    return normalize_extension(ext) in _ALPHA_FORMATS


def write_bytes(path: str | os.PathLike, data: bytes) -> None:
    try:
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        raise FilterError(f"Failed to write {path}: {exc}") from exc
    logger.debug("wrote %s (%d bytes)", path, len(data))


def save_image(path: str | os.PathLike, raster: Raster, quality: int | None = None) -> int:
    """Write ``raster`` to ``path`` (format from the extension); return the byte count."""
    data = encode_image(raster, normalize_extension(path), quality)
    write_bytes(path, data)
    return len(data)


def detect_format(path: str | os.PathLike) -> str | None:
    """Return the canonical format of the file contents, falling back to its extension."""
    try:
        with Image.open(path) as im:
            name = _PIL_FORMATS.get(im.format or "")
        if name:
            return name
    except OSError:
        pass
    try:
        return normalize_extension(path)
    except ArgumentError:
        return None
