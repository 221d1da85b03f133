"""Estimate and undo the rotation of a picture lying on a plain border.

The angle comes from two corners of the picture's silhouette: the first
foreground pixel of the leftmost column and of the topmost row of its
bounding box. The result is folded into (-45, 45], so a picture turned
by 45 degrees cannot be told apart from one turned by -45, and a picture
turned by a multiple of 90 needs that extra turn applied by the caller.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple, Union

import cv2
import numpy as np

from .common import flood_region

__all__ = [
    "ANCHORS",
    "parse_position",
    "resolve_coords",
    "sample_color",
    "border_mask",
    "bounding_box",
    "estimate_angle",
    "rotate",
    "trim",
    "unrotate",
]

Box = Tuple[int, int, int, int]  # x0, y0, x1, y1 (inclusive)

# named sampling positions as fractions of (width - 1, height - 1)
ANCHORS = {
    "northwest": (0.0, 0.0),
    "north": (0.5, 0.0),
    "northeast": (1.0, 0.0),
    "west": (0.0, 0.5),
    "center": (0.5, 0.5),
    "east": (1.0, 0.5),
    "southwest": (0.0, 1.0),
    "south": (0.5, 1.0),
    "southeast": (1.0, 1.0),
}


def parse_position(where: str) -> Union[str, Tuple[int, int]]:
    """Check ``"x,y"`` or anchor-name syntax; return the anchor name or the integer pair."""
    text = where.strip().lower()
    if text in ANCHORS:
        return text
    try:
        x, y = (int(v) for v in text.split(","))
    except ValueError:
        raise ValueError(f"Invalid coordinates: {where!r} (expected x,y or one of {', '.join(ANCHORS)})")
    if x < 0 or y < 0:
        raise ValueError(f"Coordinates must be non-negative: {where!r}")
    return x, y


def resolve_coords(where: Union[str, Tuple[int, int]], width: int, height: int) -> Tuple[int, int]:
    """Turn ``"x,y"``, an ``(x, y)`` pair or an anchor name into pixel coordinates inside the image."""
    position = parse_position(where) if isinstance(where, str) else where
    if isinstance(position, str):
        fx, fy = ANCHORS[position]
        return int(round(fx * (width - 1))), int(round(fy * (height - 1)))
    x, y = position
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Coordinates {x},{y} lie outside the {width}x{height} image")
    return x, y


def sample_color(image: np.ndarray, coords: Tuple[int, int]) -> np.ndarray:
    x, y = coords
    return np.array(image[y, x], dtype=np.float32).reshape(-1)


def border_mask(image: np.ndarray, color: Sequence[float], fuzz: float) -> np.ndarray:
    """Boolean mask of everything not reachable from outside through border-coloured pixels.

    A pixel matches the border when its RMS channel difference from
    ``color`` is at most ``fuzz`` (fraction of full scale). The image is
    padded by one pixel of border so the fill can go all the way round.
    """
    planes = image[:, :, None] if image.ndim == 2 else image
    target = np.asarray(color, dtype=np.float32).reshape(1, 1, -1)
    distance = np.sqrt(np.mean((planes.astype(np.float32) - target) ** 2, axis=2))
    match = np.pad(distance <= fuzz, 1, mode="constant", constant_values=True)
    outside = flood_region(match, (0, 0))
    return ~outside[1:-1, 1:-1]


def bounding_box(mask: np.ndarray) -> Box | None:
    """Tight box around ``True`` pixels from row and column projections."""
    rows = np.flatnonzero(mask.any(axis=1))
    cols = np.flatnonzero(mask.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        return None
    return int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1])


def _corner_angle(inside: np.ndarray) -> float:
    box = bounding_box(inside)
    if box is None:
        raise ValueError("No foreground found; check the border color and fuzz value")
    x0, y0, x1, y1 = box
    cropped = inside[y0:y1 + 1, x0:x1 + 1]
    padded = np.pad(~cropped, 1, mode="constant", constant_values=True)
    filled = ~flood_region(padded, (0, 0))[1:-1, 1:-1]

    left_y = int(np.flatnonzero(filled[:, 0])[0])
    top_x = int(np.flatnonzero(filled[0, :])[0])
    if left_y == 0 and top_x == 0:
        return 0.0
    # rows grow downwards: the rise from the left corner to the top corner is +left_y
    angle = math.degrees(math.atan2(left_y, top_x))
    if angle > 45.0:
        angle -= 90.0
    return angle


def estimate_angle(image: np.ndarray, color: Sequence[float], fuzz: float, correction: float = 0.0) -> float:
    """Rotation of the picture in degrees (counter-clockwise positive), in (-45, 45] plus ``correction``."""
    return _corner_angle(border_mask(image, color, fuzz)) + correction


def rotate(image: np.ndarray, angle: float, color: Sequence[float]) -> np.ndarray:
    """Rotate counter-clockwise by ``angle`` degrees on an enlarged canvas filled with ``color``."""
    planes = image[:, :, None] if image.ndim == 2 else image
    h, w, channels = planes.shape
    theta = math.radians(angle)
    cos, sin = abs(math.cos(theta)), abs(math.sin(theta))
    nw = int(math.ceil(w * cos + h * sin))
    nh = int(math.ceil(w * sin + h * cos))
    matrix = cv2.getRotationMatrix2D(((w - 1) / 2.0, (h - 1) / 2.0), angle, 1.0)
    matrix[0, 2] += (nw - w) / 2.0
    matrix[1, 2] += (nh - h) / 2.0
    fill = tuple(float(v) for v in np.asarray(color, dtype=np.float64).reshape(-1))
    if len(fill) != channels or channels > 4:
        raise ValueError(f"fill color needs one value for each of the {channels} channels (at most 4)")
    rotated = cv2.warpAffine(
        planes.astype(np.float32), matrix, (nw, nh),
        flags=cv2.INTER_LINEAR, borderMode=cv2.BORDER_CONSTANT, borderValue=fill,
    )
    return rotated.reshape(nh, nw, channels)


def trim(image: np.ndarray, color: Sequence[float], fuzz: float,
         adjust: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> np.ndarray:
    """Crop to the picture's bounding box, then shave ``adjust`` = (left, right, top, bottom) pixels."""
    box = bounding_box(border_mask(image, color, fuzz))
    if box is None:
        raise ValueError("Nothing left to trim to; check the border color and fuzz value")
    left, right, top, bottom = adjust
    x0, y0, x1, y1 = box
    x0, x1 = x0 + left, x1 - right
    y0, y1 = y0 + top, y1 - bottom
    h, w = image.shape[:2]
    x0, y0 = max(0, x0), max(0, y0)
    x1, y1 = min(w - 1, x1), min(h - 1, y1)
    if x1 < x0 or y1 < y0:
        raise ValueError("Trim adjustments remove the whole image")
    return image[y0:y1 + 1, x0:x1 + 1]


def unrotate(image: np.ndarray, color: Sequence[float], fuzz: float, angle: float,
             adjust: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> np.ndarray:
    """Turn the picture upright by rotating through ``-angle`` and trim the border away."""
    upright = rotate(image, -angle, color)
    return trim(upright, color, fuzz, adjust)
