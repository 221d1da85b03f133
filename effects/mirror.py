"""Reflect one half or quadrant of an image into the rest of the frame."""

from __future__ import annotations

import numpy as np

__all__ = ["REGIONS", "mirror"]

REGIONS = (
    "left",
    "right",
    "top",
    "bottom",
    "topleft",
    "topright",
    "bottomleft",
    "bottomright",
)


def mirror(image: np.ndarray, region: str = "left") -> np.ndarray:
    """Mirror the selected ``region`` of ``image`` around the frame centre.

    The split is at ``floor(dim / 2)``, so an odd dimension loses one pixel.
    Works on any (H, W) or (H, W, C) array; no resampling is involved.
    """
    region = (region or "").lower()
    if region not in REGIONS:
        raise ValueError(f"Unknown region: {region}")
    h, w = image.shape[:2]
    hh, hw = h // 2, w // 2
    quadrant = region not in ("left", "right", "top", "bottom")
    if (quadrant or region in ("left", "right")) and hw == 0:
        raise ValueError("Image is too narrow to mirror")
    if (quadrant or region in ("top", "bottom")) and hh == 0:
        raise ValueError("Image is too short to mirror")

    if region == "left":
        half = image[:, :hw]
        return np.concatenate([half, half[:, ::-1]], axis=1)
    if region == "right":
        half = image[:, w - hw:]
        return np.concatenate([half[:, ::-1], half], axis=1)
    if region == "top":
        half = image[:hh]
        return np.concatenate([half, half[::-1]], axis=0)
    if region == "bottom":
        half = image[h - hh:]
        return np.concatenate([half[::-1], half], axis=0)

    top = region.startswith("top")
    left = region.endswith("left")
    rows = slice(0, hh) if top else slice(h - hh, h)
    cols = slice(0, hw) if left else slice(w - hw, w)
    quad = image[rows, cols]
    flop = quad[:, ::-1]  # horizontal flip
    flip = quad[::-1]  # vertical flip
    turn = quad[::-1, ::-1]  # 180 degree rotation

    # each row pair is ordered so that ``quad`` keeps its own corner
    if top and left:
        grid = [[quad, flop], [flip, turn]]
    elif top:
        grid = [[flop, quad], [turn, flip]]
    elif left:
        grid = [[flip, turn], [quad, flop]]
    else:
        grid = [[turn, flip], [flop, quad]]
    return np.concatenate([np.concatenate(row, axis=1) for row in grid], axis=0)
