"""Colour-string parsing."""

from __future__ import annotations

from typing import Tuple

from PIL import ImageColor

RGB = Tuple[float, float, float]


def parse_color(text: str) -> RGB:
    """Parse a colour name or notation (``red``, ``#ff0000``, ``rgb(255,0,0)``) into RGB floats in [0, 1]."""
    try:
        rgb = ImageColor.getrgb(text.strip())
    except ValueError as exc:
        raise ValueError(f"Unknown color: {text!r}") from exc
    return tuple(channel / 255.0 for channel in rgb[:3])  # type: ignore[return-value]


def to_bytes(color: RGB) -> Tuple[int, int, int]:
    """Convert an RGB float triple to 8-bit channel values."""
    return tuple(int(round(min(max(c, 0.0), 1.0) * 255)) for c in color)  # type: ignore[return-value]
