from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

from effects.mirror import REGIONS, mirror


def make_ramp(height: int = 6, width: int = 8) -> np.ndarray:
    return np.arange(height * width, dtype=np.float32).reshape(height, width)


def test_left_and_right_halves():
    image = make_ramp()
    left = mirror(image, "left")
    assert left.shape == image.shape
    assert np.array_equal(left[:, :4], image[:, :4])
    assert np.array_equal(left[:, 4:], image[:, 3::-1])

    right = mirror(image, "right")
    assert np.array_equal(right[:, 4:], image[:, 4:])
    assert np.array_equal(right[:, :4], image[:, :3:-1])


def test_top_and_bottom_halves():
    image = make_ramp()
    top = mirror(image, "top")
    assert np.array_equal(top[:3], image[:3])
    assert np.array_equal(top[3:], image[2::-1])

    bottom = mirror(image, "bottom")
    assert np.array_equal(bottom[3:], image[3:])
    assert np.array_equal(bottom[:3], image[:2:-1])


@pytest.mark.parametrize("region", ["topleft", "topright", "bottomleft", "bottomright"])
def test_quadrants_keep_their_corner_and_are_symmetric(region: str):
    image = make_ramp()
    result = mirror(image, region)
    assert result.shape == image.shape
    assert np.array_equal(result, result[:, ::-1])
    assert np.array_equal(result, result[::-1])
    rows = slice(0, 3) if region.startswith("top") else slice(3, 6)
    cols = slice(0, 4) if region.endswith("left") else slice(4, 8)
    assert np.array_equal(result[rows, cols], image[rows, cols])


def test_odd_dimensions_lose_one_pixel():
    image = make_ramp(5, 7)
    assert mirror(image, "left").shape == (5, 6)
    assert mirror(image, "top").shape == (4, 7)
    assert mirror(image, "bottomright").shape == (4, 6)


def test_colour_planes_are_mirrored_together():
    image = np.random.default_rng(42).random((4, 6, 4)).astype(np.float32)
    result = mirror(image, "left")
    assert result.shape == (4, 6, 4)
    assert np.array_equal(result[:, 3:, :], image[:, 2::-1, :])


def test_rejects_unknown_region_and_tiny_images():
    assert len(REGIONS) == 8
    with pytest.raises(ValueError):
        mirror(make_ramp(), "middle")
    with pytest.raises(ValueError):
        mirror(make_ramp(4, 1), "left")
    with pytest.raises(ValueError):
        mirror(make_ramp(1, 4), "topleft")
