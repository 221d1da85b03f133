from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

from effects.colorrange import channel_range, locate_colors


def make_palette() -> np.ndarray:
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    image[0, :] = (10, 20, 30)
    image[1, :] = (200, 20, 30)
    image[2, :] = (200, 200, 200)
    image[3, :] = (0, 0, 0)
    return image


def test_channel_range_is_inclusive_and_order_free():
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    mask = channel_range(values, 100, 50)
    assert np.count_nonzero(mask) == 51
    assert mask.reshape(-1)[50] == 255 and mask.reshape(-1)[100] == 255
    assert mask.reshape(-1)[49] == 0 and mask.reshape(-1)[101] == 0


def test_channel_range_edges():
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    assert np.count_nonzero(channel_range(values, 0, 255)) == 256
    assert np.count_nonzero(channel_range(values, 0, 9)) == 10
    assert np.count_nonzero(channel_range(values, 250, 255)) == 6
    assert np.count_nonzero(channel_range(values, 7, 7)) == 1


@pytest.mark.parametrize("mode", ["and", "or"])
def test_full_range_selects_everything(mode: str):
    result = locate_colors(make_palette(), (0, 0, 0), (255, 255, 255), mode)
    assert result.count == 16
    assert result.percent == pytest.approx(100.0)


def test_equal_bounds_match_one_colour():
    result = locate_colors(make_palette(), (10, 20, 30), (10, 20, 30), "and")
    assert result.count == 4
    assert result.percent == pytest.approx(25.0)
    assert np.all(result.mask[0] == 255)
    assert np.all(result.mask[1:] == 0)


def test_or_mode_needs_a_single_channel():
    # only the red channel bound is met by row 1
    result = locate_colors(make_palette(), (150, 250, 250), (255, 255, 255), "or")
    assert result.count == 8
    assert np.all(result.mask[1] == 255)
    assert np.all(result.mask[2] == 255)

    strict = locate_colors(make_palette(), (150, 250, 250), (255, 255, 255), "and")
    assert strict.count == 0


def test_invalid_input():
    with pytest.raises(ValueError):
        locate_colors(make_palette(), (0, 0, 0), (1, 1, 1), "xor")
    with pytest.raises(ValueError):
        locate_colors(make_palette()[:, :, 0], (0, 0, 0), (1, 1, 1))
