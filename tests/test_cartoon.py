from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import cv2
import numpy as np
import pytest

from effects.cartoon import cartoon, edge_mask, posterize, reduce_colors, step_lut


def make_scene(size: int = 96) -> np.ndarray:
    rows = np.linspace(0, 255, size, dtype=np.float32)[:, None]
    ramp = np.repeat(rows, size, axis=1)
    image = np.stack([ramp, ramp[::-1], np.full_like(ramp, 128)], axis=-1).astype(np.uint8)
    cv2.rectangle(image, (20, 20), (70, 70), (250, 30, 30), -1)
    return image


def test_posterize_and_step_lut_levels():
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    assert set(np.unique(posterize(values, 2))) == {0, 255}
    assert len(np.unique(posterize(values, 6))) == 6

    lut = step_lut(4)
    assert lut.shape == (256,)
    assert lut[0] == 0 and lut[255] == 255
    assert np.all(np.diff(lut.astype(int)) >= 0)
    assert sorted(set(lut.tolist())) == [0, 85, 170, 255]


@pytest.mark.parametrize("method", [1, 2])
def test_reduce_colors_limits_levels(method: int):
    reduced = reduce_colors(make_scene(), method=method, numcolors=3)
    assert reduced.shape == (96, 96, 3)
    for c in range(3):
        assert len(np.unique(reduced[:, :, c])) <= 3


def test_edge_mask_marks_the_rectangle_outline():
    image = make_scene()
    mask = edge_mask(image, pctedges=10.0, median_radius=0)
    assert mask.dtype == np.uint8
    assert set(np.unique(mask)) <= {0, 255}
    assert mask[20, 45] == 0 or mask[19, 45] == 0 or mask[21, 45] == 0
    assert mask[45, 45] == 255


def test_edge_mask_of_flat_image_is_blank():
    flat = np.full((32, 32, 3), 77, dtype=np.uint8)
    assert np.all(edge_mask(flat, pctedges=50.0) == 255)


def test_flat_areas_never_count_as_edges():
    image = np.full((32, 32, 3), 40, dtype=np.uint8)
    image[:, 16:] = 200
    mask = edge_mask(image, pctedges=100.0)
    assert np.all(mask[:, 15:17] == 0)
    assert np.all(mask[:, :15] == 255)
    assert np.all(mask[:, 17:] == 255)


def test_flat_colour_keeps_its_reduced_colour():
    flat = np.full((24, 24, 3), (200, 120, 40), dtype=np.uint8)
    result = cartoon(flat, pctedges=10.0)
    assert np.array_equal(result, reduce_colors(flat))
    assert result.max() > 0


def test_zero_pctedges_skips_edges():
    image = make_scene()
    expected = reduce_colors(image, method=1, numcolors=6, median_radius=1)
    result = cartoon(image, method=1, numcolors=6, quant_median=1, pctedges=0.0)
    assert np.array_equal(result, expected)


def test_edges_darken_the_result():
    image = make_scene()
    plain = cartoon(image, pctedges=0.0)
    outlined = cartoon(image, pctedges=20.0)
    assert outlined.shape == plain.shape
    assert outlined.astype(int).sum() < plain.astype(int).sum()
    assert np.all(outlined <= plain)


def test_invalid_arguments():
    image = make_scene()
    with pytest.raises(ValueError):
        reduce_colors(image, method=3)
    with pytest.raises(ValueError):
        reduce_colors(image, numcolors=1)
    with pytest.raises(ValueError):
        cartoon(image, pctedges=150.0)
