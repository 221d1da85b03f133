from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest
from PIL import Image

from core.colors import parse_color, to_bytes
from core.errors import ArgumentError, InputError
from core.image_io import detect_format, encode_image, load_image, normalize_extension, save_image
from core.raster import Raster


def make_raster(alpha: bool = False, depth: str = "8") -> Raster:
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, (12, 16, 3)).astype(np.float32) / 255.0
    plane = np.linspace(0.0, 1.0, 16 * 12, dtype=np.float32).reshape(12, 16) if alpha else None
    return Raster(pixels=pixels, alpha=plane, depth=depth)


def test_normalize_extension():
    assert normalize_extension("photo.JPEG") == "jpg"
    assert normalize_extension("scan.tif") == "tiff"
    assert normalize_extension(".png") == "png"
    assert normalize_extension("webp") == "webp"
    with pytest.raises(ArgumentError):
        normalize_extension("clip.gif")


def test_png_round_trip_keeps_rgb_order(tmp_path: Path):
    raster = make_raster()
    raster.pixels[0, 0] = (1.0, 0.0, 0.0)
    path = tmp_path / "out.png"
    save_image(path, raster)

    with Image.open(path) as im:
        assert im.mode == "RGB"
        assert im.getpixel((0, 0)) == (255, 0, 0)

    loaded = load_image(path)
    assert loaded.depth == "8"
    assert loaded.alpha is None
    assert np.allclose(loaded.pixels, raster.pixels, atol=0.5 / 255)


def test_alpha_and_sixteen_bit_round_trip(tmp_path: Path):
    raster = make_raster(alpha=True, depth="16")
    path = tmp_path / "out.png"
    save_image(path, raster)
    loaded = load_image(path)
    assert loaded.depth == "16"
    assert loaded.alpha is not None
    assert np.allclose(loaded.alpha, raster.alpha, atol=1e-4)
    assert np.allclose(loaded.pixels, raster.pixels, atol=1e-4)


def test_grey_images_stay_single_channel(tmp_path: Path):
    path = tmp_path / "grey.png"
    Image.fromarray(np.full((5, 7), 128, dtype=np.uint8)).save(path)
    loaded = load_image(path)
    assert loaded.channels == 1
    assert loaded.to_rgb().channels == 3
    assert np.allclose(loaded.pixels, 128 / 255)


def test_jpeg_drops_alpha_and_honours_quality():
    raster = make_raster(alpha=True)
    small = encode_image(raster, "jpg", quality=10)
    large = encode_image(raster, "jpg", quality=95)
    assert len(small) < len(large)


def test_unreadable_inputs(tmp_path: Path):
    with pytest.raises(InputError):
        load_image(tmp_path / "missing.png")
    empty = tmp_path / "empty.png"
    empty.write_bytes(b"")
    with pytest.raises(InputError):
        load_image(empty)
    garbage = tmp_path / "garbage.png"
    garbage.write_bytes(b"not an image at all")
    with pytest.raises(InputError):
        load_image(garbage)


def test_detect_format_reads_contents(tmp_path: Path):
    disguised = tmp_path / "really_png.jpg"
    disguised.write_bytes(encode_image(make_raster(), "png"))
    assert detect_format(disguised) == "png"


def test_parse_color():
    assert parse_color("red") == (1.0, 0.0, 0.0)
    assert to_bytes(parse_color("#336699")) == (0x33, 0x66, 0x99)
    assert to_bytes(parse_color("rgb(10, 20, 30)")) == (10, 20, 30)
    with pytest.raises(ValueError):
        parse_color("no-such-colour")
