from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import cv2
import numpy as np
import pytest
from PIL import Image


def run_tool(name: str, *args: str, settings: Path | None = None) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["RASTERFX_SETTINGS"] = str(settings) if settings else str(ROOT / "no-such-settings.json")
    cmd = [sys.executable, "-m", f"tools.{name}", *args]
    return subprocess.run(cmd, capture_output=True, text=True, cwd=ROOT, env=env)


def write_gradient(path: Path, width: int = 64, height: int = 48) -> np.ndarray:
    xs = np.linspace(0, 255, width, dtype=np.float32)[None, :]
    ys = np.linspace(0, 255, height, dtype=np.float32)[:, None]
    image = np.stack([np.repeat(xs, height, axis=0), np.repeat(ys, width, axis=1),
                      np.full((height, width), 90, dtype=np.float32)], axis=-1).astype(np.uint8)
    Image.fromarray(image).save(path)
    return image


@pytest.mark.parametrize("tool", ["deblur", "downsize", "mirror", "chrome", "cartoon",
                                  "extend", "retinex", "colorrange", "unrotate"])
def test_help_and_no_arguments_exit_zero(tool: str):
    for args in (("-h",), ("-help",), ()):
        result = run_tool(tool, *args)
        assert result.returncode == 0
        assert "usage:" in result.stdout


def test_bad_option_and_missing_input_exit_one(tmp_path: Path):
    bad = run_tool("mirror", "-r", "middle", "in.png", str(tmp_path / "out.png"))
    assert bad.returncode == 1
    assert "usage:" in bad.stderr

    missing = run_tool("mirror", str(tmp_path / "absent.png"), str(tmp_path / "out.png"))
    assert missing.returncode == 1
    assert "does not exist" in missing.stderr
    assert not (tmp_path / "out.png").exists()

    out_of_range = run_tool("cartoon", "-n", "1", "in.png", str(tmp_path / "out.png"))
    assert out_of_range.returncode == 1


def test_mirror_cli(tmp_path: Path):
    source = tmp_path / "in.png"
    image = write_gradient(source)
    target = tmp_path / "out.png"
    result = run_tool("mirror", "-r", "right", str(source), str(target))
    assert result.returncode == 0, result.stderr
    with Image.open(target) as im:
        out = np.asarray(im)
    assert out.shape == image.shape
    assert np.array_equal(out[:, 32:], image[:, 32:])
    assert np.array_equal(out[:, :32], image[:, 32:][:, ::-1])


def test_deblur_fast_defocus_needs_square(tmp_path: Path):
    source = tmp_path / "in.png"
    write_gradient(source)
    result = run_tool("deblur", "-t", "defocus", "-m", "fast", str(source), str(tmp_path / "out.png"))
    assert result.returncode == 1
    assert "square" in result.stderr

    result = run_tool("deblur", "-t", "motion", "-a", "3", "-r", "30", str(source), str(tmp_path / "out.tif"))
    assert result.returncode == 0, result.stderr
    assert (tmp_path / "out.tif").exists()


def test_downsize_copy_policy(tmp_path: Path):
    source = tmp_path / "in.png"
    write_gradient(source, 16, 16)

    skipped = tmp_path / "skipped.png"
    result = run_tool("downsize", "-s", "100", str(source), str(skipped))
    assert result.returncode == 0, result.stderr
    assert not skipped.exists()

    copied = tmp_path / "copied.png"
    result = run_tool("downsize", "-s", "100", "-c", "yes", str(source), str(copied))
    assert result.returncode == 0, result.stderr
    assert copied.read_bytes() == source.read_bytes()

    converted = tmp_path / "converted.jpg"
    result = run_tool("downsize", "-s", "100", "-c", "yes", str(source), str(converted))
    assert result.returncode == 0, result.stderr
    assert converted.read_bytes()[:2] == b"\xff\xd8"


def test_downsize_shrinks_large_input(tmp_path: Path):
    source = tmp_path / "noise.png"
    rng = np.random.default_rng(42)
    Image.fromarray(rng.integers(0, 256, (128, 128, 3), dtype=np.uint8)).save(source)
    target = tmp_path / "small.png"
    result = run_tool("downsize", "-s", "10", "-t", "5", str(source), str(target))
    assert result.returncode == 0, result.stderr
    assert target.stat().st_size <= 10 * 1024 * 1.05


def test_colorrange_reports_and_writes_mask(tmp_path: Path):
    source = tmp_path / "in.png"
    image = np.zeros((10, 10, 3), dtype=np.uint8)
    image[:5] = (255, 0, 0)
    Image.fromarray(image).save(source)

    missing = run_tool("colorrange", "-b", "red", str(source), str(tmp_path / "out.png"))
    assert missing.returncode == 1

    mask = tmp_path / "mask.png"
    result = run_tool("colorrange", "-b", "#f00000", "-e", "red", "-k", str(mask),
                      str(source), str(tmp_path / "out.png"))
    assert result.returncode == 0, result.stderr
    assert "matching pixels: 50 (50.00%)" in result.stdout
    with Image.open(tmp_path / "out.png") as im:
        assert im.mode == "RGBA"
        alpha = np.asarray(im)[:, :, 3]
    assert np.all(alpha[:5] == 255) and np.all(alpha[5:] == 0)
    with Image.open(mask) as im:
        assert np.asarray(im)[0, 0] == 255


def test_unrotate_prints_angle_without_output(tmp_path: Path):
    canvas = np.zeros((200, 200, 3), dtype=np.uint8)
    canvas[60:140, 40:160] = 255
    matrix = cv2.getRotationMatrix2D((100.0, 100.0), 8.0, 1.0)
    turned = cv2.warpAffine(canvas, matrix, (200, 200), flags=cv2.INTER_NEAREST)
    source = tmp_path / "card.png"
    Image.fromarray(turned).save(source)

    result = run_tool("unrotate", "-c", "northwest", str(source))
    assert result.returncode == 0, result.stderr
    assert abs(float(result.stdout.strip()) - 8.0) < 1.5

    target = tmp_path / "upright.png"
    result = run_tool("unrotate", str(source), str(target))
    assert result.returncode == 0, result.stderr
    with Image.open(target) as im:
        w, h = im.size
    assert abs(w - 120) <= 6 and abs(h - 80) <= 6


@pytest.mark.parametrize("where", ["foo", "3", "1,2,3", "a,b"])
def test_unrotate_rejects_malformed_coordinates_before_reading(tmp_path: Path, where: str):
    result = run_tool("unrotate", "-c", where, str(tmp_path / "absent.png"))
    assert result.returncode == 1
    assert "usage:" in result.stderr
    assert "-c" in result.stderr


@pytest.mark.parametrize("tool, args", [
    ("chrome", ("-b", "black", "-B", "transparent")),
    ("cartoon", ("-m", "2", "-n", "4")),
    ("extend", ("-b", "5x3", "-m", "dither", "-r", "white", "-t", "1")),
    ("retinex", ("-m", "rgb", "-r", "5,10,20")),
])
def test_other_tools_write_output(tmp_path: Path, tool: str, args: tuple):
    source = tmp_path / "in.png"
    write_gradient(source)
    target = tmp_path / "out.png"
    result = run_tool(tool, *args, str(source), str(target))
    assert result.returncode == 0, result.stderr
    with Image.open(target) as im:
        if tool == "extend":
            assert im.size == (74, 54)
        else:
            assert im.size == (64, 48)


def test_settings_file_controls_strict_convergence(tmp_path: Path):
    settings = tmp_path / "settings.json"
    settings.write_text('{"strict_convergence": true, "max_iterations": 1}', encoding="utf-8")
    source = tmp_path / "noise.png"
    rng = np.random.default_rng(7)
    Image.fromarray(rng.integers(0, 256, (64, 64, 3), dtype=np.uint8)).save(source)
    result = run_tool("downsize", "-s", "0.05", "-t", "0", str(source), str(tmp_path / "out.png"),
                      settings=settings)
    assert result.returncode == 1
    assert not (tmp_path / "out.png").exists()
