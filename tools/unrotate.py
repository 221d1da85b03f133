"""Command line interface for straightening a rotated picture on a plain border."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, color, image_path, quality_for, run_pipeline
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.common import color_vector
from effects.unrotate import estimate_angle, parse_position, resolve_coords, sample_color, unrotate


def position(text: str):
    try:
        return parse_position(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-unrotate",
        description="Measure the rotation of a picture on a plain background, turn it upright and trim it",
    )
    parser.add_argument("-f", dest="fuzz", type=bounded(float, 0, 100), default=10.0,
                        help="Border color match tolerance in percent")
    parser.add_argument("-c", dest="coords", type=position, default="0,0",
                        help="Where to sample the border color: x,y or an anchor such as northwest")
    parser.add_argument("-C", dest="color", type=color, help="Border color (overrides -c)")
    parser.add_argument("-a", dest="angle", type=float, help="Rotation to undo in degrees (skips the estimate)")
    parser.add_argument("-l", dest="left", type=bounded(int, 0), default=0, help="Extra pixels to trim on the left")
    parser.add_argument("-r", dest="right", type=bounded(int, 0), default=0, help="Extra pixels to trim on the right")
    parser.add_argument("-t", dest="top", type=bounded(int, 0), default=0, help="Extra pixels to trim at the top")
    parser.add_argument("-b", dest="bottom", type=bounded(int, 0), default=0,
                        help="Extra pixels to trim at the bottom")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", nargs="?", type=image_path,
                        help="Output image; when omitted only the estimated angle is printed")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    planes = raster.stacked()
    if args.color is not None:
        border = color_vector(args.color, planes.shape[2])
    else:
        border = sample_color(planes, resolve_coords(args.coords, raster.width, raster.height))
    fuzz = args.fuzz / 100.0

    angle = args.angle
    if angle is None:
        angle = estimate_angle(planes, border, fuzz, float(settings.get("angle_correction", 0.0)))
        logging.info("Estimated rotation of %s: %.2f degrees", args.infile, angle)
    if args.outfile is None:
        print(f"{angle:.2f}")
        return

    upright = unrotate(planes, border, fuzz, angle, (args.left, args.right, args.top, args.bottom))
    result = raster.unstacked(upright)
    logging.info("Rotated by %.2f degrees and trimmed to %dx%d", -angle, result.width, result.height)
    save_image(args.outfile, result, quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
