"""Command line interface for growing an image with a synthesised border."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, color, image_path, quality_for, run_pipeline, size_pair
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.extend import METHODS, default_border, extend


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-extend",
        description="Enlarge the canvas and fill the new border from the image itself",
    )
    parser.add_argument("-b", dest="border", type=size_pair,
                        help="Border as WxH or N pixels per side (default: 10%% of the smaller dimension)")
    parser.add_argument("-m", dest="method", choices=METHODS, default="edge", help="Border fill method")
    parser.add_argument("-B", dest="blur", type=bounded(float, 0), default=0.0, help="Gaussian blur of the border")
    parser.add_argument("-c", dest="color", type=color, help="Color the border is blended toward")
    parser.add_argument("-p", dest="percent", type=bounded(float, 0, 100), default=0.0,
                        help="Blend percentage toward -c")
    parser.add_argument("-r", dest="rimcolor", type=color, help="Color of a frame around the original")
    parser.add_argument("-t", dest="thickness", type=bounded(int, 0), default=0, help="Frame thickness in pixels")
    parser.add_argument("-S", dest="seed", type=int, help="Random seed for the random method")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    border = args.border or default_border(raster.width, raster.height)
    canvas = extend(
        raster.stacked(),
        border=border,
        method=args.method,
        blur=args.blur,
        color=args.color,
        percent=args.percent,
        rimcolor=args.rimcolor,
        thickness=args.thickness,
        seed=args.seed,
    )
    result = raster.unstacked(canvas)
    logging.info("Extended %dx%d by %dx%d (%s) -> %dx%d",
                 raster.width, raster.height, border[0], border[1], args.method, result.width, result.height)
    save_image(args.outfile, result, quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
