"""Command line interface for selecting pixels inside a color range."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, color, image_path, quality_for, run_pipeline
from core.colors import to_bytes
from core.errors import PreconditionError
from core.image_io import load_image, save_image, supports_alpha
from core.raster import Raster
from core.settings import Settings
from effects.colorrange import MODES, locate_colors
from effects.common import from_uint8, to_uint8


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-colorrange",
        description="Keep only the pixels whose color lies between two colors",
    )
    parser.add_argument("-b", dest="begincolor", type=color, help="First corner of the RGB range")
    parser.add_argument("-e", dest="endcolor", type=color, help="Opposite corner of the RGB range")
    parser.add_argument("-m", dest="mode", choices=MODES, default="and",
                        help="and: every channel must match, or: any channel may match")
    parser.add_argument("-k", dest="maskfile", type=image_path, help="Also write the black/white mask here")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image with unmatched pixels transparent")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    if args.begincolor is None or args.endcolor is None:
        raise PreconditionError("both -b and -e colors are required")
    raster = load_image(args.infile)
    rgb = raster.to_rgb()
    found = locate_colors(to_uint8(rgb.pixels), to_bytes(args.begincolor), to_bytes(args.endcolor), args.mode)
    print(f"matching pixels: {found.count} ({found.percent:.2f}%)")

    mask = from_uint8(found.mask)
    alpha = mask if raster.alpha is None else mask * raster.alpha
    if not supports_alpha(args.outfile):
        logging.warning("%s cannot store transparency; unmatched pixels stay visible", args.outfile)
    save_image(args.outfile, raster.with_pixels(raster.pixels, alpha=alpha), quality_for(args.outfile, settings))
    if args.maskfile:
        save_image(args.maskfile, Raster(pixels=mask[:, :, None]), quality_for(args.maskfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
