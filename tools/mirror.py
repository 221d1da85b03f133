"""Command line interface for half/quadrant mirroring."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, image_path, quality_for, run_pipeline
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.mirror import REGIONS, mirror


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-mirror",
        description="Reflect one half or quadrant of an image into the rest of the frame",
    )
    parser.add_argument("-r", dest="region", choices=REGIONS, default="left", help="Region to keep and mirror")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    result = raster.unstacked(mirror(raster.stacked(), args.region))
    logging.info("Mirrored %s region: %dx%d -> %dx%d",
                 args.region, raster.width, raster.height, result.width, result.height)
    save_image(args.outfile, result, quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
