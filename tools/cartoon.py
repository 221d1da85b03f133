"""Command line interface for the cartoon effect."""

from __future__ import annotations

import argparse
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, image_path, quality_for, run_pipeline
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.cartoon import METHODS, cartoon
from effects.common import from_uint8, to_uint8


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-cartoon",
        description="Flatten colours and outline strong edges for a cartoon look",
    )
    parser.add_argument("-m", dest="method", type=int, choices=METHODS, default=1,
                        help="Colour reduction: 1 rounds to levels, 2 uses an equal-width staircase")
    parser.add_argument("-n", dest="numcolors", type=bounded(int, 2, 256), default=6,
                        help="Number of levels per channel")
    parser.add_argument("-q", dest="quant_median", type=bounded(int, 0), default=0,
                        help="Median radius applied before colour reduction")
    parser.add_argument("-g", dest="edge_median", type=bounded(int, 0), default=2,
                        help="Median radius applied before edge detection")
    parser.add_argument("-e", dest="pctedges", type=bounded(float, 0, 100), default=10.0,
                        help="Percent of the strongest gradients drawn as edges (0 disables)")
    parser.add_argument("-s", dest="sigma", type=bounded(float, 0), default=0.0,
                        help="Gaussian blur of the reduced colours")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile).to_rgb()
    result = cartoon(
        to_uint8(raster.pixels),
        method=args.method,
        numcolors=args.numcolors,
        quant_median=args.quant_median,
        edge_median=args.edge_median,
        pctedges=args.pctedges,
        sigma=args.sigma,
    )
    save_image(args.outfile, raster.with_pixels(from_uint8(result)), quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
