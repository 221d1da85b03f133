"""Command line interface for the chrome relief effect."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, color, image_path, quality_for, run_pipeline
from core.image_io import load_image, save_image, supports_alpha
from core.settings import Settings
from effects.chrome import BACKGROUND_MODES, chrome


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-chrome",
        description="Render an image as embossed, polished metal",
    )
    parser.add_argument("-i", dest="intensity", type=bounded(float, 0), default=1.0,
                        help="Weight of the cyclic chrome curve against the plain shading")
    parser.add_argument("-c", dest="cycles", type=bounded(float, 1), default=2.0,
                        help="Number of light/dark cycles in the chrome curve")
    parser.add_argument("-s", dest="sigma", type=bounded(float, 0), default=2.0,
                        help="Gaussian smoothing of the height field")
    parser.add_argument("-a", dest="azimuth", type=bounded(float, 0, 360), default=135.0,
                        help="Light direction in degrees counter-clockwise from the +x axis")
    parser.add_argument("-e", dest="elevation", type=bounded(float, 0, 90), default=45.0,
                        help="Light elevation above the image plane in degrees")
    parser.add_argument("-t", dest="tint", type=color, help="Tint color (name, #hex or rgb())")
    parser.add_argument("-b", dest="bgcolor", type=color,
                        help="Background color; enables background replacement from the top-left corner")
    parser.add_argument("-f", dest="fuzz", type=bounded(float, 0, 100), default=10.0,
                        help="Background match tolerance in percent")
    parser.add_argument("-B", dest="bgmode", choices=BACKGROUND_MODES, default="flatten",
                        help="Paint the background with -b or make it transparent")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    rgb, alpha = chrome(
        raster.pixels,
        intensity=args.intensity,
        cycles=args.cycles,
        sigma=args.sigma,
        azimuth=args.azimuth,
        elevation=args.elevation,
        tint=args.tint,
        background=args.bgcolor,
        fuzz=args.fuzz / 100.0,
        mode=args.bgmode,
    )
    if alpha is not None:
        if raster.alpha is not None:
            alpha = alpha * raster.alpha
        if not supports_alpha(args.outfile):
            logging.warning("%s cannot store transparency; the background will be opaque", args.outfile)
    save_image(args.outfile, raster.with_pixels(rgb, alpha=alpha), quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
