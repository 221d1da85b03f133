"""Command line interface for multiscale retinex enhancement."""

from __future__ import annotations

import argparse
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, float_list, image_path, quality_for, run_pipeline
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.retinex import COLOR_MODELS, DEFAULT_SCALES, retinex


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-retinex",
        description="Even out lighting and bring up detail with multiscale retinex",
    )
    parser.add_argument("-m", dest="colormodel", type=str.upper, choices=COLOR_MODELS, default="HSL",
                        help="Process all RGB channels or only the HSL lightness")
    parser.add_argument("-f", dest="boost", type=bounded(float, 0, 100), default=0.0,
                        help="Colour boost percentage")
    parser.add_argument("-c", dest="contrast", type=bounded(float, 0, low_open=True), default=1.0,
                        help="Contrast gain (applied as gamma)")
    parser.add_argument("-b", dest="brightness", type=bounded(float, 0, low_open=True), default=1.0,
                        help="Brightness gain")
    parser.add_argument("-s", dest="saturation", type=bounded(float, 0), default=1.0, help="Saturation gain")
    parser.add_argument("-r", dest="scales", type=float_list(3, low_open=0), default=list(DEFAULT_SCALES),
                        help="Three comma-separated blur scales (default: 15,80,250)")
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    pixels = retinex(
        raster.pixels,
        colormodel=args.colormodel,
        boost=args.boost,
        contrast=args.contrast,
        brightness=args.brightness,
        saturation=args.saturation,
        scales=args.scales,
        epsilon=float(settings.get("retinex_epsilon", 1e-4)),
    )
    save_image(args.outfile, raster.with_pixels(pixels), quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
