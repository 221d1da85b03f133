"""Command line interface for frequency-domain motion/defocus deblurring."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, image_path, quality_for, run_pipeline
from core.errors import PreconditionError
from core.image_io import load_image, save_image
from core.settings import Settings
from effects.deblur import BLUR_TYPES, MODES, deblur


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-deblur",
        description="Deblur an image by regularised inverse filtering in the frequency domain",
    )
    parser.add_argument("-t", dest="type", choices=BLUR_TYPES, default="defocus", help="Blur type")
    parser.add_argument(
        "-a", dest="amount", type=bounded(float, 0, low_open=True), default=1.0,
        help="Blur length (motion) or disk diameter (defocus) in pixels",
    )
    parser.add_argument(
        "-r", dest="rotation", type=bounded(float, -90, 90), default=0.0,
        help="Motion direction in degrees, counter-clockwise from horizontal",
    )
    parser.add_argument(
        "-n", dest="noise", type=bounded(float, 0), default=0.001,
        help="Noise estimate added to the squared filter response",
    )
    parser.add_argument(
        "-m", dest="mode", choices=MODES, default="fast",
        help="Filter synthesis: per-pixel (slow) or 1-D lookup (fast; defocus needs a square image)",
    )
    parser.add_argument("infile", help="Input image (HDR/EXR/float TIFF keep full precision)")
    parser.add_argument("outfile", type=image_path, help="Output image")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    if args.type == "defocus" and args.mode == "fast" and raster.width != raster.height:
        raise PreconditionError(
            f"fast defocus mode needs a square image, got {raster.width}x{raster.height}; use -m slow"
        )
    logging.info(
        "Deblurring %s (%dx%d): type=%s amount=%.3f rotation=%.1f noise=%g mode=%s",
        args.infile, raster.width, raster.height, args.type, args.amount, args.rotation, args.noise, args.mode,
    )
    pixels = deblur(
        raster.pixels,
        kind=args.type,
        amount=args.amount,
        rotation=args.rotation,
        noise=args.noise,
        mode=args.mode,
        samples=int(settings.get("lookup_samples", 4096)),
    )
    save_image(args.outfile, raster.with_pixels(pixels), quality_for(args.outfile, settings))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
