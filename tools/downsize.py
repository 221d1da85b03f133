"""Command line interface for resizing an image to a target file size."""

from __future__ import annotations

import argparse
import logging
import os
import shutil
from typing import Sequence

from core.cli import FilterArgumentParser, bounded, image_path, quality_for, run_pipeline
from core.errors import ConvergenceError
from core.image_io import detect_format, load_image, normalize_extension, write_bytes
from core.settings import Settings
from effects.sizefit import KILOBYTE, fit_to_size


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = FilterArgumentParser(
        prog="fx-downsize",
        description="Shrink an image until its file size fits the requested number of kilobytes",
    )
    parser.add_argument(
        "-s", dest="size", type=bounded(float, 0, low_open=True), required=True,
        help="Desired output size in kilobytes (1 KB = 1024 bytes)",
    )
    parser.add_argument(
        "-t", dest="tolerance", type=bounded(float, 0), default=5.0,
        help="Allowed overshoot in percent of the desired size",
    )
    parser.add_argument(
        "-c", dest="copy", choices=["yes", "no"], default="no",
        help="When the input already fits: yes copies it (re-encoding if the format differs), no writes nothing",
    )
    parser.add_argument("-q", dest="quality", type=bounded(int, 1, 100), help="JPEG/WebP quality")
    parser.add_argument(
        "-i", dest="iterations", type=bounded(int, 1),
        help="Maximum number of resize passes (default from settings)",
    )
    parser.add_argument("infile", help="Input image")
    parser.add_argument("outfile", type=image_path, help="Output image; its extension selects the format")
    return parser.parse_args(argv)


def process(args: argparse.Namespace, settings: Settings) -> None:
    raster = load_image(args.infile)
    out_ext = normalize_extension(args.outfile)
    target = int(args.size * KILOBYTE)
    in_bytes = os.path.getsize(args.infile)
    same_format = detect_format(args.infile) == out_ext

    if in_bytes <= target:
        if args.copy == "no":
            logging.info("%s is already %d bytes (<= %d); nothing written (use -c yes to copy)",
                         args.infile, in_bytes, target)
            return
        if same_format:
            shutil.copyfile(args.infile, args.outfile)
            logging.info("Copied %s unchanged (%d bytes)", args.infile, in_bytes)
            return
        logging.info("Input fits but is not %s; re-encoding", out_ext)

    quality = args.quality if args.quality is not None else quality_for(args.outfile, settings)
    max_iterations = args.iterations or int(settings.get("max_iterations", 10))
    result = fit_to_size(raster, out_ext, target, args.tolerance, max_iterations, quality)
    if not result.converged and settings.get("strict_convergence", False):
        raise ConvergenceError(
            f"could not reach {target} bytes within {max_iterations} passes (best {len(result.data)} bytes)"
        )
    write_bytes(args.outfile, result.data)
    logging.info("Wrote %s: %dx%d, %d bytes after %d pass(es)",
                 args.outfile, result.size[0], result.size[1], len(result.data), result.iterations)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_pipeline(process, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
