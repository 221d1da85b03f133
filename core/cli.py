"""Argument parsing and process plumbing shared by every tool."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Sequence

from .colors import parse_color
from .errors import ArgumentError, FilterError
from .image_io import normalize_extension
from .settings import Settings

__all__ = [
    "FilterArgumentParser",
    "bounded",
    "color",
    "image_path",
    "size_pair",
    "float_list",
    "configure_logging",
    "quality_for",
    "run_pipeline",
]


class FilterArgumentParser(argparse.ArgumentParser):
    """Parser with ``-h``/``-help``, usage-on-empty and exit status 1 on errors."""

    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("add_help", False)
        super().__init__(*args, **kwargs)
        self.add_argument("-h", "-help", action="help", help="show this help message and exit")

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")

    def parse_args(self, args: Sequence[str] | None = None, namespace=None):  # type: ignore[override]
        if args is None:
            args = sys.argv[1:]
        if not args:
            self.print_help()
            self.exit(0)
        return super().parse_args(args, namespace)


def bounded(kind: Callable, low: float | None = None, high: float | None = None, *, low_open: bool = False):
    """Build an argparse ``type=`` converter that range-checks its value."""

    def convert(text: str):
        try:
            value = kind(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid {kind.__name__} value: {text!r}")
        if low is not None and (value < low or (low_open and value == low)):
            op = ">" if low_open else ">="
            raise argparse.ArgumentTypeError(f"{text} must be {op} {low}")
        if high is not None and value > high:
            raise argparse.ArgumentTypeError(f"{text} must be <= {high}")
        return value

    convert.__name__ = kind.__name__
    return convert


def color(text: str):
    try:
        return parse_color(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def image_path(text: str) -> str:
    """Accept a path whose extension names a supported output format."""
    try:
        normalize_extension(text)
    except ArgumentError as exc:
        raise argparse.ArgumentTypeError(str(exc))
    return text


def size_pair(text: str) -> tuple[int, int]:
    """Parse ``WxH`` or a single ``N`` (used for both) into non-negative ints."""
    parts = text.lower().split("x")
    if len(parts) == 1:
        parts = parts * 2
    try:
        w, h = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {text!r} (expected WxH or N)")
    if w < 0 or h < 0:
        raise argparse.ArgumentTypeError(f"size must be non-negative: {text!r}")
    return w, h


def float_list(count: int, low_open: float | None = None):
    """Build a converter for ``count`` comma-separated floats, each > ``low_open``."""

    def convert(text: str) -> List[float]:
        try:
            values = [float(v) for v in text.split(",")]
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid number list: {text!r}")
        if len(values) != count:
            raise argparse.ArgumentTypeError(f"expected {count} comma-separated values: {text!r}")
        if low_open is not None and any(v <= low_open for v in values):
            raise argparse.ArgumentTypeError(f"values must be > {low_open}: {text!r}")
        return values

    convert.__name__ = "list"
    return convert


def configure_logging(settings: Settings) -> None:
    level = str(settings.get("log_level", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(message)s", force=True)


def quality_for(path: str, settings: Settings) -> int | None:
    """Encoder quality from the settings for lossy output formats."""
    ext = normalize_extension(path)
    if ext == "jpg":
        return int(settings.get("jpeg_quality", 92))
    if ext == "webp":
        return int(settings.get("webp_quality", 90))
    return None


def run_pipeline(body: Callable[[argparse.Namespace, Settings], None], args: argparse.Namespace) -> int:
    """Run a tool body, mapping reported failures to exit status 1."""
    settings = Settings()
    configure_logging(settings)
    try:
        body(args, settings)
    except (FilterError, ValueError) as exc:
        logging.error("error: %s", exc)
        return 1
    return 0
