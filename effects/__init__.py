"""Numeric kernels behind the command-line raster filters."""
from .cartoon import cartoon, reduce_colors
from .chrome import chrome
from .colorrange import locate_colors
from .deblur import deblur, defocus_filter, motion_filter
from .extend import extend
from .mirror import mirror
from .retinex import retinex
from .sizefit import fit_to_size
from .unrotate import estimate_angle, unrotate
__all__ = [
    "cartoon",
    "reduce_colors",
    "chrome",
    "locate_colors",
    "deblur",
    "defocus_filter",
    "motion_filter",
    "extend",
    "mirror",
    "retinex",
    "fit_to_size",
    "estimate_angle",
    "unrotate",
]
