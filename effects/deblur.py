"""Frequency-domain deblurring for motion and defocus blur.

The blur is modelled by an analytic frequency response: a directional
sinc for linear motion of length ``amount`` pixels and a jinc
(``2*J1(z)/z``) for a defocus disk of diameter ``amount`` pixels. The
image spectrum is divided by that response with a noise-regularised
(Wiener style) inverse, ``F * H / (H**2 + noise)``.

Filters are returned centred: the zero frequency sits at
``(height // 2, width // 2)``.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from numpy.polynomial import polynomial as P

__all__ = [
    "BLUR_TYPES",
    "MODES",
    "sinc",
    "jinc",
    "motion_filter",
    "defocus_filter",
    "blur_filter",
    "apply_filter",
    "deblur",
]

BLUR_TYPES = ("motion", "defocus")
MODES = ("slow", "fast")

# Rational approximation of the Bessel function J1 (Abramowitz & Stegun 9.4.4
# and 9.4.6). Coefficients are kept verbatim; the two ranges meet at z = 3.
BESSEL_SMALL = (0.5, -0.56249985, 0.21093573, -0.03954289, 0.00443319, -0.00031761, 0.00001109)
BESSEL_LARGE_AMPLITUDE = (0.79788456, 0.00000156, 0.01659667, 0.00017105, -0.00249511, 0.00113653, -0.00020033)
BESSEL_LARGE_PHASE = (-2.35619449, 0.12499612, 0.00005650, -0.00637879, 0.00074348, 0.00079824, -0.00029166)
BESSEL_SPLIT = 3.0

SINC_EPSILON = 1e-12
DEFAULT_LOOKUP_SAMPLES = 4096


def sinc(z: np.ndarray) -> np.ndarray:
    """Return ``sin(z)/z`` with the limit value 1 wherever ``|z|`` is (near) zero."""
    z = np.asarray(z, dtype=np.float64)
    out = np.ones_like(z)
    nonzero = np.abs(z) > SINC_EPSILON
    out[nonzero] = np.sin(z[nonzero]) / z[nonzero]
    return out


def jinc(z: np.ndarray) -> np.ndarray:
    """Return ``2*J1(z)/z`` using the two-range polynomial approximation of J1."""
    z = np.abs(np.asarray(z, dtype=np.float64))
    small = z <= BESSEL_SPLIT

    t = (np.minimum(z, BESSEL_SPLIT) / BESSEL_SPLIT) ** 2
    near = 2.0 * P.polyval(t, BESSEL_SMALL)

    zl = np.maximum(z, BESSEL_SPLIT)
    u = BESSEL_SPLIT / zl
    amplitude = P.polyval(u, BESSEL_LARGE_AMPLITUDE)
    phase = zl + P.polyval(u, BESSEL_LARGE_PHASE)
    far = 2.0 * amplitude * np.cos(phase) / (np.sqrt(zl) * zl)

    return np.where(small, near, far)


def _frequency_grid(shape: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
    """Centred normalised frequencies (cycles per pixel) as broadcastable column/row vectors."""
    h, w = shape
    fy = (np.arange(h) - h // 2) / h
    fx = (np.arange(w) - w // 2) / w
    return fy[:, None], fx[None, :]


def _lookup(profile_fn, coords: np.ndarray, samples: int) -> np.ndarray:
    """Evaluate an even 1-D profile on ``|coords|`` through a sampled table."""
    extent = float(np.abs(coords).max())
    if extent == 0.0:
        return profile_fn(np.zeros(1))[0] * np.ones_like(coords)
    table_x = np.linspace(0.0, extent, samples)
    table_y = profile_fn(table_x)
    return np.interp(np.abs(coords), table_x, table_y)


def motion_filter(shape: Tuple[int, int], amount: float, rotation: float = 0.0,
                  mode: str = "slow", samples: int = DEFAULT_LOOKUP_SAMPLES) -> np.ndarray:
    """Frequency response of a linear motion blur of ``amount`` pixels.

    ``rotation`` is the blur direction in degrees, counter-clockwise from
    the +x axis. ``slow`` evaluates the sinc per pixel; ``fast`` evaluates it
    on a 1-D table indexed by the directional frequency gradient.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    theta = math.radians(rotation)
    fy, fx = _frequency_grid(shape)
    # image rows grow downwards, so the direction is (cos, -sin) in (x, y)
    projection = fx * math.cos(theta) - fy * math.sin(theta)
    z = math.pi * amount * projection
    if mode == "slow":
        return sinc(z)
    return _lookup(sinc, z, samples)


def defocus_filter(shape: Tuple[int, int], amount: float, mode: str = "slow",
                   samples: int = DEFAULT_LOOKUP_SAMPLES) -> np.ndarray:
    """Frequency response of a defocus disk of diameter ``amount`` pixels.

    ``fast`` builds a 1-D radial jinc profile and remaps it through a radial
    gradient; it needs a square shape.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    h, w = shape
    if mode == "slow":
        fy, fx = _frequency_grid(shape)
        rho = np.sqrt(fx ** 2 + fy ** 2)
        return jinc(math.pi * amount * rho)

    if h != w:
        raise ValueError(f"Fast defocus filter needs a square image, got {w}x{h}")
    y, x = np.ogrid[:h, :w]
    radius = np.hypot(x - w // 2, y - h // 2)
    return _lookup(lambda r: jinc(math.pi * amount * r / w), radius, samples)


def blur_filter(shape: Tuple[int, int], kind: str, amount: float, rotation: float = 0.0,
                mode: str = "slow", samples: int = DEFAULT_LOOKUP_SAMPLES) -> np.ndarray:
    if kind == "motion":
        return motion_filter(shape, amount, rotation, mode, samples)
    if kind == "defocus":
        return defocus_filter(shape, amount, mode, samples)
    raise ValueError(f"Unknown blur type: {kind}")


def _even_pad(image: np.ndarray) -> np.ndarray:
    h, w = image.shape[:2]
    pad = ((0, h % 2), (0, w % 2)) + ((0, 0),) * (image.ndim - 2)
    if h % 2 == 0 and w % 2 == 0:
        return image
    return np.pad(image, pad, mode="edge")


def _transfer(response: np.ndarray) -> np.ndarray:
    """Uncentre a response and make it Hermitian so real planes stay real.

    On even sizes the Nyquist row and column have no mirrored partner on
    the centred grid; averaging with the point reflection fixes that and
    leaves every other frequency unchanged.
    """
    transfer = np.fft.ifftshift(response)
    mirrored = np.roll(transfer[::-1, ::-1], 1, axis=(0, 1))
    return 0.5 * (transfer + mirrored)


def apply_filter(image: np.ndarray, response: np.ndarray) -> np.ndarray:
    """Multiply every plane's spectrum by a centred ``response`` (synthesises a blur)."""
    transfer = _transfer(response)
    planes = image[:, :, None] if image.ndim == 2 else image
    out = np.empty(planes.shape, dtype=np.float64)
    for c in range(planes.shape[2]):
        spectrum = np.fft.fft2(planes[:, :, c])
        out[:, :, c] = np.real(np.fft.ifft2(spectrum * transfer))
    return out.reshape(image.shape)


def deblur(image: np.ndarray, kind: str = "defocus", amount: float = 1.0, rotation: float = 0.0,
           noise: float = 0.001, mode: str = "fast", samples: int = DEFAULT_LOOKUP_SAMPLES) -> np.ndarray:
    """Return the deblurred colour planes of ``image`` (H, W) or (H, W, C).

    Each dimension is padded to even length, the response ``H`` is
    synthesised for the padded size, and the real and imaginary parts of
    each plane's spectrum are scaled by ``H / (H**2 + noise)`` before the
    inverse transform. The result is cropped back to the input size.
    """
    if amount <= 0:
        raise ValueError("amount must be > 0")
    if noise < 0:
        raise ValueError("noise must be >= 0")
    h, w = image.shape[:2]
    padded = _even_pad(np.asarray(image, dtype=np.float64))
    ph, pw = padded.shape[:2]
    response = blur_filter((ph, pw), kind, amount, rotation, mode, samples)
    transfer = _transfer(response)
    divisor = transfer ** 2 + noise
    gain = np.divide(transfer, divisor, out=np.zeros_like(transfer), where=divisor != 0)

    planes = padded[:, :, None] if padded.ndim == 2 else padded
    out = np.empty(planes.shape, dtype=np.float64)
    for c in range(planes.shape[2]):
        spectrum = np.fft.fft2(planes[:, :, c])
        restored = (spectrum.real * gain) + 1j * (spectrum.imag * gain)
        out[:, :, c] = np.real(np.fft.ifft2(restored))
    out = out[:h, :w]
    if image.ndim == 2:
        out = out[:, :, 0]
    return out.astype(np.float32)
