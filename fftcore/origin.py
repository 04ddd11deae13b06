"""
fftcore/origin.py

Spatial-origin conventions and the frequency-domain half-sample correction.

Where sample (0,0) is taken to sit changes the spectrum phase, not its
magnitude:
  - topLeft:       native kernel indexing, nothing to do
  - centerPixel:   integer origin at n//2, realized by a quadrant swap of
                   the spatial field before the forward transform
  - centerBetween: half-integer origin at n/2 - 0.5, the same pre-shift
                   plus a phase ramp applied to the un-shifted spectrum
"""

from enum import Enum
import numpy as np


class CenterConvention(str, Enum):
    TOP_LEFT = "topLeft"
    CENTER_PIXEL = "centerPixel"
    CENTER_BETWEEN = "centerBetween"


def needs_pre_shift(convention) -> bool:
    return CenterConvention(convention) in (CenterConvention.CENTER_PIXEL, CenterConvention.CENTER_BETWEEN)


def needs_half_sample_correction(convention) -> bool:
    return CenterConvention(convention) is CenterConvention.CENTER_BETWEEN


def origin_pixel(convention, size: int) -> float:
    """Coordinate along one axis of length `size` that is treated as 0."""
    convention = CenterConvention(convention)
    if convention is CenterConvention.TOP_LEFT:
        return 0.0
    if convention is CenterConvention.CENTER_PIXEL:
        return float(size // 2)
    return size / 2.0 - 0.5


def half_sample_phase(width: int, height: int) -> np.ndarray:
    """Phase ramp -2*pi*(0.5*u/width + 0.5*v/height) as a (height, width) grid."""
    u = np.arange(width, dtype=np.float64).reshape(1, width)
    v = np.arange(height, dtype=np.float64).reshape(height, 1)
    return -2.0 * np.pi * (0.5 * u / width + 0.5 * v / height)


def apply_half_sample_correction(real: np.ndarray, imag: np.ndarray, width: int, height: int) -> None:
    """
    Multiply every bin (u,v) by exp(-2*pi*i*(0.5*u/width + 0.5*v/height)).

    Must run on the un-shifted spectrum, i.e. after the forward transform
    and before any display shift. u is the column index, v the row index.
    """
    expected = width * height
    if real.shape[0] != expected or imag.shape[0] != expected:
        raise ValueError(f"Array size mismatch: expected {expected} bins.")

    phase = half_sample_phase(width, height).reshape(-1)
    c = np.cos(phase)
    s = np.sin(phase)
    re = real.astype(np.float64)
    im = imag.astype(np.float64)
    real[:] = re * c - im * s
    imag[:] = re * s + im * c
