"""
visuals/colormap.py

Map a complex spectrum (flat real/imag arrays) to displayable pixels.

APIs:
- magnitude_to_gray(real, imag, width, height, scale='linear', normalize='max', is_dark=True)
    -> (uint8 (H,W) image, MagnitudeStats)
- phase_to_rgba(real, imag, width, height, null_rgb=(128,128,128))
    -> uint8 (H,W,4) image
- magnitude_key / phase_key / magnitude_legend: legend strips and text

Phase colours: positive phase -> red, negative -> blue, intensity |phi|/pi.
Alpha fades linearly from 1 at |phi| = pi/2 to 0 at |phi| = pi.
Bins with exactly zero magnitude are painted null_rgb.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

_EPS = 1e-12


@dataclass(frozen=True)
class MagnitudeStats:
    max_value: float   # max of display-space values (mag or log1p(mag))
    scale: str
    normalize: str
    n: int             # width of the image


def _complex_parts(real, imag, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    re = np.asarray(real, dtype=np.float64).reshape(height, width)
    im = np.asarray(imag, dtype=np.float64).reshape(height, width)
    return re, im


def magnitude_values(real, imag, width: int, height: int, scale: str = "linear") -> np.ndarray:
    """Display-space magnitude: |F| or log1p(|F|)."""
    if scale not in ("linear", "log"):
        raise ValueError(f"Unknown magnitude scale '{scale}'. Choose 'linear' or 'log'.")
    re, im = _complex_parts(real, imag, width, height)
    mag = np.hypot(re, im)
    return np.log1p(mag) if scale == "log" else mag


def magnitude_to_gray(
    real,
    imag,
    width: int,
    height: int,
    scale: str = "linear",
    normalize: str = "max",
    is_dark: bool = True,
):
    """
    Grayscale magnitude image.

    normalize='max' divides by the largest value (an all-zero field maps to
    0); normalize='none' clips values to [0, 1] as they are. In the light
    theme the result is inverted so strong bins are dark.
    """
    if normalize not in ("max", "none"):
        raise ValueError(f"Unknown normalization '{normalize}'. Choose 'max' or 'none'.")
    vals = magnitude_values(real, imag, width, height, scale)
    max_v = float(vals.max()) if vals.size else 0.0

    if normalize == "max":
        if max_v <= _EPS:
            t = np.zeros_like(vals)
        else:
            t = np.clip(vals / max_v, 0.0, 1.0)
    else:
        t = np.clip(vals, 0.0, 1.0)

    g = np.floor(255.0 * t).astype(np.uint8)
    if not is_dark:
        g = 255 - g
    return g, MagnitudeStats(max_value=max_v, scale=scale, normalize=normalize, n=width)


def phase_to_rgba(real, imag, width: int, height: int, null_rgb=(128, 128, 128)) -> np.ndarray:
    re, im = _complex_parts(real, imag, width, height)
    phi = np.arctan2(im, re)
    t = np.abs(phi) / np.pi

    out = np.zeros((height, width, 4), dtype=np.uint8)
    red = np.where(phi > 0, np.round(255.0 * t), 0.0)
    blue = np.where(phi < 0, np.round(255.0 * t), 0.0)

    a = np.abs(phi)
    u = np.clip((a - np.pi / 2) / (np.pi / 2), 0.0, 1.0)
    alpha = np.where(a > np.pi / 2, 1.0 - u, 1.0)

    out[..., 0] = red.astype(np.uint8)
    out[..., 2] = blue.astype(np.uint8)
    out[..., 3] = np.round(255.0 * alpha).astype(np.uint8)

    null = (re * re + im * im) == 0
    out[null, 0] = null_rgb[0]
    out[null, 1] = null_rgb[1]
    out[null, 2] = null_rgb[2]
    out[null, 3] = 255
    return out


def blank_image(width: int, height: int, rgb=(0, 0, 0)) -> np.ndarray:
    """Solid RGB placeholder shown while no current spectrum exists."""
    out = np.empty((height, width, 3), dtype=np.uint8)
    out[...] = np.asarray(rgb, dtype=np.uint8)
    return out


def magnitude_key(width: int = 256, height: int = 10, is_dark: bool = True) -> np.ndarray:
    """Gray ramp from weakest (left) to strongest (right) bin, theme aware."""
    ramp = np.floor(np.linspace(0.0, 255.0, width)).astype(np.uint8)
    if not is_dark:
        ramp = 255 - ramp
    return np.tile(ramp, (height, 1))


def phase_key(width: int = 256, height: int = 10) -> np.ndarray:
    """RGBA strip of the phase colours from -pi (left) to +pi (right)."""
    phi = np.linspace(-np.pi, np.pi, width)
    row = phase_to_rgba(np.cos(phi), np.sin(phi), width, 1)
    return np.repeat(row, height, axis=0)


def magnitude_legend(stats: MagnitudeStats) -> str:
    """One-line description of what the magnitude image's white level means."""
    label = "log(1+|F|)" if stats.scale == "log" else "|F|"
    if stats.normalize == "max":
        return f"{label}: 0 .. {stats.max_value:.4g} (scaled to max)"
    return f"{label}: 0 .. 1 (clipped)"
