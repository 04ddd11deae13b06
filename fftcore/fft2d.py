"""
fftcore/fft2d.py

Separable 2D FFT on a row-major (width x height) complex field stored as
two flat arrays, plus the normalization conventions.
"""

from enum import Enum
import math
import numpy as np

from .fft1d import Direction, FFTSizeError, fft1d_inplace, is_power_of_two


class Normalization(str, Enum):
    NONE = "none"
    FORWARD = "forward"
    INVERSE = "inverse"
    UNITARY = "unitary"


def normalization_scale(normalization, direction, width: int, height: int) -> float:
    """
    Scale factor applied once after both axis passes.

    none    -> 1
    forward -> 1/(w*h) on the forward path only
    inverse -> 1/(w*h) on the inverse path only
    unitary -> 1/sqrt(w*h) in both directions
    """
    normalization = Normalization(normalization)
    direction = Direction(direction)
    count = float(width * height)
    if normalization is Normalization.FORWARD:
        return 1.0 / count if direction is Direction.FORWARD else 1.0
    if normalization is Normalization.INVERSE:
        return 1.0 / count if direction is Direction.INVERSE else 1.0
    if normalization is Normalization.UNITARY:
        return 1.0 / math.sqrt(count)
    return 1.0


def validate_field(real: np.ndarray, imag: np.ndarray, width: int, height: int) -> None:
    """Raise FFTSizeError unless real/imag form a valid power-of-two field."""
    if not is_power_of_two(width) or not is_power_of_two(height):
        raise FFTSizeError(f"Width/height must be powers of two, got {width}x{height}.")
    expected = width * height
    if real.ndim != 1 or imag.ndim != 1:
        raise FFTSizeError("real/imag must be flat row-major arrays.")
    if real.shape[0] != expected or imag.shape[0] != expected:
        raise FFTSizeError(
            f"Array size mismatch: expected {expected}, got real={real.shape[0]} imag={imag.shape[0]}."
        )
    if not (real.flags.c_contiguous and imag.flags.c_contiguous):
        raise ValueError("real/imag must be C-contiguous for in-place transforms.")


def fft2d_inplace(
    real: np.ndarray,
    imag: np.ndarray,
    width: int,
    height: int,
    direction: Direction = Direction.FORWARD,
    normalization=Normalization.FORWARD,
) -> None:
    """
    In-place 2D FFT: every row, then every column, then one scaling pass.

    Each row/column is copied into a temporary buffer, transformed with
    fft1d_inplace and copied back. Sizes are validated before any write.
    """
    validate_field(real, imag, width, height)
    direction = Direction(direction)
    scale = normalization_scale(normalization, direction, width, height)

    grid_r = real.reshape(height, width)
    grid_i = imag.reshape(height, width)

    # rows
    row_r = np.empty(width, dtype=np.float64)
    row_i = np.empty(width, dtype=np.float64)
    for y in range(height):
        row_r[:] = grid_r[y, :]
        row_i[:] = grid_i[y, :]
        fft1d_inplace(row_r, row_i, direction)
        grid_r[y, :] = row_r
        grid_i[y, :] = row_i

    # columns
    col_r = np.empty(height, dtype=np.float64)
    col_i = np.empty(height, dtype=np.float64)
    for x in range(width):
        col_r[:] = grid_r[:, x]
        col_i[:] = grid_i[:, x]
        fft1d_inplace(col_r, col_i, direction)
        grid_r[:, x] = col_r
        grid_i[:, x] = col_i

    if scale != 1.0:
        real *= scale
        imag *= scale
