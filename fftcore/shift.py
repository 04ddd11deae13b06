"""
fftcore/shift.py

Quadrant swap moving the DC bin from (0,0) to (width/2, height/2).
Also used on the spatial field to relabel the center pixel as the origin.
"""

import numpy as np

from .fft1d import FFTSizeError


def _swap_blocks(grid: np.ndarray, a, b) -> None:
    tmp = grid[a].copy()
    grid[a] = grid[b]
    grid[b] = tmp


def fftshift2d_inplace(real: np.ndarray, imag: np.ndarray, width: int, height: int) -> None:
    """
    Swap quadrants (0,0)<->(w/2,h/2) and (w/2,0)<->(0,h/2) in place.

    Applying it twice restores the original layout. An axis of length 1 has
    nothing to swap, so only the other axis is half-swapped.
    """
    for name, n in (("width", width), ("height", height)):
        if n != 1 and n % 2:
            raise FFTSizeError(f"Spectrum shift needs even dimensions, got {name}={n}.")
    if real.shape[0] != width * height or imag.shape[0] != width * height:
        raise FFTSizeError("Array size mismatch.")

    half_w = width // 2
    half_h = height // 2
    top, bottom = slice(0, half_h), slice(half_h, height)
    left, right = slice(0, half_w), slice(half_w, width)
    full = slice(None)

    if width == 1 and height == 1:
        return
    for arr in (real, imag):
        grid = arr.reshape(height, width)
        if width == 1:
            _swap_blocks(grid, (top, full), (bottom, full))
        elif height == 1:
            _swap_blocks(grid, (full, left), (full, right))
        else:
            _swap_blocks(grid, (top, left), (bottom, right))
            _swap_blocks(grid, (top, right), (bottom, left))
