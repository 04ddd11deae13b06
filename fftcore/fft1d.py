"""
fftcore/fft1d.py

In-place radix-2 Cooley-Tukey FFT on one axis.

Functions:
- is_power_of_two(n)
- bit_reverse_permutation(real, imag): reorder both arrays into bit-reversed order
- fft1d_inplace(real, imag, direction): un-normalized forward or inverse DFT

Notes:
- real/imag are 1D numpy float arrays of equal power-of-two length.
- Normalization is handled by the 2D layer (fftcore.fft2d).
"""

from enum import IntEnum
import math
import numpy as np


class Direction(IntEnum):
    """Sign of the transform exponent. FORWARD uses exp(-2*pi*i*k/n)."""
    FORWARD = 1
    INVERSE = -1


class FFTSizeError(ValueError):
    """Raised when array lengths differ or a size is not a power of two."""


def is_power_of_two(n: int) -> bool:
    n = int(n)
    return n >= 1 and (n & (n - 1)) == 0


def _check_pair(real: np.ndarray, imag: np.ndarray) -> int:
    n = real.shape[0]
    if real.ndim != 1 or imag.ndim != 1:
        raise FFTSizeError("real/imag must be 1D arrays.")
    if n != imag.shape[0]:
        raise FFTSizeError(f"real/imag length mismatch ({n} != {imag.shape[0]}).")
    if not is_power_of_two(n):
        raise FFTSizeError(f"FFT length must be a power of two, got {n}.")
    # stage reshapes below must be views, not copies
    if not (real.flags.c_contiguous and imag.flags.c_contiguous):
        raise ValueError("real/imag must be C-contiguous for in-place FFT.")
    return n


def bit_reverse_permutation(real: np.ndarray, imag: np.ndarray) -> None:
    """
    Reorder real/imag in place so element i moves to bitReverse(i, log2(n)).

    j tracks the bit-reversed value of i. Stepping i -> i+1 is a binary
    increment applied from the most significant end of j: clear the leading
    run of set bits, then set the first zero bit.
    """
    n = _check_pair(real, imag)
    j = 0
    for i in range(n):
        if i < j:
            real[i], real[j] = real[j], real[i]
            imag[i], imag[j] = imag[j], imag[i]
        m = n >> 1
        while m >= 1 and j >= m:
            j -= m
            m >>= 1
        j += m


def _twiddles(half: int, theta: float):
    """
    Successive powers w^0 .. w^(half-1) of w = exp(i*theta), built by
    repeated complex multiplication rather than one sin/cos per power.
    """
    step_r = math.cos(theta)
    step_i = math.sin(theta)
    w_r = np.empty(half, dtype=np.float64)
    w_i = np.empty(half, dtype=np.float64)
    cur_r, cur_i = 1.0, 0.0
    for k in range(half):
        w_r[k] = cur_r
        w_i[k] = cur_i
        cur_r, cur_i = cur_r * step_r - cur_i * step_i, cur_r * step_i + cur_i * step_r
    return w_r, w_i


def fft1d_inplace(real: np.ndarray, imag: np.ndarray, direction: Direction = Direction.FORWARD) -> None:
    """
    Radix-2 decimation-in-time FFT, in place.

    Parameters
    ----------
    real, imag : np.ndarray
        1D float arrays of the same power-of-two length. Mutated in place.
    direction : Direction
        FORWARD (+1) or INVERSE (-1). The inverse is not scaled.

    Raises
    ------
    FFTSizeError
        On length mismatch or non power-of-two length. Nothing is written
        to the arrays in that case.
    """
    n = _check_pair(real, imag)
    direction = Direction(direction)

    bit_reverse_permutation(real, imag)

    length = 2
    while length <= n:
        half = length >> 1
        w_r, w_i = _twiddles(half, direction * -2.0 * math.pi / length)

        # all blocks of this stage at once: rows are blocks, columns are k
        blocks_r = real.reshape(n // length, length)
        blocks_i = imag.reshape(n // length, length)
        u_r = blocks_r[:, :half].copy()
        u_i = blocks_i[:, :half].copy()
        odd_r = blocks_r[:, half:]
        odd_i = blocks_i[:, half:]
        v_r = odd_r * w_r - odd_i * w_i
        v_i = odd_r * w_i + odd_i * w_r

        # butterfly: X[k] = u + v, X[k + len/2] = u - v
        blocks_r[:, :half] = u_r + v_r
        blocks_i[:, :half] = u_i + v_i
        blocks_r[:, half:] = u_r - v_r
        blocks_i[:, half:] = u_i - v_i

        length <<= 1
