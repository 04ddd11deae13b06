"""
fftcore/transform.py

Transform request/response messages and the computation that runs inside
the worker process.

Composition order (changing it changes the result):
  1) samples / 255 -> real, imag = 0
  2) pre-shift                 (centerPixel, centerBetween)
  3) forward 2D FFT + normalization
  4) half-sample correction    (centerBetween)
  5) display shift             (apply_display_shift)
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from .fft1d import Direction, FFTSizeError, is_power_of_two
from .fft2d import Normalization, fft2d_inplace
from .origin import CenterConvention, apply_half_sample_correction, needs_half_sample_correction, needs_pre_shift
from .shift import fftshift2d_inplace


@dataclass(frozen=True)
class TransformRequest:
    """
    One transform job. The samples buffer belongs to the request once built;
    callers must not keep using it.
    """
    width: int
    height: int
    samples: np.ndarray
    apply_display_shift: bool = True
    normalization: Normalization = Normalization.FORWARD
    origin_convention: CenterConvention = CenterConvention.CENTER_PIXEL

    def validate(self) -> None:
        if not is_power_of_two(self.width) or not is_power_of_two(self.height):
            raise FFTSizeError(f"Width/height must be powers of two, got {self.width}x{self.height}.")
        samples = np.asarray(self.samples)
        if samples.dtype != np.uint8:
            raise ValueError(f"samples must be uint8 grayscale, got {samples.dtype}.")
        if samples.size != self.width * self.height:
            raise FFTSizeError(
                f"samples length {samples.size} does not match {self.width}x{self.height}."
            )
        Normalization(self.normalization)
        CenterConvention(self.origin_convention)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass
class TransformResponse:
    """Spectrum for one request; width/height are echoed from it."""
    width: int
    height: int
    real: np.ndarray
    imag: np.ndarray

    def matches(self, width: int, height: int) -> bool:
        """True if this response was computed for the given size."""
        return self.width == width and self.height == height

    def as_complex(self) -> np.ndarray:
        """(height, width) complex array view of the spectrum, for numpy users."""
        return (self.real.astype(np.float64) + 1j * self.imag.astype(np.float64)).reshape(self.height, self.width)


def compute_transform(request: TransformRequest) -> TransformResponse:
    """Run the full forward pipeline for one request. Stateless."""
    request.validate()
    width, height = request.width, request.height

    real = np.asarray(request.samples, dtype=np.float64).reshape(-1) / 255.0
    imag = np.zeros(width * height, dtype=np.float64)

    if needs_pre_shift(request.origin_convention):
        fftshift2d_inplace(real, imag, width, height)

    fft2d_inplace(real, imag, width, height, Direction.FORWARD, request.normalization)

    if needs_half_sample_correction(request.origin_convention):
        apply_half_sample_correction(real, imag, width, height)

    if request.apply_display_shift:
        fftshift2d_inplace(real, imag, width, height)

    return TransformResponse(
        width=width,
        height=height,
        real=real.astype(np.float32),
        imag=imag.astype(np.float32),
    )


def inverse_transform(
    real: np.ndarray,
    imag: np.ndarray,
    width: int,
    height: int,
    normalization=Normalization.FORWARD,
    origin_convention=CenterConvention.TOP_LEFT,
    is_shifted: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reconstruct the spatial field from a spectrum produced by compute_transform.

    Undoes the forward stages in reverse order with the same kernel run in
    Direction.INVERSE. Returns new float64 (real, imag) arrays; the inputs
    are not modified.
    """
    re = np.array(real, dtype=np.float64).reshape(-1)
    im = np.array(imag, dtype=np.float64).reshape(-1)

    if is_shifted:
        fftshift2d_inplace(re, im, width, height)

    if needs_half_sample_correction(origin_convention):
        # conjugate ramp cancels the forward correction
        im *= -1.0
        apply_half_sample_correction(re, im, width, height)
        im *= -1.0

    fft2d_inplace(re, im, width, height, Direction.INVERSE, normalization)

    if needs_pre_shift(origin_convention):
        fftshift2d_inplace(re, im, width, height)

    return re, im


def samples_from_array(image: np.ndarray, size: Optional[int] = None) -> np.ndarray:
    """Flatten a 2D uint8 image into a row-major sample buffer."""
    arr = np.asarray(image)
    if arr.ndim != 2:
        raise ValueError("samples_from_array expects a 2D grayscale array.")
    if size is not None and arr.shape != (size, size):
        raise FFTSizeError(f"Expected a {size}x{size} image, got {arr.shape[1]}x{arr.shape[0]}.")
    return np.ascontiguousarray(arr, dtype=np.uint8).reshape(-1)
