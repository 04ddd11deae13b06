"""
Transform engine for the Fourier sketchpad.
Exposes public modules for import in tests, scripts and the GUI.
"""
from .fft1d import Direction, FFTSizeError, bit_reverse_permutation, fft1d_inplace, is_power_of_two
from .fft2d import Normalization, fft2d_inplace, normalization_scale
from .shift import fftshift2d_inplace
from .origin import CenterConvention, apply_half_sample_correction
from .transform import TransformRequest, TransformResponse, compute_transform, inverse_transform
from .pipeline import FFTPipeline, SpectrumConsumer, TransformResult, TransformUnavailableError
from .settings import DEFAULT_SETTINGS, Settings

__all__ = [
    "Direction",
    "FFTSizeError",
    "bit_reverse_permutation",
    "fft1d_inplace",
    "is_power_of_two",
    "Normalization",
    "fft2d_inplace",
    "normalization_scale",
    "fftshift2d_inplace",
    "CenterConvention",
    "apply_half_sample_correction",
    "TransformRequest",
    "TransformResponse",
    "compute_transform",
    "inverse_transform",
    "FFTPipeline",
    "SpectrumConsumer",
    "TransformResult",
    "TransformUnavailableError",
    "DEFAULT_SETTINGS",
    "Settings",
]
