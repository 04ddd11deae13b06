# visuals/__init__.py
"""
Visual helpers for the Fourier sketchpad.
Maps spectra to pixels and exports them for the GUI and scripts.
"""
from .colormap import (
    MagnitudeStats, blank_image, magnitude_key, magnitude_legend, magnitude_to_gray, phase_key, phase_to_rgba,
)
from .plots import compare_and_save, fig_to_array, save_magnitude_png, save_phase_png

__all__ = [
    "MagnitudeStats",
    "blank_image",
    "magnitude_key",
    "magnitude_legend",
    "magnitude_to_gray",
    "phase_key",
    "phase_to_rgba",
    "compare_and_save",
    "fig_to_array",
    "save_magnitude_png",
    "save_phase_png",
]
