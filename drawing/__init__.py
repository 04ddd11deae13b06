"""
Drawing surface for the Fourier sketchpad: sample grid, brushes, undo.
"""
from .model import SampleGrid, canonicalize_for_fft, create_empty_image
from .brush import BRUSH_SHAPES, BrushSettings, stamp, stroke_line

__all__ = [
    "SampleGrid",
    "canonicalize_for_fft",
    "create_empty_image",
    "BRUSH_SHAPES",
    "BrushSettings",
    "stamp",
    "stroke_line",
]
