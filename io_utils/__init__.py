# io_utils/__init__.py
"""
I/O helpers package for the Fourier sketchpad.
"""
from .image_handler import read_grayscale, save_image, fit_to_grid, normalize_to_uint8
from .file_utils import make_result_filename, save_settings, load_settings, default_settings_path

__all__ = [
    "read_grayscale",
    "save_image",
    "fit_to_grid",
    "normalize_to_uint8",
    "make_result_filename",
    "save_settings",
    "load_settings",
    "default_settings_path",
]
