# io_utils/image_handler.py
"""
Image read/write helpers using Pillow.

Functions:
- read_grayscale(path, size=None) -> (H x W uint8 array, meta)
- save_image(path, array) -> writes image
- normalize_to_uint8(array) -> percentile-stretched uint8 array
- fit_to_grid(array, size) -> size x size uint8 array for the drawing grid
"""

from typing import Optional, Tuple
import numpy as np
from PIL import Image
import pillow_avif  # noqa: F401  (registers the AVIF codec with Pillow)

from fftcore.fft1d import is_power_of_two


def read_grayscale(path: str, size: Optional[int] = None) -> Tuple[np.ndarray, dict]:
    """
    Read an image from `path` as 8-bit grayscale.

    - Alpha is composited over black before conversion.
    - 16-bit and float rasters are percentile-stretched to 0..255.
    - If `size` is given, the image is fitted to a size x size grid
      (size must be a power of two).
    Meta contains the source mode and original size.
    """
    img = Image.open(path)
    meta = {"mode": img.mode, "size": img.size, "has_alpha": False}

    if img.mode in ("RGBA", "LA") or ("transparency" in img.info):
        meta["has_alpha"] = True
        rgba = img.convert("RGBA")
        black = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        img = Image.alpha_composite(black, rgba)

    if img.mode in ("I", "I;16", "I;16B", "F"):
        arr = normalize_to_uint8(np.asarray(img))
    else:
        arr = np.asarray(img.convert("L"), dtype=np.uint8)

    if size is not None:
        arr = fit_to_grid(arr, size)
    return arr, meta


def fit_to_grid(array: np.ndarray, size: int) -> np.ndarray:
    """Center-crop to a square and resample to size x size (box filter)."""
    if not is_power_of_two(size):
        raise ValueError(f"Grid size must be a power of two, got {size}.")
    if array.ndim != 2:
        raise ValueError("fit_to_grid expects a 2D grayscale array.")
    h, w = array.shape
    side = min(h, w)
    top = (h - side) // 2
    left = (w - side) // 2
    square = np.ascontiguousarray(array[top:top + side, left:left + side], dtype=np.uint8)
    img = Image.fromarray(square)
    if side != size:
        img = img.resize((size, size), Image.Resampling.BOX)
    return np.asarray(img, dtype=np.uint8).copy()


def save_image(path: str, array: np.ndarray):
    """
    Write a grayscale (HxW), RGB (HxWx3) or RGBA (HxWx4) array to `path`.
    Float input is clipped to 0..255 first.
    """
    if not (array.ndim == 2 or (array.ndim == 3 and array.shape[2] in (3, 4))):
        raise ValueError("save_image expects HxW, HxWx3 or HxWx4 array.")
    if np.issubdtype(array.dtype, np.floating):
        array = np.clip(array, 0.0, 255.0)
    Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8)).save(path)


def normalize_to_uint8(arr: np.ndarray, clip_percentiles=(1, 99)) -> np.ndarray:
    """
    Stretch a 16-bit or float raster onto 0..255.

    The range is taken from the given percentiles so a few hot pixels do not
    flatten the rest; pass (None, None) to use the plain min/max. NaNs count
    as 0 and a constant raster maps to 0.
    """
    vals = np.nan_to_num(np.asarray(arr, dtype=np.float64), nan=0.0)
    finite = vals[np.isfinite(vals)]
    if finite.size == 0:
        return np.zeros(vals.shape, dtype=np.uint8)
    vals = np.clip(vals, finite.min(), finite.max())

    lo, hi = clip_percentiles
    if lo is not None and hi is not None and 0 <= lo < hi <= 100:
        vmin, vmax = np.percentile(finite, [lo, hi])
    else:
        vmin, vmax = finite.min(), finite.max()
    if vmax <= vmin:
        return np.zeros(vals.shape, dtype=np.uint8)
    t = np.clip((vals - vmin) / (vmax - vmin), 0.0, 1.0)
    return (t * 255.0).astype(np.uint8)
