"""
visuals/plots.py

Export helpers for spectra produced by the transform pipeline.

APIs:
- save_magnitude_png(response, out_path, scale='linear', normalize='max', is_dark=True, upscale=1)
- save_phase_png(response, out_path, upscale=1)
- compare_and_save(samples, response, out_path=None, scale='log', titles=None)
- fig_to_array(fig) -> np.ndarray (H,W,3) uint8

Notes:
- PNG writers use Pillow only (no Matplotlib) and keep pixels crisp with
  nearest-neighbour upscaling.
- compare_and_save uses matplotlib; if out_path is None the Figure is returned.
"""

from typing import Optional, Sequence
import os
import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from PIL import Image  # noqa: E402

from fftcore.transform import TransformResponse  # noqa: E402
from .colormap import magnitude_to_gray, magnitude_values, phase_to_rgba  # noqa: E402


# Helper to ensure outdir exists
def _ensure_outdir(out_path: Optional[str]):
    if out_path is None:
        return None
    d = os.path.dirname(out_path)
    if d:
        os.makedirs(d, exist_ok=True)
    return out_path


def _save_pixels(out_path: str, pixels: np.ndarray, upscale: int = 1) -> str:
    """Write a uint8 (H,W), (H,W,3) or (H,W,4) array as PNG."""
    _ensure_outdir(out_path)
    img = Image.fromarray(pixels)
    if upscale > 1:
        img = img.resize((img.width * upscale, img.height * upscale), Image.Resampling.NEAREST)
    img.save(out_path)
    return out_path


def save_magnitude_png(
    response: TransformResponse,
    out_path: str,
    scale: str = "linear",
    normalize: str = "max",
    is_dark: bool = True,
    upscale: int = 1,
) -> str:
    gray, _stats = magnitude_to_gray(
        response.real, response.imag, response.width, response.height,
        scale=scale, normalize=normalize, is_dark=is_dark,
    )
    return _save_pixels(out_path, gray, upscale)


def save_phase_png(response: TransformResponse, out_path: str, upscale: int = 1) -> str:
    rgba = phase_to_rgba(response.real, response.imag, response.width, response.height)
    return _save_pixels(out_path, rgba, upscale)


def fig_to_array(fig: plt.Figure) -> np.ndarray:
    """
    Convert a Matplotlib figure to an HxWx3 uint8 RGB numpy array.
    """
    fig.canvas.draw()
    rgba = np.asarray(fig.canvas.buffer_rgba())
    return np.array(rgba[..., :3], dtype=np.uint8)


def compare_and_save(
    samples: np.ndarray,
    response: TransformResponse,
    out_path: Optional[str] = None,
    scale: str = "log",
    titles: Optional[Sequence[str]] = None,
):
    """
    Input (left) | Magnitude (middle) | Phase (right).
    """
    titles = titles or ("Input", "Magnitude", "Phase")
    w, h = response.width, response.height
    image = np.asarray(samples, dtype=np.uint8).reshape(h, w)
    mag = magnitude_values(response.real, response.imag, w, h, scale=scale)
    phase = np.angle(response.as_complex())

    fig, axs = plt.subplots(1, 3, figsize=(15, 5))

    axs[0].imshow(image, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
    axs[1].imshow(mag, cmap="gray", interpolation="nearest")
    im = axs[2].imshow(phase, cmap="twilight", vmin=-np.pi, vmax=np.pi, interpolation="nearest")
    fig.colorbar(im, ax=axs[2], fraction=0.046, pad=0.04, label="radians")

    for ax, title in zip(axs, titles):
        ax.set_title(title)
        ax.axis("off")

    if out_path:
        _ensure_outdir(out_path)
        fig.savefig(out_path, dpi=150, bbox_inches="tight", pad_inches=0.05)
        plt.close(fig)
        return out_path
    return fig
