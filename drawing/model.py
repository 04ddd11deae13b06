"""
drawing/model.py

Square grayscale drawing surface with undo history.

The grid is the "current samples" provider for the transform pipeline:
get_samples() returns a fresh row-major uint8 copy that can be handed over
to a TransformRequest.
"""

from typing import List, Optional
import numpy as np


def create_empty_image(size: int, value: int = 0) -> np.ndarray:
    return np.full(size * size, value, dtype=np.uint8)


def canonicalize_for_fft(samples: np.ndarray, is_dark: bool) -> np.ndarray:
    """
    Map on-screen pixels to a theme-independent representation.

    In the light theme ink is black on white; pure 0 and 255 are swapped so
    the transform always sees bright ink on a dark background. Intermediate
    grays are left alone.
    """
    if is_dark:
        return samples
    out = samples.copy()
    out[samples == 0] = 255
    out[samples == 255] = 0
    return out


class SampleGrid:
    """
    size x size uint8 surface.

    Strokes are bracketed by begin_stroke()/commit(); each commit pushes a
    snapshot so undo() can step back. At most `max_undo` snapshots are kept.
    """

    def __init__(self, size: int = 16, background: int = 0, max_undo: int = 50):
        if size < 1:
            raise ValueError("Grid size must be positive.")
        self.size = int(size)
        self.background = int(background)
        self.max_undo = int(max_undo)
        self.data = create_empty_image(self.size, self.background)
        self._history: List[np.ndarray] = []
        self._index = -1
        self._stroke_base: Optional[np.ndarray] = None
        self._init_history()

    # --- history ---
    def _init_history(self) -> None:
        self._history = []
        self._index = -1
        self._push(self.data.copy())

    def _push(self, snapshot: np.ndarray) -> None:
        # drop redo states
        del self._history[self._index + 1:]
        self._history.append(snapshot)
        if len(self._history) > self.max_undo:
            self._history.pop(0)
        self._index = len(self._history) - 1

    def begin_stroke(self) -> None:
        self._stroke_base = self.data.copy()

    def restore_stroke_base(self) -> None:
        """Reset pixels to the start of the current stroke (used for straight-line strokes)."""
        if self._stroke_base is not None:
            self.data[:] = self._stroke_base

    def commit(self) -> None:
        self._stroke_base = None
        if self._history and np.array_equal(self._history[self._index], self.data):
            return
        self._push(self.data.copy())

    def undo(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        self.data[:] = self._history[self._index]
        return True

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    # --- whole-surface operations ---
    def clear(self) -> None:
        self.data = create_empty_image(self.size, self.background)
        self._init_history()

    def resize(self, size: int) -> None:
        """Switch to a new size; the surface is cleared."""
        if size < 1:
            raise ValueError("Grid size must be positive.")
        self.size = int(size)
        self.clear()

    def invert(self) -> None:
        """Invert pixels, background and every undo snapshot (theme flip)."""
        self.data[:] = 255 - self.data
        self.background = 255 - self.background
        self._history = [255 - h for h in self._history]
        if self._stroke_base is not None:
            self._stroke_base = 255 - self._stroke_base

    # --- pixel access ---
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def set_pixel(self, x: int, y: int, value: int) -> None:
        if self.in_bounds(x, y):
            self.data[y * self.size + x] = value

    def get_pixel(self, x: int, y: int) -> int:
        return int(self.data[y * self.size + x])

    def as_image(self) -> np.ndarray:
        """(size, size) view of the surface."""
        return self.data.reshape(self.size, self.size)

    def load(self, image: np.ndarray) -> None:
        """Replace the surface with a (size, size) uint8 image, as one undoable step."""
        arr = np.asarray(image)
        if arr.shape != (self.size, self.size):
            raise ValueError(f"Expected a {self.size}x{self.size} image, got {arr.shape}.")
        self.data[:] = arr.astype(np.uint8).reshape(-1)
        self.commit()

    def get_samples(self) -> np.ndarray:
        """Fresh copy of the current samples, safe to hand to the pipeline."""
        return self.data.copy()
