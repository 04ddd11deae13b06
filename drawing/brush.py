"""
drawing/brush.py

Brush stamping on a SampleGrid.

Shapes (radius r, all centered on the pixel under the cursor):
  square   (2r+1) x (2r+1) block
  circle   pixels within r + 0.5 of the center
  diamond  |dx| + |dy| <= r
  hline    horizontal segment of length 2r+1
  vline    vertical segment of length 2r+1
  cross    hline + vline
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

from .model import SampleGrid

BRUSH_SHAPES = ("square", "circle", "diamond", "hline", "vline", "cross")
BRUSH_MODES = ("draw", "erase")


@dataclass
class BrushSettings:
    radius: int = 0
    mode: str = "draw"
    shape: str = "square"
    value: int = 255

    def __post_init__(self):
        if self.shape not in BRUSH_SHAPES:
            raise ValueError(f"Unknown brush shape '{self.shape}'. Choose one of {BRUSH_SHAPES}.")
        if self.mode not in BRUSH_MODES:
            raise ValueError(f"Unknown brush mode '{self.mode}'. Choose 'draw' or 'erase'.")
        if self.radius < 0:
            raise ValueError("Brush radius must be non-negative.")
        if not 0 <= int(self.value) <= 255:
            raise ValueError("Brush value must be in 0..255.")


def footprint(shape: str, radius: int) -> Iterator[Tuple[int, int]]:
    """Yield (dx, dy) offsets covered by a brush of this shape/radius."""
    r = max(0, int(radius))
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            if shape == "square":
                hit = True
            elif shape == "circle":
                hit = dx * dx + dy * dy <= (r + 0.5) ** 2
            elif shape == "diamond":
                hit = abs(dx) + abs(dy) <= r
            elif shape == "hline":
                hit = dy == 0
            elif shape == "vline":
                hit = dx == 0
            elif shape == "cross":
                hit = dx == 0 or dy == 0
            else:
                raise ValueError(f"Unknown brush shape '{shape}'.")
            if hit:
                yield dx, dy


def stamp(grid: SampleGrid, x: int, y: int, brush: BrushSettings) -> None:
    """Paint one brush footprint at (x, y); erase paints the grid background."""
    value = grid.background if brush.mode == "erase" else int(brush.value)
    for dx, dy in footprint(brush.shape, brush.radius):
        grid.set_pixel(x + dx, y + dy, value)


def line_points(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """Bresenham points from (x0, y0) to (x1, y1), both ends included."""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def stroke_line(grid: SampleGrid, x0: int, y0: int, x1: int, y1: int, brush: BrushSettings) -> None:
    for x, y in line_points(x0, y0, x1, y1):
        stamp(grid, x, y, brush)
