import queue
import logging
import ttkbootstrap as ttk
import tkinter as tk
from ttkbootstrap.constants import *
from tkinter import StringVar, IntVar, BooleanVar
from tkinter.scrolledtext import ScrolledText

from drawing.brush import BRUSH_SHAPES, BrushSettings, stamp, stroke_line
from drawing.model import SampleGrid
from fftcore.fft2d import Normalization
from fftcore.origin import CenterConvention, origin_pixel
from fftcore.pipeline import FFTPipeline, SpectrumConsumer
from fftcore.settings import DisplayColoring, MagScale, ShiftConvention
from io_utils.file_utils import default_settings_path, load_settings
from visuals.colormap import (
    blank_image, magnitude_key, magnitude_legend, magnitude_to_gray, phase_key, phase_to_rgba,
)
from .callbacks import (
    clear_callback, open_image_callback, poll_results, save_spectra_callback,
    settings_changed_callback, size_changed_callback, transform_callback, undo_callback,
)
from .utils import AppLogHandler, np_to_tkimage

SIZES = (8, 16, 32, 64, 128, 256)
DISPLAY_PX = 384
DARK_THEME = "darkly"
LIGHT_THEME = "flatly"
PHASE_NULL_RGB = (128, 128, 128)
KEY_PX = 12


class SketchpadApp(ttk.Window):
    def __init__(self, title="Fourier Sketchpad", settings_path=None):
        self.settings_path = settings_path or default_settings_path()
        self.settings = load_settings(self.settings_path)
        super().__init__(themename=DARK_THEME if self._wants_dark(self.settings.coloring) else LIGHT_THEME)
        self.title(title)
        self.geometry("1400x760")

        # Data
        self.is_dark = self._wants_dark(self.settings.coloring)
        self.sketch = SampleGrid(16, background=0 if self.is_dark else 255)
        self.consumer = SpectrumConsumer(16, 16)
        self.results = queue.Queue()
        self.pipeline = FFTPipeline()
        self.has_transformed = False
        self._stroke_start = None
        self._last_pos = None
        self._hover = None

        # Variables
        self.size_val = IntVar(value=16)
        self.brush_shape = StringVar(value="square")
        self.brush_radius = IntVar(value=0)
        self.brush_mode = StringVar(value="draw")
        self.brush_value = IntVar(value=255)
        self.show_grid = BooleanVar(value=True)
        self.center_val = StringVar(value=self.settings.center.value)
        self.shift_val = StringVar(value=self.settings.shift.value)
        self.norm_val = StringVar(value=self.settings.normalization.value)
        self.scale_val = StringVar(value=self.settings.mag_scale.value)
        self.coloring_val = StringVar(value=self.settings.coloring.value)

        # Build UI
        self._build_layout()
        self.log_handler = AppLogHandler()
        logging.getLogger().addHandler(self.log_handler)
        logging.getLogger().setLevel(logging.INFO)

        self.bind_all("<Control-z>", lambda e: undo_callback(self, e))
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self.redraw_grid()
        self.clear_spectra()
        self.after(30, poll_results, self)

    @staticmethod
    def _wants_dark(coloring) -> bool:
        return DisplayColoring(coloring) is not DisplayColoring.LIGHT

    def log(self, msg: str):
        """
        GUI logger: append message to the ScrolledText log_box if available,
        otherwise print to stdout.
        """
        box = getattr(self, "log_box", None)
        if box is None:
            print(str(msg))
            return
        box.insert("end", str(msg) + "\n")
        box.see("end")

    # --- Layout ---
    def _build_layout(self):
        # Left control panel
        control = ttk.Frame(self)
        control.pack(side=LEFT, fill=Y, padx=10, pady=10)

        ttk.Label(control, text="Grid Size:").pack(anchor=W)
        ttk.OptionMenu(
            control, self.size_val, 16, *SIZES,
            command=lambda v: size_changed_callback(self, int(v)),
        ).pack(fill=X, pady=2)

        ttk.Label(control, text="Brush Shape:").pack(anchor=W)
        ttk.OptionMenu(control, self.brush_shape, "square", *BRUSH_SHAPES).pack(fill=X, pady=2)

        ttk.Label(control, text="Brush Radius:").pack(anchor=W)
        ttk.Spinbox(control, from_=0, to=16, textvariable=self.brush_radius, width=6).pack(fill=X, pady=2)

        ttk.Label(control, text="Brush Value (0-255):").pack(anchor=W)
        ttk.Spinbox(control, from_=0, to=255, textvariable=self.brush_value, width=6).pack(fill=X, pady=2)

        mode_row = ttk.Frame(control)
        mode_row.pack(fill=X, pady=2)
        ttk.Radiobutton(mode_row, text="Draw", value="draw", variable=self.brush_mode).pack(side=LEFT)
        ttk.Radiobutton(mode_row, text="Erase", value="erase", variable=self.brush_mode).pack(side=LEFT, padx=6)

        ttk.Checkbutton(control, text="Show Grid", variable=self.show_grid,
                        command=self.redraw_grid).pack(anchor=W, pady=5)

        # Buttons
        self.transform_btn = ttk.Button(control, text="Transform ➜", bootstyle=SUCCESS,
                                        command=lambda: transform_callback(self))
        self.transform_btn.pack(fill=X, pady=3)
        ttk.Button(control, text="Open Image", bootstyle=PRIMARY, command=lambda: open_image_callback(self)).pack(fill=X, pady=3)
        ttk.Button(control, text="Undo", bootstyle=SECONDARY, command=lambda: undo_callback(self)).pack(fill=X, pady=3)
        ttk.Button(control, text="Clear", bootstyle=WARNING, command=lambda: clear_callback(self)).pack(fill=X, pady=3)
        ttk.Button(control, text="Save Spectra", bootstyle=INFO, command=lambda: save_spectra_callback(self)).pack(fill=X, pady=3)

        # Settings
        ttk.Separator(control).pack(fill=X, pady=5)
        self._setting_menu(control, "Origin (0,0):", self.center_val, [c.value for c in CenterConvention], "center")
        self._setting_menu(control, "Display Shift:", self.shift_val, [s.value for s in ShiftConvention], "shift")
        self._setting_menu(control, "Normalization:", self.norm_val, [n.value for n in Normalization], "normalization")
        self._setting_menu(control, "Magnitude Scale:", self.scale_val, [m.value for m in MagScale], "mag_scale")
        self._setting_menu(control, "Coloring:", self.coloring_val, [c.value for c in DisplayColoring], "coloring")

        ttk.Separator(control).pack(fill=X, pady=5)
        ttk.Label(control, text="Logs:").pack(anchor=W)
        self.log_box = ScrolledText(control, height=8, width=34, wrap="word")
        self.log_box.configure(font=("Helvetica", 10))
        self.log_box.pack(fill=BOTH, expand=True, pady=5)

        # Right display area: drawing grid, magnitude, phase
        display = ttk.Frame(self)
        display.pack(side=LEFT, fill=BOTH, expand=True, padx=(8, 12), pady=8)

        def _make_column(parent, title, keyed=False):
            col = ttk.Frame(parent)
            ttk.Label(col, text=title).pack(anchor=W, pady=(0, 4))
            canvas = tk.Canvas(col, width=DISPLAY_PX, height=DISPLAY_PX, highlightthickness=0)
            canvas.pack()
            col.pack(side=LEFT, padx=6, anchor=N)
            if not keyed:
                return canvas, None, None
            key = tk.Canvas(col, width=DISPLAY_PX, height=KEY_PX, highlightthickness=0)
            key.pack(pady=(6, 2))
            text = ttk.Label(col, text="")
            text.pack(anchor=W)
            return canvas, key, text

        self.draw_canvas, _, _ = _make_column(display, "Drawing")
        self.mag_canvas, self.mag_key_canvas, self.mag_legend = _make_column(display, "Magnitude", keyed=True)
        self.phase_canvas, self.phase_key_canvas, self.phase_legend = _make_column(display, "Phase", keyed=True)
        self.phase_legend.configure(text="blue: -pi .. 0    red: 0 .. +pi    faded: |phase| > pi/2")
        self._tk_images = {}

        c = self.draw_canvas
        c.bind("<Button-1>", self._begin_stroke)
        c.bind("<B1-Motion>", self._continue_stroke)
        c.bind("<ButtonRelease-1>", self._end_stroke)
        c.bind("<Motion>", self._on_hover)
        c.bind("<Leave>", lambda e: self._on_hover(None))

    def _setting_menu(self, parent, label, var, values, key):
        ttk.Label(parent, text=label).pack(anchor=W)
        ttk.OptionMenu(
            parent, var, var.get(), *values,
            command=lambda v, k=key: settings_changed_callback(self, **{k: v}),
        ).pack(fill=X, pady=2)

    # --- state hooks used by callbacks ---
    def set_transforming(self, busy: bool):
        self.transform_btn.configure(state="disabled" if busy else "normal",
                                     text="Transforming…" if busy else "Transform ➜")

    def apply_coloring(self):
        dark = self._wants_dark(self.settings.coloring)
        self.style.theme_use(DARK_THEME if dark else LIGHT_THEME)
        if dark != self.is_dark:
            self.is_dark = dark
            self.sketch.invert()
            self.brush_value.set(255 - int(self.brush_value.get()))
            self.redraw_grid()
            self.render_spectra()

    # --- drawing surface ---
    @property
    def pixel_size(self) -> int:
        return max(1, DISPLAY_PX // self.sketch.size)

    def _brush(self) -> BrushSettings:
        try:
            radius = int(self.brush_radius.get())
            value = int(self.brush_value.get())
        except (tk.TclError, ValueError):
            radius, value = 0, 255
        return BrushSettings(
            radius=max(0, radius),
            mode=self.brush_mode.get(),
            shape=self.brush_shape.get(),
            value=min(255, max(0, value)),
        )

    def _event_to_pixel(self, event):
        return event.x // self.pixel_size, event.y // self.pixel_size

    def _begin_stroke(self, event):
        x, y = self._event_to_pixel(event)
        self.sketch.begin_stroke()
        self._stroke_start = (x, y)
        self._last_pos = (x, y)
        stamp(self.sketch, x, y, self._brush())
        self.redraw_grid()

    def _continue_stroke(self, event):
        if self._stroke_start is None:
            return
        x, y = self._event_to_pixel(event)
        brush = self._brush()
        if event.state & 0x1:
            # Shift held: straight line from the stroke start
            self.sketch.restore_stroke_base()
            stroke_line(self.sketch, *self._stroke_start, x, y, brush)
        else:
            stroke_line(self.sketch, *self._last_pos, x, y, brush)
        self._last_pos = (x, y)
        self._hover = (x, y)
        self.redraw_grid()

    def _end_stroke(self, event):
        if self._stroke_start is None:
            return
        self.sketch.commit()
        self._stroke_start = None
        self._last_pos = None

    def _on_hover(self, event):
        self._hover = None if event is None else self._event_to_pixel(event)
        self._draw_cursor()

    def redraw_grid(self):
        px = self.pixel_size
        n = self.sketch.size
        self.draw_canvas.delete("all")
        self._tk_images["draw"] = np_to_tkimage(self.sketch.as_image(), scale=px)
        self.draw_canvas.create_image(0, 0, anchor="nw", image=self._tk_images["draw"])
        if self.show_grid.get() and px >= 4:
            self._draw_grid_lines(n, px)
        self._draw_cursor()

    def _draw_grid_lines(self, n, px):
        line = "#555555" if self.is_dark else "#cccccc"
        axis = "#999999" if self.is_dark else "#888888"
        for i in range(n + 1):
            self.draw_canvas.create_line(i * px, 0, i * px, n * px, fill=line)
            self.draw_canvas.create_line(0, i * px, n * px, i * px, fill=line)

        o = origin_pixel(self.settings.center, n)
        if float(o).is_integer():
            # outline the origin row/column
            bounds = (int(o), int(o) + 1)
        else:
            bounds = (n // 2,)
        for b in bounds:
            self.draw_canvas.create_line(b * px, 0, b * px, n * px, fill=axis, width=2)
            self.draw_canvas.create_line(0, b * px, n * px, b * px, fill=axis, width=2)

    def _draw_cursor(self):
        self.draw_canvas.delete("cursor")
        if self._hover is None:
            return
        x, y = self._hover
        if not self.sketch.in_bounds(x, y):
            return
        px = self.pixel_size
        r = self._brush().radius
        color = "#fffcf9" if self.is_dark else "#000000"
        self.draw_canvas.create_rectangle(
            (x - r) * px, (y - r) * px, (x + r + 1) * px, (y + r + 1) * px,
            outline=color, tags="cursor",
        )

    # --- spectra ---
    def clear_spectra(self):
        n = self.sketch.size
        mag_bg = (0, 0, 0) if self.is_dark else (255, 255, 255)
        self._show(self.mag_canvas, "mag", blank_image(n, n, mag_bg))
        self._show(self.phase_canvas, "phase", blank_image(n, n, PHASE_NULL_RGB))
        self._draw_keys(None)

    def render_spectra(self):
        spectrum = self.consumer.spectrum
        if spectrum is None:
            self.clear_spectra()
            return
        w, h = spectrum.width, spectrum.height
        gray, stats = magnitude_to_gray(
            spectrum.real, spectrum.imag, w, h,
            scale=self.settings.mag_scale.value, normalize="max", is_dark=self.is_dark,
        )
        rgba = phase_to_rgba(spectrum.real, spectrum.imag, w, h, null_rgb=PHASE_NULL_RGB)
        self._show(self.mag_canvas, "mag", gray)
        self._show(self.phase_canvas, "phase", rgba)
        self._draw_keys(stats)
        self.log(f"Spectrum {w}x{h}: max {stats.scale} magnitude {stats.max_value:.4g}")

    def _draw_keys(self, stats):
        self._show(self.mag_key_canvas, "mag_key", magnitude_key(DISPLAY_PX, KEY_PX, self.is_dark), scale=1)
        self._show(self.phase_key_canvas, "phase_key", phase_key(DISPLAY_PX, KEY_PX), scale=1)
        self.mag_legend.configure(text="no spectrum" if stats is None else magnitude_legend(stats))

    def _show(self, canvas, key, pixels, scale=None):
        bg = (0, 0, 0) if self.is_dark else (255, 255, 255)
        scale = self.pixel_size if scale is None else scale
        self._tk_images[key] = np_to_tkimage(pixels, scale=scale, background=bg)
        canvas.delete("all")
        canvas.create_image(0, 0, anchor="nw", image=self._tk_images[key])

    def _on_close(self):
        logging.getLogger().removeHandler(self.log_handler)
        self.pipeline.shutdown(wait=False)
        self.destroy()


def launch_app():
    app = SketchpadApp()
    app.mainloop()
