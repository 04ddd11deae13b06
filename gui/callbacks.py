import os
import queue
import logging
from tkinter import filedialog, messagebox

from drawing.model import canonicalize_for_fft
from fftcore.pipeline import TransformResult, TransformUnavailableError
from io_utils.image_handler import read_grayscale
from io_utils.file_utils import make_result_filename, save_settings
from visuals.plots import save_magnitude_png, save_phase_png

logger = logging.getLogger(__name__)

POLL_MS = 30


# ----------------------
# Transform requests
# ----------------------
def post_transform(app, mark_transforming: bool = True) -> bool:
    """
    Build a request from the current grid and settings and submit it.
    Returns False if nothing was submitted.
    """
    samples = canonicalize_for_fft(app.sketch.get_samples(), app.is_dark)
    request = app.settings.make_request(samples, app.sketch.size)

    if mark_transforming:
        app.consumer.mark_pending()
        app.set_transforming(True)

    try:
        app.pipeline.submit(request, callback=app.results.put)
    except TransformUnavailableError as e:
        app.consumer.pending = False
        app.set_transforming(False)
        app.log(f"Transform unavailable: {e}")
        if messagebox.askyesno("Transform Unavailable", "The transform worker stopped.\nRestart it?"):
            restart_worker(app)
        return False
    return True


def restart_worker(app):
    try:
        app.pipeline.restart()
    except TransformUnavailableError as e:
        messagebox.showerror("Transform Unavailable", f"Could not restart the transform worker:\n{e}")
        return
    app.log("Transform worker restarted.")


def transform_callback(app):
    post_transform(app, mark_transforming=True)
    app.has_transformed = True


def recompute(app):
    """Silent recompute after a size/settings change (no busy indicator)."""
    post_transform(app, mark_transforming=False)


def poll_results(app):
    """Drain pipeline results on the Tk thread, then reschedule."""
    try:
        while True:
            result = app.results.get_nowait()
            handle_result(app, result)
    except queue.Empty:
        pass
    for msg in app.log_handler.drain():
        app.log(msg)
    app.after(POLL_MS, poll_results, app)


def handle_result(app, result: TransformResult):
    discarded = app.consumer.discarded
    changed = app.consumer.accept(result)
    if app.consumer.discarded != discarded:
        # superseded by a later size; never shown
        return
    if result.error is not None:
        app.log(f"Transform {result.width}x{result.height} failed: {result.error}")
        if isinstance(result.error, TransformUnavailableError):
            app.log("Use Transform again to restart the worker.")
    if not app.consumer.pending:
        app.set_transforming(False)
    if changed:
        app.render_spectra()


# ----------------------
# Drawing surface
# ----------------------
def clear_callback(app):
    app.sketch.clear()
    app.redraw_grid()
    app.clear_spectra()
    app.after_idle(recompute, app)


def undo_callback(app, event=None):
    if app.sketch.undo():
        app.redraw_grid()
    return "break"


def size_changed_callback(app, size: int):
    """New size: repaint empties immediately, then recompute."""
    app.sketch.resize(size)
    app.consumer.set_size(size, size)
    app.redraw_grid()
    app.clear_spectra()
    app.log(f"Grid size {size}x{size}")
    app.after_idle(recompute, app)


def settings_changed_callback(app, **changes):
    old = app.settings
    app.settings = old.updated(**changes)
    if app.settings == old:
        return
    try:
        save_settings(app.settings_path, app.settings)
    except OSError as e:
        logger.warning("Could not save settings: %s", e)

    if app.settings.coloring != old.coloring:
        app.apply_coloring()

    if app.consumer.spectrum is not None or app.has_transformed:
        recompute(app)
    app.redraw_grid()


def open_image_callback(app):
    """Load an image file into the drawing grid (grayscale, fitted to the grid size)."""
    path = filedialog.askopenfilename(
        title="Select Image",
        filetypes=[("Image Files", "*.png *.jpg *.jpeg *.tif *.bmp *.gif *.avif"), ("All Files", "*.*")]
    )
    if not path:
        return
    try:
        arr, meta = read_grayscale(path, size=app.sketch.size)
    except (OSError, ValueError) as e:
        app.log(f"Open failed: {e}")
        messagebox.showerror("Open Error", f"Could not read image:\n{e}")
        return

    if not app.is_dark:
        arr = 255 - arr
    app.sketch.load(arr)
    app.redraw_grid()
    app.log(f"Loaded: {os.path.basename(path)} ({meta['mode']} {meta['size'][0]}x{meta['size'][1]})")
    recompute(app)


def save_spectra_callback(app):
    spectrum = app.consumer.spectrum
    if spectrum is None:
        messagebox.showwarning("No Spectrum", "There is no spectrum to save. Run the transform first.")
        return
    outdir = filedialog.askdirectory(title="Save Spectra To")
    if not outdir:
        app.log("Save cancelled.")
        return
    s = app.settings
    try:
        mag_path = save_magnitude_png(
            spectrum,
            make_result_filename("sketchpad", "drawing", spectrum.width, s, "magnitude", outdir=outdir),
            scale=s.mag_scale.value,
            is_dark=app.is_dark,
            upscale=max(1, 256 // spectrum.width),
        )
        phase_path = save_phase_png(
            spectrum,
            make_result_filename("sketchpad", "drawing", spectrum.width, s, "phase", outdir=outdir),
            upscale=max(1, 256 // spectrum.width),
        )
    except OSError as e:
        app.log(f"Save failed: {e}")
        messagebox.showerror("Save Error", f"Saving failed:\n{e}")
        return
    app.log(f"Saved spectra → {mag_path}, {phase_path}")
