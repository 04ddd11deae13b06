import queue
import logging
import numpy as np
from PIL import Image, ImageTk


def np_to_tkimage(arr, scale: int = 1, background=(255, 255, 255)):
    """
    Convert a numpy array (H×W, H×W×3 or H×W×4) to a PhotoImage for tkinter.
    RGBA is composited over `background`; `scale` enlarges with nearest-neighbour.
    """
    arr = np.asarray(arr, dtype=np.uint8)
    if arr.ndim == 3 and arr.shape[2] == 4:
        rgba = Image.fromarray(arr)
        base = Image.new("RGBA", rgba.size, tuple(background) + (255,))
        img = Image.alpha_composite(base, rgba).convert("RGB")
    elif arr.ndim == 2:
        img = Image.fromarray(arr)
    else:
        img = Image.fromarray(arr[..., :3])
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.Resampling.NEAREST)
    return ImageTk.PhotoImage(img)


class AppLogHandler(logging.Handler):
    """
    Collect log records for the GUI log box.

    Records may arrive from pipeline threads, so emit() only queues the
    formatted text; the Tk thread takes it out with drain().
    """

    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.messages = queue.Queue()
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record):
        try:
            self.messages.put_nowait(self.format(record))
        except Exception:
            self.handleError(record)

    def drain(self):
        """Pop every queued message. Call from the Tk thread."""
        out = []
        try:
            while True:
                out.append(self.messages.get_nowait())
        except queue.Empty:
            pass
        return out
