import logging
import threading
import pytest

pytest.importorskip("PIL.ImageTk")
from gui.utils import AppLogHandler  # noqa: E402


def test_records_from_other_threads_are_queued():
    handler = AppLogHandler()
    log = logging.getLogger("fftcore.pipeline.test")
    log.setLevel(logging.INFO)
    log.addHandler(handler)
    try:
        t = threading.Thread(target=log.warning, args=("worker said %s", "hi"))
        t.start()
        t.join()
        log.debug("hidden")
    finally:
        log.removeHandler(handler)
    assert handler.drain() == ["WARNING fftcore.pipeline.test: worker said hi"]
    assert handler.drain() == []
