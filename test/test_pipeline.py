# test/test_pipeline.py
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool
import numpy as np
import pytest
from fftcore.fft1d import FFTSizeError
from fftcore.pipeline import FFTPipeline, SpectrumConsumer, TransformResult, TransformUnavailableError
from fftcore.transform import TransformRequest, TransformResponse, compute_transform

TIMEOUT = 30


def _thread_executor():
    return ThreadPoolExecutor(max_workers=1)


def _request(size, value=0):
    return TransformRequest(size, size, np.full(size * size, value, dtype=np.uint8))


@pytest.fixture
def thread_pipeline():
    p = FFTPipeline(executor_factory=_thread_executor)
    yield p
    p.shutdown()


def test_process_pipeline_round_trip():
    with FFTPipeline() as pipeline:
        future = pipeline.submit(_request(8, 255))
        resp = future.result(timeout=TIMEOUT)
    assert isinstance(resp, TransformResponse)
    assert (resp.width, resp.height) == (8, 8)
    assert resp.real.reshape(8, 8)[4, 4] == pytest.approx(1.0)


def test_submit_takes_ownership_of_samples(thread_pipeline):
    req = _request(4)
    thread_pipeline.submit(req).result(timeout=TIMEOUT)
    with pytest.raises(ValueError):
        req.samples[0] = 1


def test_results_arrive_once_in_submission_order(thread_pipeline):
    results = queue.Queue()
    sizes = [4, 16, 8, 32, 2]
    for s in sizes:
        thread_pipeline.submit(_request(s), callback=results.put)
    got = [results.get(timeout=TIMEOUT) for _ in sizes]
    assert [r.width for r in got] == sizes
    assert all(r.ok for r in got)
    assert results.empty()


def test_size_error_fails_only_that_submission(thread_pipeline):
    results = queue.Queue()
    bad = TransformRequest(6, 6, np.zeros(36, dtype=np.uint8))
    thread_pipeline.submit(bad, callback=results.put)
    thread_pipeline.submit(_request(8), callback=results.put)
    first = results.get(timeout=TIMEOUT)
    second = results.get(timeout=TIMEOUT)
    assert isinstance(first.error, FFTSizeError)
    assert second.ok
    assert thread_pipeline.available


def test_stale_response_is_discarded():
    gate = threading.Event()

    def gated_compute(request):
        if request.width == 16:
            gate.wait(TIMEOUT)
        return compute_transform(request)

    pipeline = FFTPipeline(executor_factory=_thread_executor, compute=gated_compute)
    results = queue.Queue()
    consumer = SpectrumConsumer(16, 16)
    try:
        consumer.mark_pending()
        pipeline.submit(_request(16), callback=results.put)
        # user switches to 32x32 while the 16x16 job is still running
        consumer.set_size(32, 32)
        pipeline.submit(_request(32), callback=results.put)
        gate.set()

        a = results.get(timeout=TIMEOUT)
        b = results.get(timeout=TIMEOUT)
    finally:
        pipeline.shutdown()

    assert a.width == 16
    assert consumer.accept(a) is False
    assert consumer.spectrum is None
    assert consumer.discarded == 1
    assert consumer.pending

    assert consumer.accept(b) is True
    assert consumer.spectrum.width == 32
    assert not consumer.pending


def test_consumer_keeps_previous_result_on_error():
    consumer = SpectrumConsumer(4, 4)
    good = compute_transform(_request(4, 255))
    assert consumer.accept(TransformResult(4, 4, response=good))
    consumer.mark_pending()
    assert not consumer.accept(TransformResult(4, 4, error=FFTSizeError("bad")))
    assert consumer.spectrum is good
    assert not consumer.pending
    assert isinstance(consumer.last_error, FFTSizeError)


def _crashing_compute(request):
    raise BrokenProcessPool("worker died")


def test_worker_crash_reported_as_unavailable_and_restart_recovers():
    pipeline = FFTPipeline(executor_factory=_thread_executor, compute=_crashing_compute)
    results = queue.Queue()
    try:
        pipeline.submit(_request(4), callback=results.put)
        res = results.get(timeout=TIMEOUT)
        assert isinstance(res.error, TransformUnavailableError)
        assert not pipeline.available
        with pytest.raises(TransformUnavailableError):
            pipeline.submit(_request(4))

        pipeline._compute = compute_transform
        pipeline.restart()
        assert pipeline.available
        resp = pipeline.submit(_request(4)).result(timeout=TIMEOUT)
        assert resp.width == 4
    finally:
        pipeline.shutdown()


def test_submit_after_shutdown_is_unavailable():
    pipeline = FFTPipeline(executor_factory=_thread_executor)
    pipeline.shutdown()
    with pytest.raises(TransformUnavailableError):
        pipeline.submit(_request(4))


def test_start_failure_is_unavailable():
    def broken_factory():
        raise OSError("no processes")

    with pytest.raises(TransformUnavailableError):
        FFTPipeline(executor_factory=broken_factory)


def test_error_from_superseded_size_is_discarded():
    consumer = SpectrumConsumer(16, 16)
    consumer.mark_pending()
    consumer.set_size(32, 32)
    consumer.mark_pending()
    assert consumer.accept(TransformResult(16, 16, error=FFTSizeError("bad"))) is False
    assert consumer.pending
    assert consumer.last_error is None
    assert consumer.discarded == 1


def test_worker_crash_is_reported_whatever_the_size():
    consumer = SpectrumConsumer(32, 32)
    consumer.mark_pending()
    err = TransformUnavailableError("worker died")
    assert consumer.accept(TransformResult(16, 16, error=err)) is False
    assert not consumer.pending
    assert consumer.last_error is err
    assert consumer.discarded == 0
