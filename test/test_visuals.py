import os
import numpy as np
import pytest
from fftcore.transform import TransformResponse
from visuals.colormap import blank_image, magnitude_to_gray, magnitude_values, phase_to_rgba
from visuals.plots import compare_and_save, fig_to_array, save_magnitude_png, save_phase_png


def _response(values, w=4, h=4):
    c = np.asarray(values, dtype=np.complex128).reshape(-1)
    return TransformResponse(w, h, c.real.astype(np.float32), c.imag.astype(np.float32))


def test_magnitude_max_normalization():
    c = np.zeros(16, dtype=complex)
    c[0] = 2.0
    c[5] = 1.0j
    gray, stats = magnitude_to_gray(c.real, c.imag, 4, 4)
    assert gray.shape == (4, 4) and gray.dtype == np.uint8
    assert gray[0, 0] == 255
    assert gray[1, 1] == 127
    assert stats.max_value == pytest.approx(2.0)
    assert stats.n == 4


def test_magnitude_zero_field_and_light_theme():
    z = np.zeros(16)
    gray, _ = magnitude_to_gray(z, z, 4, 4)
    assert np.all(gray == 0)
    gray, _ = magnitude_to_gray(z, z, 4, 4, is_dark=False)
    assert np.all(gray == 255)


def test_magnitude_log_and_clip():
    re = np.array([0.0, 0.5, 3.0, 1.0])
    vals = magnitude_values(re, np.zeros(4), 2, 2, scale="log")
    assert np.allclose(vals.reshape(-1), np.log1p(re))
    gray, _ = magnitude_to_gray(re, np.zeros(4), 2, 2, normalize="none")
    assert list(gray.reshape(-1)) == [0, 127, 255, 255]
    with pytest.raises(ValueError):
        magnitude_values(re, np.zeros(4), 2, 2, scale="db")


def test_phase_colours():
    # +1, +i, -i, -1
    re = np.array([1.0, 0.0, 0.0, -1.0])
    im = np.array([0.0, 1.0, -1.0, 0.0])
    rgba = phase_to_rgba(re, im, 2, 2).reshape(4, 4)
    assert tuple(rgba[0]) == (0, 0, 0, 255)
    assert tuple(rgba[1]) == (128, 0, 0, 255)
    assert tuple(rgba[2]) == (0, 0, 128, 255)
    assert rgba[3, 0] == 255 and rgba[3, 3] == 0


def test_phase_null_bins():
    z = np.zeros(4)
    rgba = phase_to_rgba(z, z, 2, 2, null_rgb=(10, 20, 30))
    assert np.all(rgba.reshape(4, 4) == [10, 20, 30, 255])


def test_blank_image():
    img = blank_image(3, 2, (1, 2, 3))
    assert img.shape == (2, 3, 3)
    assert np.all(img == [1, 2, 3])


def test_save_pngs(tmp_path):
    from PIL import Image
    resp = _response(np.arange(16) * (1 + 1j))
    mp = save_magnitude_png(resp, str(tmp_path / "out" / "mag.png"), upscale=4)
    pp = save_phase_png(resp, str(tmp_path / "phase.png"))
    assert os.path.exists(mp) and os.path.exists(pp)
    assert Image.open(mp).size == (16, 16)
    assert Image.open(pp).mode == "RGBA"


def test_compare_figure(tmp_path):
    samples = np.zeros(16, dtype=np.uint8)
    samples[5] = 255
    resp = _response(np.fft.fft2(samples.reshape(4, 4) / 255.0) / 16)
    fig = compare_and_save(samples, resp)
    arr = fig_to_array(fig)
    assert arr.ndim == 3 and arr.shape[2] == 3 and arr.dtype == np.uint8
    p = str(tmp_path / "cmp.png")
    assert compare_and_save(samples, resp, out_path=p) == p
    assert os.path.exists(p)


def test_legend_keys():
    from visuals.colormap import MagnitudeStats, magnitude_key, magnitude_legend, phase_key
    mk = magnitude_key(64, 5)
    assert mk.shape == (5, 64) and mk[0, 0] == 0 and mk[0, -1] == 255
    assert magnitude_key(64, 5, is_dark=False)[0, 0] == 255

    pk = phase_key(64, 3)
    assert pk.shape == (3, 64, 4)
    # negative phases on the left are blue, positive on the right red
    assert pk[0, 16, 2] > 0 and pk[0, 16, 0] == 0
    assert pk[0, 48, 0] > 0 and pk[0, 48, 2] == 0

    text = magnitude_legend(MagnitudeStats(max_value=0.5, scale="log", normalize="max", n=16))
    assert "log(1+|F|)" in text and "0.5" in text
