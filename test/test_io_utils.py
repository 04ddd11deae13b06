import json
import numpy as np
import pytest
from PIL import Image
from fftcore.fft2d import Normalization
from fftcore.origin import CenterConvention
from fftcore.settings import DEFAULT_SETTINGS, MagScale, Settings
from io_utils.file_utils import load_settings, make_result_filename, save_settings
from io_utils.image_handler import fit_to_grid, normalize_to_uint8, read_grayscale, save_image


def test_save_and_read_roundtrip(tmp_path):
    arr = np.arange(100).reshape(10, 10).astype(np.uint8)
    p = tmp_path / "test.png"
    save_image(str(p), arr)
    out, meta = read_grayscale(str(p))
    assert out.shape == arr.shape
    assert out.dtype == np.uint8
    assert np.array_equal(out, arr)
    assert meta["size"] == (10, 10)


def test_read_rgba_composites_over_black(tmp_path):
    arr = np.zeros((8, 8, 4), dtype=np.uint8)
    arr[..., :3] = 255
    arr[:4, :, 3] = 255
    p = tmp_path / "rgba.png"
    Image.fromarray(arr).save(p)
    gray, meta = read_grayscale(str(p))
    assert meta["has_alpha"]
    assert gray.shape == (8, 8)
    assert np.all(gray[:4] == 255)
    assert np.all(gray[4:] == 0)


def test_read_with_size_fits_grid(tmp_path):
    arr = np.full((20, 40, 3), 200, dtype=np.uint8)
    p = tmp_path / "wide.png"
    save_image(str(p), arr)
    gray, _ = read_grayscale(str(p), size=16)
    assert gray.shape == (16, 16)


def test_fit_to_grid_crops_center():
    arr = np.zeros((4, 8), dtype=np.uint8)
    arr[:, 2:6] = 255
    out = fit_to_grid(arr, 4)
    assert np.all(out == 255)
    with pytest.raises(ValueError):
        fit_to_grid(arr, 6)
    with pytest.raises(ValueError):
        fit_to_grid(np.zeros((4, 4, 3), dtype=np.uint8), 4)


def test_normalize_to_uint8():
    out = normalize_to_uint8(np.linspace(0, 1000, 101), clip_percentiles=(None, None))
    assert out.dtype == np.uint8
    assert out[0] == 0 and out[-1] == 255
    assert np.all(normalize_to_uint8(np.full(5, 7.0)) == 0)


def test_save_image_rejects_bad_shape(tmp_path):
    with pytest.raises(ValueError):
        save_image(str(tmp_path / "x.png"), np.zeros((4, 4, 2)))


def test_settings_roundtrip(tmp_path):
    s = DEFAULT_SETTINGS.updated(center=CenterConvention.CENTER_BETWEEN, mag_scale="log")
    p = str(tmp_path / "cfg" / "settings.json")
    save_settings(p, s)
    with open(p, encoding="utf-8") as f:
        payload = json.load(f)
    assert payload["version"] == 1
    assert payload["settings"]["center"] == "centerBetween"
    loaded = load_settings(p)
    assert loaded == s
    assert loaded.mag_scale is MagScale.LOG


def test_load_settings_fallbacks(tmp_path):
    assert load_settings(str(tmp_path / "missing.json")) == DEFAULT_SETTINGS
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_settings(str(bad)) == DEFAULT_SETTINGS
    partial = tmp_path / "partial.json"
    partial.write_text(json.dumps({"version": 1, "settings": {"normalization": "unitary", "shift": "sideways"}}))
    loaded = load_settings(str(partial))
    assert loaded.normalization is Normalization.UNITARY
    assert loaded.shift == DEFAULT_SETTINGS.shift


def test_make_result_filename(tmp_path):
    name = make_result_filename("sketchpad", "data/cat.png", 32, DEFAULT_SETTINGS, "phase map", outdir=str(tmp_path))
    assert name.startswith(str(tmp_path))
    base = name.rsplit("/", 1)[-1]
    assert base.startswith("sketchpad_cat_32px_centerPixel_forward_phase_map_")
    assert base.endswith(".png")


def test_settings_defaults_and_overrides():
    s = Settings()
    assert s.center is CenterConvention.CENTER_PIXEL
    assert s.apply_display_shift
    assert s.normalization is Normalization.FORWARD
    s2 = Settings.from_dict({"shift": "unshifted", "bogus": 1})
    assert not s2.apply_display_shift
    req = s2.make_request(np.zeros(16, dtype=np.uint8), 4)
    assert (req.width, req.height) == (4, 4)
    assert req.apply_display_shift is False
    assert req.origin_convention is CenterConvention.CENTER_PIXEL


def test_load_settings_non_utf8_file(tmp_path):
    p = tmp_path / "settings.json"
    p.write_bytes(b"\xff\xfe\x00garbage")
    assert load_settings(str(p)) == DEFAULT_SETTINGS
