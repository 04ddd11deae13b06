import numpy as np
import pytest
from drawing.brush import BrushSettings, footprint, line_points, stamp, stroke_line
from drawing.model import SampleGrid, canonicalize_for_fft


def test_footprint_counts():
    assert len(list(footprint("square", 1))) == 9
    assert len(list(footprint("circle", 1))) == 9
    assert len(list(footprint("circle", 2))) == 21
    assert len(list(footprint("diamond", 1))) == 5
    assert len(list(footprint("hline", 2))) == 5
    assert len(list(footprint("cross", 1))) == 5
    assert list(footprint("vline", 0)) == [(0, 0)]


def test_brush_validation():
    with pytest.raises(ValueError):
        BrushSettings(shape="star")
    with pytest.raises(ValueError):
        BrushSettings(mode="smudge")
    with pytest.raises(ValueError):
        BrushSettings(radius=-1)


def test_stamp_clips_at_edges_and_erases():
    g = SampleGrid(4)
    stamp(g, 0, 0, BrushSettings(radius=1))
    img = g.as_image()
    assert img[:2, :2].sum() == 4 * 255
    assert img.sum() == 4 * 255
    stamp(g, 0, 0, BrushSettings(mode="erase"))
    assert g.get_pixel(0, 0) == 0


def test_line_points():
    pts = list(line_points(0, 0, 3, 1))
    assert pts[0] == (0, 0) and pts[-1] == (3, 1)
    assert len(pts) == 4
    assert list(line_points(2, 2, 2, 2)) == [(2, 2)]


def test_stroke_and_undo():
    g = SampleGrid(8)
    assert not g.can_undo
    g.begin_stroke()
    stroke_line(g, 0, 0, 7, 7, BrushSettings())
    g.commit()
    assert all(g.get_pixel(i, i) == 255 for i in range(8))
    assert g.can_undo
    # unchanged commit does not add a step
    g.begin_stroke()
    g.commit()
    assert g.undo()
    assert not g.as_image().any()
    assert not g.undo()


def test_restore_stroke_base():
    g = SampleGrid(4)
    g.begin_stroke()
    g.set_pixel(1, 1, 255)
    g.restore_stroke_base()
    assert g.get_pixel(1, 1) == 0


def test_invert_and_canonicalize():
    g = SampleGrid(2)
    g.set_pixel(0, 0, 255)
    g.commit()
    g.invert()
    assert g.background == 255
    assert list(g.get_samples()) == [0, 255, 255, 255]
    assert g.undo()
    assert list(g.get_samples()) == [255, 255, 255, 255]

    s = np.array([0, 255, 100], dtype=np.uint8)
    assert list(canonicalize_for_fft(s, is_dark=True)) == [0, 255, 100]
    assert list(canonicalize_for_fft(s, is_dark=False)) == [255, 0, 100]


def test_samples_are_copies_and_resize_clears():
    g = SampleGrid(4)
    s = g.get_samples()
    s[0] = 255
    assert g.get_pixel(0, 0) == 0
    g.set_pixel(1, 1, 255)
    g.resize(8)
    assert g.size == 8
    assert g.get_samples().shape == (64,)
    assert not g.get_samples().any()


def test_load_is_undoable():
    g = SampleGrid(2)
    g.load(np.array([[1, 2], [3, 4]], dtype=np.uint8))
    assert g.get_pixel(1, 1) == 4
    assert g.undo()
    assert g.get_pixel(1, 1) == 0
    with pytest.raises(ValueError):
        g.load(np.zeros((3, 3), dtype=np.uint8))
