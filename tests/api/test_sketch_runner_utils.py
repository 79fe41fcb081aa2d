import numpy as np
import pytest

from api.sketch_runner.utils import (
    build_projection,
    resolve_canvas_size,
    resolve_fps,
    resolve_window_size,
)


def test_resolve_fps():
    assert resolve_fps(None, {}) == 60
    assert resolve_fps(None, {"fps": 30}) == 30
    assert resolve_fps(120, {"fps": 30}) == 120
    assert resolve_fps(None, {"fps": "fast"}) == 60
    assert resolve_fps(0, {}) == 1


def test_resolve_canvas_size():
    assert resolve_canvas_size("square_100") == (100, 100)
    assert resolve_canvas_size((300, 200)) == (300, 200)
    with pytest.raises(ValueError):
        resolve_canvas_size("nope")
    with pytest.raises(ValueError):
        resolve_canvas_size((0, 100))
    with pytest.raises(ValueError):
        resolve_canvas_size((1,))


def test_resolve_window_size():
    assert resolve_window_size((100, 50), 6) == (600, 300)
    assert resolve_window_size((1, 1), 0.1) == (1, 1)
    with pytest.raises(ValueError):
        resolve_window_size((100, 100), 0)


def test_projection_maps_canvas_corners_to_clip_space():
    m = build_projection(200.0, 100.0).T
    top_left = m @ np.array([0.0, 0.0, 0.0, 1.0])
    bottom_right = m @ np.array([200.0, 100.0, 0.0, 1.0])
    center = m @ np.array([100.0, 50.0, 0.0, 1.0])
    np.testing.assert_allclose(top_left[:2], [-1.0, 1.0])
    np.testing.assert_allclose(bottom_right[:2], [1.0, -1.0])
    np.testing.assert_allclose(center[:2], [0.0, 0.0], atol=1e-6)
