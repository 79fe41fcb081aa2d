import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, settings, strategies as st  # type: ignore

from engine.core import quaternion as quat
from engine.core.geometry import Geometry
from engine.kinematics import KinematicTracker
from engine.kinematics.offset import build_offset
from shapes.hypotrochoid import hypotrochoid_at

_finite = dict(allow_nan=False, allow_infinity=False)


@given(
    inner=st.floats(0.5, 10.0, **_finite),
    extra=st.floats(0.1, 20.0, **_finite),
    rate=st.floats(-0.3, 0.3, **_finite),
    n=st.integers(1, 200),
)
@settings(max_examples=40, deadline=None)
def test_tracker_follows_closed_form(inner, extra, rate, n):
    outer = inner + extra
    t = KinematicTracker(inner, outer, revolution_rate=rate)
    for _ in range(n):
        t.advance()
    assert len(t.trace_points) == len(t.trace_forward_vectors) == n
    theta = (np.arange(n) + 1) * rate
    expected = hypotrochoid_at(outer, inner, inner, theta)
    np.testing.assert_allclose(t.trace_points, expected, atol=1e-7 * outer * max(1, n))
    for frame in (t.inner_frame, t.arm_frame, t.point_frame):
        assert abs(np.linalg.norm(frame.orientation) - 1.0) < 1e-5


@given(
    offset=st.floats(-5.0, 5.0, **_finite),
    n=st.integers(0, 50),
)
@settings(max_examples=30, deadline=None)
def test_offset_length_and_distance(offset, n):
    t = KinematicTracker(1.0, 4.0, revolution_rate=0.07)
    for _ in range(n):
        t.advance()
    out = build_offset(t, offset)
    assert out.shape == t.trace_points.shape
    if n:
        dist = np.linalg.norm(out - t.trace_points, axis=1)
        np.testing.assert_allclose(dist, abs(offset), atol=1e-9)


@given(
    axis=st.tuples(*(st.floats(-1.0, 1.0, **_finite) for _ in range(3))).filter(
        lambda a: np.linalg.norm(a) > 1e-3
    ),
    angle=st.floats(-10.0, 10.0, **_finite),
)
def test_rotation_preserves_length(axis, angle):
    q = quat.from_axis_angle(axis, angle)
    v = np.array([0.3, -1.2, 2.5])
    assert abs(quat.norm(q) - 1.0) < 1e-12
    assert np.linalg.norm(quat.rotate_vector(q, v)) == pytest.approx(np.linalg.norm(v))


@given(
    dx1=st.floats(-10, 10), dy1=st.floats(-10, 10),
    dx2=st.floats(-10, 10), dy2=st.floats(-10, 10),
)
def test_translate_composition(dx1, dy1, dx2, dy2):
    g = Geometry.from_lines([np.array([[0, 0, 0], [1, 2, -1], [3, -4, 5]], dtype=np.float32)])
    left = g.translate(dx1, dy1).translate(dx2, dy2)
    right = g.translate(dx1 + dx2, dy1 + dy2)
    cL, oL = left.as_arrays()
    cR, oR = right.as_arrays()
    np.testing.assert_allclose(cL, cR, rtol=1e-5, atol=1e-5)
    np.testing.assert_array_equal(oL, oR)
