import math

import numpy as np
import pytest

from engine.kinematics.gearing import RollingConstraintSolver
from shapes import hypotrochoid_at


def test_hypocycloid_starts_on_outer_rim():
    pts = hypotrochoid_at(4.0, 1.0, 1.0, np.array([0.0]))
    np.testing.assert_allclose(pts, [[4.0, 0.0, 0.0]])


def test_astroid_cusps():
    # R = 4r: 4 つの尖点が軸上に並ぶ
    theta = np.array([0.0, math.pi / 2, math.pi, 3 * math.pi / 2])
    pts = hypotrochoid_at(4.0, 1.0, 1.0, theta)
    np.testing.assert_allclose(
        pts[:, :2], [[4.0, 0.0], [0.0, 4.0], [-4.0, 0.0], [0.0, -4.0]], atol=1e-12
    )


def test_distance_zero_is_a_circle_of_hub_radius():
    theta = np.linspace(0.0, 2 * math.pi, 50)
    pts = hypotrochoid_at(5.0, 2.0, 0.0, theta)
    np.testing.assert_allclose(np.linalg.norm(pts[:, :2], axis=1), 3.0)


def test_zero_inner_radius_rejected():
    with pytest.raises(ValueError):
        hypotrochoid_at(1.0, 0.0, 0.0, np.array([0.0]))


def test_curve_closes_after_turns_to_close():
    turns = RollingConstraintSolver(5.0, 2.0).turns_to_close()
    assert turns == 2
    theta = np.linspace(0.0, 2.0 * math.pi * turns, 1001)
    pts = hypotrochoid_at(5.0, 2.0, 2.0, theta)
    np.testing.assert_allclose(pts[0], pts[-1], atol=1e-9)
    # 1 公転では閉じない
    half = hypotrochoid_at(5.0, 2.0, 2.0, np.array([2.0 * math.pi]))
    assert np.linalg.norm(half[0] - pts[0]) > 1e-3
