import logging
import math

import numpy as np
import pytest

from engine.core import quaternion as quat
from engine.kinematics import InconsistentBuffers, KinematicTracker, TrackerGroup


def _pair():
    a = KinematicTracker(1.0, 4.0, revolution_rate=0.1, name="a")
    b = KinematicTracker(2.0, 5.0, revolution_rate=-0.05, name="b")
    return TrackerGroup([a, b]), a, b


def test_tick_advances_every_tracker():
    group, a, b = _pair()
    v0 = group.version
    for _ in range(10):
        group.tick()
    assert len(a) == len(b) == 10
    assert group.tick_count == 10
    assert group.version > v0


def test_degenerate_tracker_is_isolated(caplog):
    group, a, b = _pair()
    group.tick()
    a._point.set_pose((math.nan, 0.0, 0.0), quat.identity())
    with caplog.at_level(logging.ERROR, logger="engine.kinematics.group"):
        group.tick()
    assert a.halted
    assert not b.halted
    assert any("halting a" in r.getMessage() for r in caplog.records)
    for _ in range(5):
        group.tick()
    assert len(a) == 1
    assert len(b) == 7
    assert group.live_trackers == (b,)


def test_set_revolution_rate_clamps_and_applies_to_all():
    group, a, b = _pair()
    assert group.set_revolution_rate(9.0) == pytest.approx(0.5)
    assert a.revolution_rate == b.revolution_rate == pytest.approx(0.5)


def test_nudge_keeps_each_rate_relative():
    group, a, b = _pair()
    assert group.nudge_revolution_rate(0.01) == pytest.approx(0.11)
    assert b.revolution_rate == pytest.approx(-0.04)
    group.nudge_revolution_rate(10.0)
    assert a.revolution_rate == b.revolution_rate == pytest.approx(0.5)


def test_group_rate_bounds_validated():
    with pytest.raises(ValueError):
        TrackerGroup(rate_bounds=(1.0, -1.0))


def test_empty_group():
    group = TrackerGroup()
    group.tick()
    assert group.revolution_rate is None
    assert group.snapshot().trackers == ()


def test_duplicate_add_rejected_and_remove():
    group, a, _ = _pair()
    with pytest.raises(ValueError):
        group.add(a)
    group.remove(a)
    assert len(group) == 1


def test_reset_all_and_single():
    group, a, b = _pair()
    for _ in range(4):
        group.tick()
    group.reset(0)
    assert len(a) == 0 and len(b) == 4
    assert group.tick_count == 4
    group.reset()
    assert len(b) == 0
    assert group.tick_count == 0


def test_toggle_offsets_bumps_version_and_snapshot():
    group, a, _ = _pair()
    group.tick()
    group.tick()
    assert group.show_offsets
    snap = group.snapshot()
    assert snap.show_offsets
    assert snap.trackers[0].has_offsets
    np.testing.assert_allclose(
        snap.trackers[0].inferior, a.trace_points + a.inferior_radius * a.trace_forward_vectors
    )
    v = group.version
    assert group.toggle_offsets() is False
    assert group.version == v + 1
    off = group.snapshot()
    assert not off.show_offsets
    assert off.trackers[0].inferior is None


def test_show_offsets_default_from_environment(monkeypatch):
    from common import settings

    monkeypatch.setenv("HYPO_SHOW_OFFSETS", "0")
    settings.reload_from_env()
    assert TrackerGroup().show_offsets is False
    assert TrackerGroup(show_offsets=True).show_offsets is True


def test_snapshot_is_decoupled_from_trackers():
    group, a, _ = _pair()
    for _ in range(3):
        group.tick()
    snap = group.snapshot()
    ts = snap.trackers[0]
    assert ts.name == "a"
    assert ts.tick_count == 3
    assert snap.total_points == 6
    group.tick()
    assert len(ts.trace_points) == 3
    np.testing.assert_allclose(ts.poses.point.position, a.trace_points[2])


def test_set_revolution_rate_reports_tracker_applied_value():
    narrow = KinematicTracker(1.0, 4.0, revolution_rate=0.05, rate_bounds=(-0.1, 0.1))
    group = TrackerGroup([narrow])
    assert group.set_revolution_rate(0.4) == pytest.approx(0.1)
    assert narrow.revolution_rate == pytest.approx(0.1)


def test_set_revolution_rate_on_empty_group_returns_clamped_value():
    assert TrackerGroup(rate_bounds=(-0.2, 0.2)).set_revolution_rate(1.0) == pytest.approx(0.2)


def test_snapshot_detects_inconsistent_buffers():
    group, a, _ = _pair()
    group.tick()
    a._forwards.append((1.0, 0.0, 0.0))
    with pytest.raises(InconsistentBuffers):
        group.snapshot()


def test_snapshot_points_are_writable_copies():
    group, a, _ = _pair()
    group.tick()
    pts = group.snapshot().trackers[0].trace_points
    pts[:] = 0.0
    assert np.any(a.trace_points != 0.0)
