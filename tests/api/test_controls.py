import pytest

from api.sketch_runner.controls import KEY_ACTIONS, SketchControls
from engine.core.sim_clock import SimulationClock
from engine.kinematics import KinematicTracker, TrackerGroup


class _Flag:
    def __init__(self, value=True):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        self.value = not self.value
        return self.value


@pytest.fixture
def rig():
    group = TrackerGroup([KinematicTracker(1.0, 4.0, revolution_rate=0.1)])
    clock = SimulationClock(
        [group.tick], interval=0.1, startup_delay=0.0, min_interval=0.01, max_interval=1.0
    )
    apparatus, closer = _Flag(), _Flag()
    controls = SketchControls(
        group,
        clock,
        rate_step=0.01,
        interval_factor=2.0,
        toggle_apparatus=apparatus,
        close=closer,
    )
    return controls, group, clock, apparatus, closer


def test_rate_keys(rig):
    controls, group, *_ = rig
    assert controls.handle_key("UP")
    assert group.revolution_rate == pytest.approx(0.11)
    assert controls.handle_key("down")
    controls.handle_key("DOWN")
    assert group.revolution_rate == pytest.approx(0.09)


def test_speed_keys_scale_interval(rig):
    controls, _, clock, *_ = rig
    controls.handle_key("RIGHT")
    assert clock.interval == pytest.approx(0.05)
    controls.handle_key("LEFT")
    controls.handle_key("LEFT")
    assert clock.interval == pytest.approx(0.2)


def test_reset_clears_traces_but_keeps_clock(rig):
    controls, group, clock, *_ = rig
    clock.tick(0.35)
    assert len(group.trackers[0]) == 3
    controls.handle_key("R")
    assert len(group.trackers[0]) == 0
    assert clock.tick_count == 3


def test_toggles_and_quit(rig):
    controls, group, _, apparatus, closer = rig
    controls.handle_key("O")
    assert group.show_offsets is False
    controls.handle_key("A")
    assert apparatus.calls == 1
    controls.handle_key("ESCAPE")
    assert closer.calls == 1


def test_unknown_keys_and_actions(rig):
    controls, *_ = rig
    assert not controls.handle_key("Q")
    assert not controls.dispatch("dispatch")
    assert controls.dispatch("reset")


def test_every_key_maps_to_a_handler(rig):
    controls, *_ = rig
    for action in KEY_ACTIONS.values():
        assert callable(getattr(controls, action))


def test_optional_callbacks_may_be_absent():
    group = TrackerGroup()
    controls = SketchControls(group, SimulationClock(startup_delay=0.0))
    assert controls.handle_key("A")
    assert controls.handle_key("ESCAPE")


def test_interval_factor_must_exceed_one():
    with pytest.raises(ValueError):
        SketchControls(TrackerGroup(), SimulationClock(), interval_factor=1.0)
