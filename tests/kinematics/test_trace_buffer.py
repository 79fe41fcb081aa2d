import numpy as np
import pytest

from engine.kinematics.trace_buffer import TraceBuffer


def test_append_grows_past_initial_capacity():
    buf = TraceBuffer(initial_capacity=2)
    for i in range(5):
        buf.append((i, 0.0, 0.0))
    assert len(buf) == 5
    assert buf.capacity >= 5
    np.testing.assert_array_equal(buf.view()[:, 0], [0, 1, 2, 3, 4])


def test_view_is_read_only_and_snapshot_is_independent():
    buf = TraceBuffer()
    buf.append((1.0, 2.0, 3.0))
    with pytest.raises(ValueError):
        buf.view()[0, 0] = 0.0
    snap = buf.snapshot()
    snap[0, 0] = 42.0
    assert buf.view()[0, 0] == 1.0


def test_last_and_clear():
    buf = TraceBuffer(initial_capacity=4)
    assert buf.last() is None
    buf.append((1.0, 1.0, 1.0))
    buf.append((2.0, 2.0, 2.0))
    np.testing.assert_array_equal(buf.last(), [2.0, 2.0, 2.0])
    for _ in range(10):
        buf.append((0.0, 0.0, 0.0))
    buf.clear()
    assert len(buf) == 0
    assert buf.capacity == 4
    assert buf.view().shape == (0, 3)


def test_rejects_wrong_shape():
    buf = TraceBuffer()
    with pytest.raises(ValueError):
        buf.append((1.0, 2.0))
