from __future__ import annotations

import numpy as np

from engine.kinematics import KinematicTracker, TrackerGroup
from engine.render.layers import LAYER_ORDER, build_layers, collect_lines
from engine.render.style import RenderStyle


def _group(n_ticks: int, *, show_offsets: bool = True, count: int = 1) -> TrackerGroup:
    trackers = [
        KinematicTracker(1.0 + i, 4.0 + i, revolution_rate=0.1, name=f"t{i}") for i in range(count)
    ]
    group = TrackerGroup(trackers, show_offsets=show_offsets)
    for _ in range(n_ticks):
        group.tick()
    return group


def _by_name(layers):
    return {layer.name: layer for layer in layers}


def test_all_roles_in_draw_order() -> None:
    layers = build_layers(_group(10).snapshot(), RenderStyle())
    assert [layer.name for layer in layers] == list(LAYER_ORDER)


def test_trace_needs_two_points() -> None:
    names = [layer.name for layer in build_layers(_group(1).snapshot(), RenderStyle())]
    assert names == ["outer", "inner", "arm"]


def test_hidden_offsets_and_apparatus() -> None:
    snap = _group(10, show_offsets=False).snapshot()
    layers = build_layers(snap, RenderStyle(show_apparatus=False))
    assert [layer.name for layer in layers] == ["trace"]


def test_origin_translation_and_colors() -> None:
    style = RenderStyle()
    group = _group(20)
    layers = _by_name(build_layers(group.snapshot(), style, origin=(50.0, 40.0)))

    outer = layers["outer"].geometry.coords
    center = (outer.max(axis=0) + outer.min(axis=0)) / 2.0
    np.testing.assert_allclose(center[:2], [50.0, 40.0], atol=1e-4)

    trace = layers["trace"]
    tracker = group.trackers[0]
    np.testing.assert_allclose(
        trace.geometry.coords, tracker.trace_points + [50.0, 40.0, 0.0], rtol=1e-6, atol=1e-4
    )
    assert trace.color == style.trace_color
    assert trace.thickness == style.trace_thickness
    assert layers["outer"].thickness == style.line_thickness


def test_arm_spans_hub_to_trace_point() -> None:
    group = _group(7)
    arm = _by_name(build_layers(group.snapshot(), RenderStyle()))["arm"].geometry.coords
    tracker = group.trackers[0]
    np.testing.assert_allclose(arm[0], tracker.inner_frame.position, atol=1e-5)
    np.testing.assert_allclose(arm[1], tracker.point_frame.position, atol=1e-5)


def test_roles_are_merged_across_trackers() -> None:
    lines = collect_lines(_group(5, count=2).snapshot(), RenderStyle())
    assert len(lines["outer"]) == 2
    assert len(lines["trace"]) == 2
    layers = _by_name(build_layers(_group(5, count=2).snapshot(), RenderStyle(circle_segments=16)))
    assert layers["outer"].geometry.n_lines == 2
    assert layers["outer"].geometry.n_vertices == 2 * 17
