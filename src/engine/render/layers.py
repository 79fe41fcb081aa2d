"""
どこで: `engine.render.layers`
何を: `GroupSnapshot` を役割ごと（外円/内円/アーム/伴走曲線/軌跡）の `Layer` 列へ変換する。
なぜ: スナップショット → ポリラインの変換を GPU から切り離した純関数にし、
      GL なしで検証できるようにするため。同じ役割は全トラッカー分を 1 レイヤーへまとめる。
"""

from __future__ import annotations

import numpy as np

from engine.core.geometry import Geometry, circle_points
from engine.kinematics.snapshot import GroupSnapshot, TrackerSnapshot

from .style import RenderStyle
from .types import Layer

# 描画順（後ろほど手前）
LAYER_ORDER = ("outer", "inner", "arm", "inferior", "superior", "trace")


def _apparatus_lines(ts: TrackerSnapshot, segments: int) -> dict[str, np.ndarray]:
    poses = ts.poses
    outer = poses.outer.transform_points(circle_points(ts.outer_radius, segments))
    inner = poses.inner.transform_points(circle_points(ts.inner_radius, segments))
    arm = np.stack([poses.inner.position, poses.point.position])
    return {"outer": outer, "inner": inner, "arm": arm}


def collect_lines(snapshot: GroupSnapshot, style: RenderStyle) -> dict[str, list[np.ndarray]]:
    """役割名 → ポリライン列（float64, ワールド座標）を返す。"""
    lines: dict[str, list[np.ndarray]] = {role: [] for role in LAYER_ORDER}
    for ts in snapshot.trackers:
        if style.show_apparatus:
            for role, pts in _apparatus_lines(ts, style.circle_segments).items():
                lines[role].append(pts)
        if len(ts.trace_points) >= 2:
            lines["trace"].append(ts.trace_points)
            if snapshot.show_offsets and ts.has_offsets:
                lines["inferior"].append(ts.inferior)  # type: ignore[arg-type]
                lines["superior"].append(ts.superior)  # type: ignore[arg-type]
    return lines


def build_layers(
    snapshot: GroupSnapshot,
    style: RenderStyle,
    *,
    origin: tuple[float, float] = (0.0, 0.0),
) -> list[Layer]:
    """スナップショットから描画レイヤー列を作る（空の役割は含めない）。

    Parameters
    ----------
    snapshot : GroupSnapshot
        描画対象のスナップショット。
    style : RenderStyle
        色/太さ/装置表示の設定。
    origin : tuple[float, float]
        ワールド原点を置くキャンバス座標（通常はキャンバス中心）。
    """
    ox, oy = origin
    colors = {
        "outer": style.outer_color,
        "inner": style.inner_color,
        "arm": style.arm_color,
        "inferior": style.inferior_color,
        "superior": style.superior_color,
        "trace": style.trace_color,
    }
    layers: list[Layer] = []
    for role, polylines in collect_lines(snapshot, style).items():
        if not polylines:
            continue
        geometry = Geometry.from_lines(polylines).translate(ox, oy)
        thickness = style.trace_thickness if role == "trace" else style.line_thickness
        layers.append(Layer(geometry=geometry, color=colors[role], thickness=thickness, name=role))
    return layers


__all__ = ["LAYER_ORDER", "collect_lines", "build_layers"]
