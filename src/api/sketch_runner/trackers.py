"""
どこで: `api.sketch_runner.trackers`
何を: 設定ファイルの `trackers:` リストから `KinematicTracker` を組み立て、`TrackerGroup` にまとめる。
なぜ: 半径/公転角速度/オフセット/回転軸モード/初期姿勢の解釈を 1 箇所に集め、
      ランナー本体を薄く保つため。

設定例:
    trackers:
      - name: main
        inner_radius: 15.0
        outer_radius: 37.682716
        revolution_rate: -0.05
        center: [0, 0, 0]
        tilt: {axis: [1, 0, 0], angle_deg: 0}
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from engine.core import quaternion as quat
from engine.core.rigid_frame import GeometricFrame
from engine.kinematics import InvalidConfiguration, KinematicTracker, TrackerGroup

# 既定トラッカー（内円 15、外円/内円の歯数比 31 : 12.3398748789）
DEFAULT_INNER_RADIUS = 15.0
DEFAULT_OUTER_RADIUS = 15.0 * 31.0 / 12.3398748789

_TRACKER_KEYS = {
    "name",
    "inner_radius",
    "outer_radius",
    "revolution_rate",
    "inferior_radius",
    "superior_radius",
    "axis_mode",
    "local_spin_axis",
    "center",
    "tilt",
}


def _vec3(value: Any, label: str) -> tuple[float, float, float]:
    try:
        seq = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{label} must be a numeric sequence: {value!r}") from e
    if len(seq) == 2:
        seq.append(0.0)
    if len(seq) != 3:
        raise InvalidConfiguration(f"{label} must have 2 or 3 components: {value!r}")
    return seq[0], seq[1], seq[2]


def starting_pose_from_config(cfg: Mapping[str, Any]) -> GeometricFrame | None:
    """`center` と `tilt`（軸 + 角度[deg]）から外円の初期姿勢を作る。どちらも無ければ None。"""
    center = cfg.get("center")
    tilt = cfg.get("tilt")
    if center is None and tilt is None:
        return None
    position = _vec3(center, "center") if center is not None else (0.0, 0.0, 0.0)
    orientation = quat.identity()
    if tilt is not None:
        if not isinstance(tilt, Mapping):
            raise InvalidConfiguration(f"tilt must be a mapping with axis/angle_deg: {tilt!r}")
        axis = _vec3(tilt.get("axis", (1.0, 0.0, 0.0)), "tilt.axis")
        angle = math.radians(float(tilt.get("angle_deg", 0.0)))
        try:
            orientation = quat.from_axis_angle(axis, angle)
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
    return GeometricFrame(position, orientation)


def tracker_from_config(cfg: Mapping[str, Any], *, index: int = 0) -> KinematicTracker:
    """1 件分の設定からトラッカーを生成する。

    Raises
    ------
    InvalidConfiguration
        未知キー、数値でない値、または半径の制約違反。
    """
    unknown = set(cfg) - _TRACKER_KEYS
    if unknown:
        raise InvalidConfiguration(f"unknown tracker option(s): {sorted(unknown)}")
    spin_axis = cfg.get("local_spin_axis")
    kwargs: dict[str, Any] = {
        "revolution_rate": cfg.get("revolution_rate"),
        "inferior_radius": cfg.get("inferior_radius"),
        "superior_radius": cfg.get("superior_radius"),
        "axis_mode": cfg.get("axis_mode"),
        "name": str(cfg.get("name") or f"tracker{index}"),
    }
    if spin_axis is not None:
        kwargs["local_spin_axis"] = _vec3(spin_axis, "local_spin_axis")
    try:
        inner = float(cfg.get("inner_radius", DEFAULT_INNER_RADIUS))
        outer = float(cfg.get("outer_radius", DEFAULT_OUTER_RADIUS))
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"radii must be numbers: {dict(cfg)!r}") from e
    return KinematicTracker(inner, outer, starting_pose_from_config(cfg), **kwargs)


def build_group(
    tracker_cfgs: Iterable[Mapping[str, Any]] | None,
    *,
    show_offsets: bool | None = None,
) -> TrackerGroup:
    """設定リストから `TrackerGroup` を作る（空/None なら既定トラッカー 1 本）。"""
    cfgs = list(tracker_cfgs or ())
    if not cfgs:
        cfgs = [{"name": "main"}]
    trackers = [tracker_from_config(c, index=i) for i, c in enumerate(cfgs)]
    return TrackerGroup(trackers, show_offsets=show_offsets)


__all__ = [
    "DEFAULT_INNER_RADIUS",
    "DEFAULT_OUTER_RADIUS",
    "starting_pose_from_config",
    "tracker_from_config",
    "build_group",
]
