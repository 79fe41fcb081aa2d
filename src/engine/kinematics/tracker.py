"""
どこで: `engine.kinematics.tracker`（運動学コアの中心）。
何を: 外円/内円/アーム/トレース点の 4 フレームを保持し、1 tick ごとに
      「公転 → 自転 → 正規化 → 追記」を行う `KinematicTracker`。
なぜ: 回転の合成順・回転軸・ドリフト対策を 1 箇所に集約し、生成される曲線が
      数学的に正しいハイポサイクロイド（ハイポトロコイド）になることを保証するため。

幾何（開始状態: 内円が外円の縁に内接し、トレース点は縁上）:

    outer ──(R - r)──> inner ──(r/2)──> arm ──(r/2)──> point
      ●──────────────────○────────────────◇────────────────×    → ローカル +X

1 tick の処理（`advance()`）:
1. 公転: 外円中心を通る基準軸（外円のローカル +Z = 外円平面の法線）まわりに
   `revolution_rate` 回し、inner/arm/point に同じ回転を適用（点まわり回転）。
2. 自転: 同じ軸（EVOLVING_LOCAL_AXIS ではアームの現在ローカル軸）まわりに
   `spin_rate` を、公転後の内円中心を通して arm/point のみに適用。
   内円自身の自転は中心位置を動かさないため適用しない。
3. 変更した全フレームの姿勢を正規化（逸脱が閾値超なら警告ログ）。
4. `point_frame` の位置を `trace_points` に追記。
5. アームの「腕方向」（ローカル +X）を `trace_forward_vectors` に追記。

事後条件: `len(trace_points) == len(trace_forward_vectors)`。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from common.settings import get as get_settings
from common.types import Vec3

from ..core import quaternion as quat
from ..core.rigid_frame import GeometricFrame
from .errors import DegenerateState, InconsistentBuffers, InvalidConfiguration
from .gearing import RollingConstraintSolver
from .trace_buffer import TraceBuffer

logger = logging.getLogger(__name__)

LOCAL_RADIAL_AXIS: Vec3 = (1.0, 0.0, 0.0)
LOCAL_NORMAL_AXIS: Vec3 = (0.0, 0.0, 1.0)
DEFAULT_LOCAL_SPIN_AXIS: Vec3 = (0.0, 1.0, 0.0)


class AxisMode(Enum):
    """回転軸の選び方（生成時に 1 度だけ決定し、tick ごとには再判定しない）。"""

    FIXED_AXIS = "fixed"  # 平面ハイポサイクロイド（既定）
    EVOLVING_LOCAL_AXIS = "evolving"  # 自転軸がアームの姿勢に追従する非平面変種

    @classmethod
    def parse(cls, value: "AxisMode | str") -> "AxisMode":
        if isinstance(value, AxisMode):
            return value
        key = str(value).strip().lower()
        for mode in cls:
            if key in (mode.value, mode.name.lower()):
                return mode
        raise InvalidConfiguration(f"unknown axis mode: {value!r}")


@dataclass(frozen=True)
class TrackerPoses:
    """描画側へ渡す 4 フレームのコピー（読み取り専用の意図）。"""

    outer: GeometricFrame
    inner: GeometricFrame
    arm: GeometricFrame
    point: GeometricFrame


def _require_finite(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise InvalidConfiguration(f"{name} must be finite, got {value!r}")
    return v


class KinematicTracker:
    """内転する円上の点の軌跡を tick 単位で積み上げるトラッカー。

    Parameters
    ----------
    inner_radius : float
        転がる内円の半径 `r`（`0 < r < R`）。
    outer_radius : float
        固定された外円の半径 `R`。
    starting_pose : GeometricFrame | None
        外円の中心と姿勢。None で原点・恒等姿勢。
    revolution_rate : float | None
        1 tick あたりの公転角 [rad]。None で設定値 `HYPO_REVOLUTION_RATE`。
        `rate_bounds` へクランプする。
    inferior_radius, superior_radius : float | None
        内側（負）/外側（正）のオフセット曲線の符号付き距離。None で `∓ r / 2`。
    axis_mode : AxisMode | str | None
        回転軸モード。None で設定値 `HYPO_AXIS_MODE`。
    local_spin_axis : Vec3
        EVOLVING_LOCAL_AXIS で自転軸に用いるアームのローカル軸。
    rate_bounds : tuple[float, float] | None
        `set_revolution_rate` のクランプ範囲。None で設定値 `HYPO_RATE_MIN/MAX`。
    name : str | None
        ログ表示用の名前。

    Raises
    ------
    InvalidConfiguration
        半径が 0/負/非有限、または `inner_radius >= outer_radius` の場合。
    """

    def __init__(
        self,
        inner_radius: float,
        outer_radius: float,
        starting_pose: GeometricFrame | None = None,
        *,
        revolution_rate: float | None = None,
        inferior_radius: float | None = None,
        superior_radius: float | None = None,
        axis_mode: AxisMode | str | None = None,
        local_spin_axis: Vec3 = DEFAULT_LOCAL_SPIN_AXIS,
        rate_bounds: tuple[float, float] | None = None,
        name: str | None = None,
    ) -> None:
        settings = get_settings()
        r = _require_finite("inner_radius", inner_radius)
        big_r = _require_finite("outer_radius", outer_radius)
        if r <= 0.0 or big_r <= 0.0:
            raise InvalidConfiguration(f"radii must be positive, got r={r}, R={big_r}")
        if r >= big_r:
            raise InvalidConfiguration(
                f"inner_radius must be smaller than outer_radius, got r={r}, R={big_r}"
            )

        self._solver = RollingConstraintSolver(outer_radius=big_r, inner_radius=r)
        self._inferior_radius = _require_finite(
            "inferior_radius", -0.5 * r if inferior_radius is None else inferior_radius
        )
        self._superior_radius = _require_finite(
            "superior_radius", 0.5 * r if superior_radius is None else superior_radius
        )
        self._axis_mode = AxisMode.parse(settings.AXIS_MODE if axis_mode is None else axis_mode)
        spin_axis = np.asarray(local_spin_axis, dtype=np.float64)
        if spin_axis.shape != (3,) or not np.all(np.isfinite(spin_axis)) or not spin_axis.any():
            raise InvalidConfiguration(
                f"local_spin_axis must be a non-zero 3-vector: {local_spin_axis!r}"
            )
        self._local_spin_axis = spin_axis
        lo, hi = rate_bounds if rate_bounds is not None else (settings.RATE_MIN, settings.RATE_MAX)
        if lo > hi:
            raise InvalidConfiguration(f"rate_bounds must satisfy min <= max, got {(lo, hi)}")
        self._rate_bounds = (float(lo), float(hi))
        self._norm_tolerance = float(settings.NORM_TOLERANCE)
        self.name = name or f"tracker@{id(self):x}"
        self.set_revolution_rate(
            settings.REVOLUTION_RATE if revolution_rate is None else revolution_rate
        )

        # 外円は生成後不変
        self._outer = starting_pose.copy() if starting_pose is not None else GeometricFrame()
        if not self._outer.is_finite():
            raise InvalidConfiguration("starting_pose must be finite")
        self._outer.normalize()
        self._normal_axis = self._outer.local_axis(LOCAL_NORMAL_AXIS)

        self._initial_inner, self._initial_arm, self._initial_point = self._initial_frames()
        self._inner = self._initial_inner.copy()
        self._arm = self._initial_arm.copy()
        self._point = self._initial_point.copy()

        self._points = TraceBuffer()
        self._forwards = TraceBuffer()
        self._revolution_angle = 0.0
        self._spin_angle = 0.0
        self._tick_count = 0
        self._halted = False

    def _initial_frames(self) -> tuple[GeometricFrame, GeometricFrame, GeometricFrame]:
        """「外円の縁から内接して転がり始める」配置の 3 フレームを作る。"""
        big_r = self.outer_radius
        r = self.inner_radius
        q0 = self._outer.orientation
        inner = GeometricFrame(self._outer.offset_along(LOCAL_RADIAL_AXIS, big_r - r), q0)
        arm = GeometricFrame(self._outer.offset_along(LOCAL_RADIAL_AXIS, big_r - 0.5 * r), q0)
        point = GeometricFrame(self._outer.offset_along(LOCAL_RADIAL_AXIS, big_r), q0)
        return inner, arm, point

    # ── 読み出し ───────────────────
    @property
    def inner_radius(self) -> float:
        return float(self._solver.inner_radius)

    @property
    def outer_radius(self) -> float:
        return float(self._solver.outer_radius)

    @property
    def solver(self) -> RollingConstraintSolver:
        return self._solver

    @property
    def revolution_rate(self) -> float:
        return self._revolution_rate

    @property
    def spin_rate(self) -> float:
        return self._solver.spin_rate(self._revolution_rate)

    @property
    def rate_bounds(self) -> tuple[float, float]:
        return self._rate_bounds

    @property
    def inferior_radius(self) -> float:
        return self._inferior_radius

    @property
    def superior_radius(self) -> float:
        return self._superior_radius

    @property
    def axis_mode(self) -> AxisMode:
        return self._axis_mode

    @property
    def outer_frame(self) -> GeometricFrame:
        return self._outer.copy()

    @property
    def inner_frame(self) -> GeometricFrame:
        return self._inner.copy()

    @property
    def arm_frame(self) -> GeometricFrame:
        return self._arm.copy()

    @property
    def point_frame(self) -> GeometricFrame:
        return self._point.copy()

    def poses(self) -> TrackerPoses:
        return TrackerPoses(
            outer=self._outer.copy(),
            inner=self._inner.copy(),
            arm=self._arm.copy(),
            point=self._point.copy(),
        )

    @property
    def trace_points(self) -> np.ndarray:
        """トレース点列 `(N, 3)` の読み取り専用ビュー。"""
        return self._points.view()

    @property
    def trace_forward_vectors(self) -> np.ndarray:
        """腕方向の単位ベクトル列 `(N, 3)` の読み取り専用ビュー。"""
        return self._forwards.view()

    def trace_snapshot(self) -> tuple[np.ndarray, np.ndarray]:
        """`(trace_points, trace_forward_vectors)` の独立コピー。"""
        self.check_buffers()
        return self._points.snapshot(), self._forwards.snapshot()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def revolution_angle(self) -> float:
        """生成/リセット以降の累積公転角 [rad]。"""
        return self._revolution_angle

    @property
    def spin_angle(self) -> float:
        """生成/リセット以降の累積自転角 [rad]。"""
        return self._spin_angle

    @property
    def halted(self) -> bool:
        return self._halted

    def __len__(self) -> int:
        return len(self._points)

    def check_buffers(self) -> None:
        """対になるバッファ長の一致を検証する。"""
        n_p, n_f = len(self._points), len(self._forwards)
        if n_p != n_f:
            raise InconsistentBuffers(n_p, n_f)

    # ── 入力/設定 ──────────────────
    def set_revolution_rate(self, rate: float) -> float:
        """公転角速度を `rate_bounds` にクランプして設定し、適用値を返す。"""
        value = _require_finite("revolution_rate", rate)
        lo, hi = self._rate_bounds
        clamped = min(hi, max(lo, value))
        if clamped != value:
            logger.debug("%s: revolution_rate %.6g clamped to %.6g", self.name, value, clamped)
        self._revolution_rate = clamped
        return clamped

    def reset(self) -> None:
        """バッファを破棄し、フレーム/累積角を初期状態へ戻す（停止状態も解除）。"""
        self._inner = self._initial_inner.copy()
        self._arm = self._initial_arm.copy()
        self._point = self._initial_point.copy()
        self._points.clear()
        self._forwards.clear()
        self._revolution_angle = 0.0
        self._spin_angle = 0.0
        self._tick_count = 0
        self._halted = False

    # ── 1 tick ───────────────────
    def _spin_axis(self) -> np.ndarray:
        if self._axis_mode is AxisMode.EVOLVING_LOCAL_AXIS:
            return self._arm.local_axis(self._local_spin_axis)
        return self._normal_axis

    def advance(self) -> None:
        """1 tick 進める。

        Raises
        ------
        DegenerateState
            更新後のフレームが非有限になった場合、または停止済みトラッカーで呼んだ場合。
        """
        if self._halted:
            raise DegenerateState(
                f"{self.name} is halted; reset() before advancing", tick=self._tick_count
            )

        revolution_rate = self._revolution_rate
        spin_rate = self._solver.spin_rate(revolution_rate)

        # 1) 公転: 外円中心まわりに inner/arm/point をまとめて回す
        revolution = quat.from_axis_angle(self._normal_axis, revolution_rate)
        center = self._outer.position
        for frame in (self._inner, self._arm, self._point):
            frame.rotate_around(center, revolution)

        # 2) 自転: 公転後の内円中心まわりに arm/point のみを回す
        spin_axis = self._spin_axis()
        if not np.all(np.isfinite(spin_axis)):
            self._halt("non-finite spin axis")
        spin = quat.from_axis_angle(spin_axis, spin_rate)
        hub = self._inner.position
        for frame in (self._arm, self._point):
            frame.rotate_around(hub, spin)

        # 3) 正規化（ドリフト監視）
        for label, frame in (("inner", self._inner), ("arm", self._arm), ("point", self._point)):
            deviation = frame.normalize()
            if deviation > self._norm_tolerance:
                logger.warning(
                    "%s: %s orientation drifted by %.3e before normalization (tick %d)",
                    self.name,
                    label,
                    deviation,
                    self._tick_count,
                )
            if not frame.is_finite():
                self._halt(f"{label} frame became non-finite")

        forward = self._arm.local_axis(LOCAL_RADIAL_AXIS)
        if not np.all(np.isfinite(forward)):
            self._halt("non-finite forward vector")

        # 4) 5) 追記
        self._points.append(self._point.position)
        self._forwards.append(forward)
        self._revolution_angle += revolution_rate
        self._spin_angle += spin_rate
        self._tick_count += 1
        self.check_buffers()

    def _halt(self, reason: str) -> None:
        self._halted = True
        raise DegenerateState(
            f"{self.name}: {reason} at tick {self._tick_count}", tick=self._tick_count
        )

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return (
            f"KinematicTracker(name={self.name!r}, r={self.inner_radius:.4g}, "
            f"R={self.outer_radius:.4g}, rate={self._revolution_rate:.4g}, "
            f"mode={self._axis_mode.value}, N={len(self)})"
        )


__all__ = [
    "AxisMode",
    "KinematicTracker",
    "TrackerPoses",
    "LOCAL_RADIAL_AXIS",
    "LOCAL_NORMAL_AXIS",
    "DEFAULT_LOCAL_SPIN_AXIS",
]
