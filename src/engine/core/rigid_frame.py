"""
どこで: `engine.core` の剛体フレーム。
何を: 位置（3 ベクトル）と姿勢（単位四元数）を持つ `GeometricFrame` と、
      任意点・任意軸まわりの回転（rotate-around-point）、姿勢の正規化を提供。
なぜ: 転がり円の各構成要素（外円/内円/アーム/トレース点）を親子階層に頼らず
      独立したフレームとして持ち、同じ回転を明示的に適用できるようにするため。

不変条件:
- `orientation` は正規化直後に単位ノルム（許容誤差内）。小回転の合成はドリフトを
  累積するため、複合回転の後は必ず `normalize()` を呼ぶ（呼び出し側の責務）。
"""

from __future__ import annotations

import numpy as np

from common.types import Vec3

from . import quaternion as quat
from .quaternion import QuatLike, VecLike


class GeometricFrame:
    """位置 + 姿勢の剛体変換（可変）。

    読み出し用の `position`/`orientation` はコピーを返す。内部状態の変更は
    `rotate_around`/`normalize`/`set_pose` のみで行う。
    """

    __slots__ = ("_position", "_orientation")

    def __init__(
        self,
        position: VecLike = (0.0, 0.0, 0.0),
        orientation: QuatLike | None = None,
    ) -> None:
        pos = np.asarray(position, dtype=np.float64)
        if pos.shape != (3,):
            raise ValueError(f"position must have shape (3,), got {pos.shape}")
        self._position = pos.copy()
        if orientation is None:
            self._orientation = quat.identity()
        else:
            self._orientation = quat.as_quat(orientation).copy()

    # ── 読み出し ───────────────────
    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def orientation(self) -> np.ndarray:
        return self._orientation.copy()

    def position_tuple(self) -> Vec3:
        x, y, z = self._position
        return float(x), float(y), float(z)

    def local_axis(self, axis: VecLike) -> np.ndarray:
        """ローカル軸 `axis` を現在姿勢でワールドへ写した単位ベクトル。"""
        v = quat.rotate_vector(self._orientation, axis)
        n = np.linalg.norm(v)
        with np.errstate(divide="ignore", invalid="ignore"):
            return v / n

    def offset_along(self, axis: VecLike, distance: float) -> np.ndarray:
        """ローカル軸方向へ `distance` だけ離れたワールド座標。"""
        return self._position + self.local_axis(axis) * float(distance)

    def transform_points(self, local_points: np.ndarray) -> np.ndarray:
        """ローカル座標 `(N, 3)` をワールド座標へ変換する（回転 → 平行移動）。"""
        return quat.rotate_vectors(self._orientation, local_points) + self._position

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._position)) and np.all(np.isfinite(self._orientation)))

    def orientation_error(self) -> float:
        """`| |q| - 1 |` を返す。"""
        return abs(quat.norm(self._orientation) - 1.0)

    # ── 変更 ──────────────────────
    def rotate_around(self, pivot: VecLike, rotation: QuatLike) -> None:
        """ワールド点 `pivot` を中心に `rotation` を適用する（その場回転ではない）。

        位置は pivot まわりに公転し、姿勢は `rotation * orientation` に更新される。
        正規化は行わない。
        """
        p = np.asarray(pivot, dtype=np.float64)
        self._position = p + quat.rotate_vector(rotation, self._position - p)
        self._orientation = quat.multiply(rotation, self._orientation)

    def normalize(self) -> float:
        """姿勢を単位長へ正規化し、正規化前のノルム逸脱量を返す。"""
        before = self.orientation_error()
        self._orientation = quat.normalize(self._orientation)
        return before

    def set_pose(self, position: VecLike, orientation: QuatLike) -> None:
        self._position = np.asarray(position, dtype=np.float64).copy()
        self._orientation = quat.as_quat(orientation).copy()

    def copy(self) -> "GeometricFrame":
        return GeometricFrame(self._position, self._orientation)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        px, py, pz = self._position
        w, x, y, z = self._orientation
        return (
            f"GeometricFrame(pos=({px:.4g}, {py:.4g}, {pz:.4g}), "
            f"q=({w:.4g}, {x:.4g}, {y:.4g}, {z:.4g}))"
        )


__all__ = ["GeometricFrame"]
