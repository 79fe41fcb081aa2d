"""
どこで: `engine.kinematics.offset`
何を: トレース点列と腕方向ベクトル列から、一定距離だけずらした伴走曲線を作る。
なぜ: 主軌跡に対する内側/外側の伴走トロコイドを、キャッシュなしの純関数として
      描画フレームごとに再計算できるようにするため（長さに対して線形）。

`offset[i] = trace_points[i] + radius_offset * trace_forward_vectors[i]`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .errors import InconsistentBuffers

if TYPE_CHECKING:
    from .tracker import KinematicTracker


def build_offset_arrays(
    points: np.ndarray, forward_vectors: np.ndarray, radius_offset: float
) -> np.ndarray:
    """配列レベルのオフセット計算。

    Parameters
    ----------
    points : np.ndarray
        `(N, 3)` のトレース点列。
    forward_vectors : np.ndarray
        `(N, 3)` の単位方向列（`points` と index で対応）。
    radius_offset : float
        符号付きオフセット距離（負で内側）。

    Returns
    -------
    np.ndarray
        新しい `(N, 3)` float64 配列。

    Raises
    ------
    InconsistentBuffers
        2 つの列の長さが一致しない場合。
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    fwd = np.asarray(forward_vectors, dtype=np.float64).reshape(-1, 3)
    if pts.shape[0] != fwd.shape[0]:
        raise InconsistentBuffers(pts.shape[0], fwd.shape[0])
    if radius_offset == 0.0:
        return pts.copy()
    return pts + float(radius_offset) * fwd


def build_offset(tracker: "KinematicTracker", radius_offset: float) -> np.ndarray:
    """トラッカーの現在のバッファからオフセット曲線を作る（`len == len(trace_points)`）。"""
    return build_offset_arrays(tracker.trace_points, tracker.trace_forward_vectors, radius_offset)


def build_companions(tracker: "KinematicTracker") -> tuple[np.ndarray, np.ndarray]:
    """`(inferior, superior)` の 2 本をトラッカーの符号付き半径で作る。"""
    points = tracker.trace_points
    forwards = tracker.trace_forward_vectors
    return (
        build_offset_arrays(points, forwards, tracker.inferior_radius),
        build_offset_arrays(points, forwards, tracker.superior_radius),
    )


__all__ = ["build_offset", "build_offset_arrays", "build_companions"]
