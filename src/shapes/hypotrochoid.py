"""
どこで: `shapes.hypotrochoid`
何を: 外円 R の内側を転がる半径 r の円に固定した、中心から距離 d の点が描く閉形式曲線。
      d == r でハイポサイクロイド。
なぜ: 逐次回転で積み上げるトラッカーの軌跡と、オフセット曲線（d = r + offset）を
      解析解と突き合わせる参照曲線として使うため。

    x(θ) = (R - r) cos θ + d cos((R - r) / r · θ)
    y(θ) = (R - r) sin θ - d sin((R - r) / r · θ)
"""

from __future__ import annotations

import numpy as np


def hypotrochoid_at(
    outer_radius: float,
    inner_radius: float,
    distance: float,
    theta: np.ndarray,
) -> np.ndarray:
    """公転角 `theta`（配列）での曲線上の点 (N, 3) float64 を返す（Z=0）。

    Raises
    ------
    ValueError
        `inner_radius` が 0 の場合。
    """
    if inner_radius == 0:
        raise ValueError("inner_radius must be non-zero")
    th = np.asarray(theta, dtype=np.float64).reshape(-1)
    R, r, d = float(outer_radius), float(inner_radius), float(distance)
    k = (R - r) / r
    out = np.zeros((th.size, 3), dtype=np.float64)
    out[:, 0] = (R - r) * np.cos(th) + d * np.cos(k * th)
    out[:, 1] = (R - r) * np.sin(th) - d * np.sin(k * th)
    return out

