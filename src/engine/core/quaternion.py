"""
どこで: `engine.core` の四元数ユーティリティ。
何を: 単位四元数 `(w, x, y, z)`（float64 ndarray）の生成・合成・正規化・ベクトル回転。
なぜ: 剛体フレームの姿勢を行列でなく四元数で保持し、小回転の累積でも正規化だけで
      ドリフトを抑えられるようにするため。

規約:
- 配列形状は `(4,)`、並びは `(w, x, y, z)`。
- 合成 `multiply(a, b)` は「先に b、次に a」を適用する回転（Hamilton 積）。
- 角度はラジアン、右手系。
"""

from __future__ import annotations

import numpy as np

from common.types import Quat, Vec3

QuatLike = np.ndarray | Quat
VecLike = np.ndarray | Vec3


def identity() -> np.ndarray:
    """恒等回転を返す。"""
    return np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)


def as_quat(q: QuatLike) -> np.ndarray:
    """入力を `(4,)` float64 へ正規化（値の正規化は行わない）。"""
    arr = np.asarray(q, dtype=np.float64)
    if arr.shape != (4,):
        raise ValueError(f"quaternion must have shape (4,), got {arr.shape}")
    return arr


def from_axis_angle(axis: VecLike, angle: float) -> np.ndarray:
    """軸 `axis` 回りに `angle` [rad] 回す単位四元数を返す。

    Raises
    ------
    ValueError
        軸の長さが 0 の場合。
    """
    a = np.asarray(axis, dtype=np.float64)
    n = float(np.linalg.norm(a))
    if n == 0.0:
        raise ValueError("rotation axis must be non-zero")
    a = a / n
    half = 0.5 * float(angle)
    s = np.sin(half)
    return np.array([np.cos(half), a[0] * s, a[1] * s, a[2] * s], dtype=np.float64)


def multiply(a: QuatLike, b: QuatLike) -> np.ndarray:
    """Hamilton 積 `a * b`。"""
    aw, ax, ay, az = as_quat(a)
    bw, bx, by, bz = as_quat(b)
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ],
        dtype=np.float64,
    )


def conjugate(q: QuatLike) -> np.ndarray:
    w, x, y, z = as_quat(q)
    return np.array([w, -x, -y, -z], dtype=np.float64)


def norm(q: QuatLike) -> float:
    return float(np.linalg.norm(as_quat(q)))


def normalize(q: QuatLike) -> np.ndarray:
    """単位長へ正規化する。

    ノルム 0 や非有限値の入力は NaN/Inf を含む配列になる（呼び出し側で検出する）。
    """
    arr = as_quat(q)
    n = np.linalg.norm(arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        return arr / n


def rotate_vector(q: QuatLike, v: VecLike) -> np.ndarray:
    """単位四元数 `q` でベクトル `v` を回転する。

    `v' = v + 2w (u × v) + 2 u × (u × v)`（u は虚部）。
    """
    qa = as_quat(q)
    w = qa[0]
    u = qa[1:]
    vec = np.asarray(v, dtype=np.float64)
    t = 2.0 * np.cross(u, vec)
    return vec + w * t + np.cross(u, t)


def rotate_vectors(q: QuatLike, vs: np.ndarray) -> np.ndarray:
    """`(N, 3)` の点列をまとめて回転する（`rotate_vector` のベクトル化版）。"""
    qa = as_quat(q)
    w = qa[0]
    u = qa[1:]
    pts = np.asarray(vs, dtype=np.float64)
    if pts.size == 0:
        return pts.reshape(0, 3)
    t = 2.0 * np.cross(u, pts)
    return pts + w * t + np.cross(u, t)


__all__ = [
    "identity",
    "as_quat",
    "from_axis_angle",
    "multiply",
    "conjugate",
    "norm",
    "normalize",
    "rotate_vector",
    "rotate_vectors",
]
