"""
ポリライン集合 Geometry 型（描画境界の中核モジュール）

本モジュールは、軌跡・オフセット曲線・装置（外円/内円/アーム）を GPU へ渡すための
唯一の線表現 `Geometry` を提供する。運動学コアは float64 の (N,3) 配列で状態を持ち、
描画直前にだけ本型へ正規化する。

データモデル（不変条件）:
- `coords: float32 ndarray (N, 3)` — 全頂点を 1 本の連続メモリで保持（行は XYZ）。
- `offsets: int32 ndarray (M+1,)` — 各ポリラインの開始 index（末尾は必ず N）。
- i 本目の線分配列は `coords[offsets[i] : offsets[i+1]]` で取り出せる。
- 入力が 2D の場合は Z を 0 で補う。

直感図（2 本のポリライン: 線0は3点、線1は2点）:

    coords (N=5): [[0,0,0], [1,0,0], [1,1,0], [2,2,0], [3,2,0]]
    offsets (M+1=3): [0, 3, 5]
    線0 = coords[0:3], 線1 = coords[3:5]

補足:
- 空ジオメトリは `coords.shape==(0,3)`, `offsets==[0]`（線本数 M=0）。
- 単頂点の線も許容する（描画時は線分を作らない）。
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

NumberLike = float | int
LineLike = np.ndarray | Sequence[NumberLike] | Sequence[Sequence[NumberLike]]


def _normalize_geometry_input(
    coords: np.ndarray,
    offsets: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """`Geometry` 生成時の内部正規化ヘルパ。"""

    coords_arr = np.ascontiguousarray(coords, dtype=np.float32)
    if coords_arr.ndim != 2 or coords_arr.shape[1] != 3:
        raise ValueError("coords は形状 (N, 3) の配列である必要があります。")

    offsets_arr = np.ascontiguousarray(offsets, dtype=np.int32)
    if offsets_arr.ndim != 1 or offsets_arr.size == 0:
        raise ValueError("offsets は 1 要素以上の 1 次元配列である必要があります。")
    if offsets_arr[0] != 0:
        raise ValueError("offsets[0] は常に 0 である必要があります。")
    if offsets_arr[-1] != coords_arr.shape[0]:
        raise ValueError("offsets[-1] は coords の行数と一致する必要があります。")
    if np.any(np.diff(offsets_arr) < 0):
        raise ValueError("offsets は単調非減少である必要があります。")
    return coords_arr, offsets_arr


class Geometry:
    """ポリライン集合（不変）。

    フィールド:
    - `coords (N,3) float32`: すべての点列を連結した配列。
    - `offsets (M+1,) int32`: 各ポリラインの開始 index（末尾は N）。
    """

    __slots__ = ("coords", "offsets")

    coords: np.ndarray
    offsets: np.ndarray

    def __init__(self, coords: np.ndarray, offsets: np.ndarray) -> None:
        norm_coords, norm_offsets = _normalize_geometry_input(coords, offsets)
        self.coords = norm_coords
        self.offsets = norm_offsets

    # ── ファクトリ ───────────────────
    @classmethod
    def empty(cls) -> "Geometry":
        return cls(np.empty((0, 3), dtype=np.float32), np.array([0], dtype=np.int32))

    @classmethod
    def from_lines(cls, lines: Iterable[LineLike]) -> "Geometry":
        """線分集合を統一表現に正規化して `Geometry` を生成する。

        Parameters
        ----------
        lines : Iterable[LineLike]
            各要素は座標列。形状は `(K, 2)`（Z=0 を補完）、`(K, 3)`、または
            `(3K,)` の 1 次元ベクトル（`(x, y, z)` の並び）。

        Returns
        -------
        Geometry

        Raises
        ------
        ValueError
            形状がいずれにも適合しない場合。
        """
        np_lines: list[np.ndarray] = []
        for line in lines:
            arr = np.asarray(line, dtype=np.float32)
            if arr.ndim == 1:
                if arr.size % 3 != 0:
                    raise ValueError(
                        "1次元入力の長さは3の倍数である必要があります（(x, y, z) の並び）"
                    )
                arr = arr.reshape(-1, 3)
            elif arr.ndim != 2:
                raise ValueError(f"座標配列の形状が不正です: {arr.shape}")
            elif arr.shape[1] == 2:
                arr = np.hstack([arr, np.zeros((arr.shape[0], 1), dtype=np.float32)])
            elif arr.shape[1] != 3:
                raise ValueError(f"座標配列の形状が不正です: {arr.shape}")
            np_lines.append(arr)

        if not np_lines:
            return cls.empty()

        offsets = np.zeros(len(np_lines) + 1, dtype=np.int32)
        offsets[1:] = np.cumsum([a.shape[0] for a in np_lines])
        return cls(np.concatenate(np_lines, axis=0), offsets)

    # ── 基本操作（すべて純粋） ────────
    def as_arrays(self, *, copy: bool = False) -> tuple[np.ndarray, np.ndarray]:
        """内部配列を返す。

        `copy=False` は読み取り専用ビュー（`setflags(write=False)`）を返す。
        書き込みが必要な場合は `copy=True` を指定する。
        """
        if copy:
            return self.coords.copy(), self.offsets.copy()
        coords_view = self.coords.view()
        offsets_view = self.offsets.view()
        coords_view.setflags(write=False)
        offsets_view.setflags(write=False)
        return coords_view, offsets_view

    @property
    def is_empty(self) -> bool:
        return self.coords.size == 0

    def translate(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Geometry":
        """平行移動した新しい `Geometry` を返す（キャンバス中心への配置用）。"""
        if self.is_empty:
            return Geometry(self.coords.copy(), self.offsets.copy())
        vec = np.array([dx, dy, dz], dtype=np.float32)
        return Geometry(self.coords + vec, self.offsets.copy())

    def concat(self, other: "Geometry") -> "Geometry":
        """ポリライン集合を連結する（後段の offsets を先行頂点数だけシフト）。"""
        if self.is_empty:
            return Geometry(other.coords.copy(), other.offsets.copy())
        if other.is_empty:
            return Geometry(self.coords.copy(), self.offsets.copy())
        shift = self.coords.shape[0]
        new_coords = np.vstack([self.coords, other.coords])
        new_offsets = np.hstack([self.offsets, other.offsets[1:] + shift])
        return Geometry(new_coords, new_offsets)

    def __add__(self, other: "Geometry") -> "Geometry":
        return self.concat(other)

    def __len__(self) -> int:
        """ポリライン本数（`M`）を返す。"""
        return int(self.offsets.shape[0] - 1)

    @property
    def n_vertices(self) -> int:
        return int(self.coords.shape[0])

    @property
    def n_lines(self) -> int:
        return len(self)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"Geometry(N={self.n_vertices}, M={self.n_lines})"


def circle_points(radius: float, segments: int = 128) -> np.ndarray:
    """XY 平面上の円周点列 (segments+1, 3) float64 を返す（先頭点を末尾に複製して閉ループ化）。

    装置（外円/内円）の描画で、フレームのローカル座標として使う。
    """
    if segments < 3:
        raise ValueError(f"segments must be >= 3, got {segments}")
    t = np.linspace(0.0, 2.0 * np.pi, int(segments) + 1)
    pts = np.zeros((t.size, 3), dtype=np.float64)
    pts[:, 0] = np.cos(t) * float(radius)
    pts[:, 1] = np.sin(t) * float(radius)
    pts[-1] = pts[0]
    return pts
