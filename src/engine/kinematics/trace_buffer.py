"""
どこで: `engine.kinematics` の追記専用バッファ。
何を: 3 次元ベクトルを tick ごとに 1 行ずつ追記する可変長 `(N, 3)` float64 配列。
なぜ: トレース点列を各トラッカーが所有・寿命管理し（プロセス共有の大域状態にしない）、
      毎 tick の追記を償却 O(1)、描画側の読み出しをコピーなしのビューで行うため。

容量は不足時に倍々で再確保する。削除（エビクション）は行わない。`clear()` で空に戻す。
"""

from __future__ import annotations

import numpy as np

from ..core.quaternion import VecLike


class TraceBuffer:
    """追記専用の `(N, 3)` ベクトル列。"""

    __slots__ = ("_data", "_size", "_initial_capacity")

    def __init__(self, initial_capacity: int = 1024) -> None:
        cap = max(1, int(initial_capacity))
        self._initial_capacity = cap
        self._data = np.empty((cap, 3), dtype=np.float64)
        self._size = 0

    def _ensure_capacity(self, required: int) -> None:
        """容量が足りなければ倍々で再確保（既存行はコピー）。"""
        cap = self._data.shape[0]
        if required <= cap:
            return
        new_cap = cap
        while new_cap < required:
            new_cap *= 2
        grown = np.empty((new_cap, 3), dtype=np.float64)
        grown[: self._size] = self._data[: self._size]
        self._data = grown

    def append(self, vec: VecLike) -> None:
        row = np.asarray(vec, dtype=np.float64)
        if row.shape != (3,):
            raise ValueError(f"trace entries must have shape (3,), got {row.shape}")
        self._ensure_capacity(self._size + 1)
        self._data[self._size] = row
        self._size += 1

    def view(self) -> np.ndarray:
        """現在の内容の読み取り専用ビュー（次の追記で再確保されると切り離される）。"""
        v = self._data[: self._size].view()
        v.setflags(write=False)
        return v

    def snapshot(self) -> np.ndarray:
        """現在の内容のコピー（他スレッドへ渡せる独立配列）。"""
        return self._data[: self._size].copy()

    def last(self) -> np.ndarray | None:
        if self._size == 0:
            return None
        return self._data[self._size - 1].copy()

    def clear(self) -> None:
        """内容を破棄し、初期容量へ戻す（メモリも解放）。"""
        self._data = np.empty((self._initial_capacity, 3), dtype=np.float64)
        self._size = 0

    @property
    def capacity(self) -> int:
        return int(self._data.shape[0])

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"TraceBuffer(N={self._size}, capacity={self.capacity})"


__all__ = ["TraceBuffer"]
