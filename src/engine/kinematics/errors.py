"""
どこで: `engine.kinematics` の例外定義。
何を: 運動学コアが送出する 3 種の決定論的エラー。
なぜ: 構成不正（生成時に致命）/ 退化状態（該当トラッカーのみ停止）/ バッファ不整合
      （コアのバグ）を呼び出し側で区別して扱えるようにするため。再試行に意味はない。
"""

from __future__ import annotations


class KinematicsError(Exception):
    """運動学コアの例外基底。"""


class InvalidConfiguration(KinematicsError, ValueError):
    """半径 0/負/非有限、内円 >= 外円など、生成時点で不正な構成。"""


class DegenerateState(KinematicsError, ArithmeticError):
    """更新後のフレームに NaN/Inf が現れた。

    該当トラッカーは停止し、以降の `advance()` は `reset()` まで拒否される。
    """

    def __init__(self, message: str, *, tick: int | None = None) -> None:
        super().__init__(message)
        self.tick = tick


class InconsistentBuffers(KinematicsError, AssertionError):
    """`trace_points` と `trace_forward_vectors` の長さ不一致（内部不変条件の破れ）。"""

    def __init__(self, n_points: int, n_forwards: int) -> None:
        super().__init__(
            f"trace buffers out of sync: points={n_points}, forward_vectors={n_forwards}"
        )
        self.n_points = n_points
        self.n_forwards = n_forwards


__all__ = [
    "KinematicsError",
    "InvalidConfiguration",
    "DegenerateState",
    "InconsistentBuffers",
]
