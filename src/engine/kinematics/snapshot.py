"""
どこで: `engine.kinematics.snapshot`
何を: 描画側へ渡す 1 フレームぶんの不変スナップショット（全トラッカーの姿勢と軌跡）。
なぜ: tick 中のトラッカーを描画側が直接読まないよう、tick 境界で切り出したコピーだけを
      SwapBuffer 経由で受け渡すため（単一 writer / 単一 reader）。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .tracker import TrackerPoses


@dataclass(frozen=True)
class TrackerSnapshot:
    """1 トラッカー分のスナップショット。配列は独立コピー。"""

    name: str
    outer_radius: float
    inner_radius: float
    poses: TrackerPoses
    trace_points: np.ndarray
    inferior: np.ndarray | None = None
    superior: np.ndarray | None = None
    halted: bool = False
    tick_count: int = 0

    @property
    def has_offsets(self) -> bool:
        return self.inferior is not None and self.superior is not None


@dataclass(frozen=True)
class GroupSnapshot:
    """描画対象 1 フレーム分のデータコンテナ。"""

    trackers: tuple[TrackerSnapshot, ...]
    version: int
    show_offsets: bool = True

    @property
    def total_points(self) -> int:
        return int(sum(len(s.trace_points) for s in self.trackers))


__all__ = ["TrackerSnapshot", "GroupSnapshot"]
