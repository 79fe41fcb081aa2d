"""
どこで: `engine.runtime` の発行層。
何を: `TrackerGroup` が前回から変化していればスナップショットを作り `SwapBuffer` へ push する。
なぜ: 描画側が可変参照を持たずに済むよう、シミュレーションの tick 境界でのみ
      不変なスナップショットを切り出して受け渡すため。
"""

from __future__ import annotations

import logging

from ..core.tickable import Tickable
from ..kinematics.group import TrackerGroup
from ..kinematics.snapshot import GroupSnapshot
from .buffer import SwapBuffer

logger = logging.getLogger(__name__)


class SnapshotPublisher(Tickable):
    """FrameClock 上で SimulationClock の直後に置く。"""

    def __init__(self, group: TrackerGroup, swap_buffer: SwapBuffer[GroupSnapshot]):
        self._group = group
        self._swap_buffer = swap_buffer
        self._published_version: int | None = None

    @property
    def published_version(self) -> int | None:
        return self._published_version

    def publish(self) -> bool:
        """変化があれば発行して True を返す。"""
        version = self._group.version
        if version == self._published_version:
            return False
        snapshot = self._group.snapshot()
        self._swap_buffer.push(snapshot)
        self._published_version = version
        logger.debug("published snapshot v%d (%d points)", version, snapshot.total_points)
        return True

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        self.publish()


__all__ = ["SnapshotPublisher"]
