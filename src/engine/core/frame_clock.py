"""
どこで: `engine.core` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定とループ管理）。
なぜ: GUI/ループから呼び出すだけで、SimulationClock → スナップショット発行 → Renderer の
      更新順を統一するため。
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

from .tickable import Tickable


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。"""

    def __init__(
        self,
        tickables: Sequence[Tickable],
        *,
        time_source: Callable[[], float] = time.perf_counter,
    ):
        self._tickables = tuple(tickables)
        self._time_source = time_source
        self._last_time = time_source()
        self._frames = 0

    @property
    def frames(self) -> int:
        return self._frames

    # GUI フレームワークから schedule_interval で呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # pyglet は dt を渡してくれる
            now = self._time_source()  # 他フレームワーク用
            dt = now - self._last_time
            self._last_time = now

        for t in self._tickables:
            t.tick(dt)
        self._frames += 1
