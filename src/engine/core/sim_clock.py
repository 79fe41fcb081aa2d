"""
どこで: `engine.core` の固定刻みスケジューラ。
何を: 可変 dt の描画フレームから dt を積算し、起動遅延の経過後に一定間隔で
      ステップ（コールバック）を発火する `SimulationClock`。
なぜ: シミュレーションの刻み幅を描画レートから切り離し、速度（刻み間隔）を実行時に
      安全な範囲で変更できるようにするため。幾何の知識は持たない。

使用例:
    clock = SimulationClock([group.tick], interval=1 / 120, startup_delay=1.0)
    frame_clock = FrameClock([clock, publisher, renderer])
    pyglet.clock.schedule_interval(frame_clock.tick, 1 / 60)
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

from common.settings import get as get_settings

from .tickable import Tickable

logger = logging.getLogger(__name__)

# 浮動小数の積算誤差で 1 ステップ取りこぼさないための許容
_EPS = 1e-12


class SimulationClock(Tickable):
    """固定刻みでコールバックを発火する Tickable。

    Parameters
    ----------
    callbacks : Sequence[Callable[[], None]]
        1 ステップごとに登録順で呼ばれる関数（例: `TrackerGroup.tick`）。
    interval : float | None
        刻み間隔 [sec]。None で設定値 `HYPO_TICK_INTERVAL`。
    startup_delay : float | None
        最初のステップまでの待ち時間 [sec]。None で `HYPO_STARTUP_DELAY`。
    min_interval, max_interval : float | None
        `set_interval` のクランプ範囲。None で `HYPO_TICK_INTERVAL_MIN/MAX`。
    max_steps_per_frame : int | None
        1 回の `tick(dt)` で消化する最大ステップ数。超過分の遅れは破棄する。
    max_ticks : int | None
        総ステップ数の上限（到達後は停止）。None/0 で無制限。
    """

    def __init__(
        self,
        callbacks: Sequence[Callable[[], None]] = (),
        *,
        interval: float | None = None,
        startup_delay: float | None = None,
        min_interval: float | None = None,
        max_interval: float | None = None,
        max_steps_per_frame: int | None = None,
        max_ticks: int | None = None,
    ) -> None:
        s = get_settings()
        lo = float(s.TICK_INTERVAL_MIN if min_interval is None else min_interval)
        hi = float(s.TICK_INTERVAL_MAX if max_interval is None else max_interval)
        if not (lo > 0.0 and hi > 0.0 and math.isfinite(lo) and math.isfinite(hi)):
            raise ValueError(f"interval bounds must be positive and finite, got {(lo, hi)}")
        if lo > hi:
            raise ValueError(f"min_interval must be <= max_interval, got {(lo, hi)}")
        delay = float(s.STARTUP_DELAY if startup_delay is None else startup_delay)
        if delay < 0.0 or not math.isfinite(delay):
            raise ValueError(f"startup_delay must be >= 0, got {delay}")
        steps = int(s.MAX_STEPS_PER_FRAME if max_steps_per_frame is None else max_steps_per_frame)
        if steps < 1:
            raise ValueError(f"max_steps_per_frame must be >= 1, got {steps}")
        limit = s.MAX_TICKS if max_ticks is None else max_ticks
        if limit is not None and limit < 0:
            raise ValueError(f"max_ticks must be >= 0, got {limit}")

        self._callbacks: list[Callable[[], None]] = list(callbacks)
        self._min_interval = lo
        self._max_interval = hi
        self._interval = self._clamp(float(s.TICK_INTERVAL if interval is None else interval))
        self._startup_delay = delay
        self._max_steps = steps
        self._max_ticks = int(limit) if limit else None

        self._elapsed = 0.0
        self._accumulator = 0.0
        self._started = False
        self._stopped = False
        self._tick_count = 0
        self.last_steps = 0

    # ── 設定 ──────────────────────
    def _clamp(self, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError(f"interval must be finite, got {value}")
        return min(self._max_interval, max(self._min_interval, value))

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def max_interval(self) -> float:
        return self._max_interval

    def set_interval(self, value: float) -> float:
        """刻み間隔を範囲内へクランプして設定し、適用値を返す。"""
        clamped = self._clamp(float(value))
        if clamped != value:
            logger.debug("tick interval %.6g clamped to %.6g", value, clamped)
        self._interval = clamped
        return clamped

    def scale_interval(self, factor: float) -> float:
        """刻み間隔を `factor` 倍する（速度操作用）。"""
        return self.set_interval(self._interval * float(factor))

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    # ── 状態 ──────────────────────
    @property
    def startup_delay(self) -> float:
        return self._startup_delay

    @property
    def started(self) -> bool:
        return self._started

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def reset(self) -> None:
        """積算時間/ステップ数を 0 に戻し、起動遅延から再開する。"""
        self._elapsed = 0.0
        self._accumulator = 0.0
        self._started = False
        self._stopped = False
        self._tick_count = 0
        self.last_steps = 0

    # ── Tickable ─────────────────────
    def tick(self, dt: float) -> None:
        self.last_steps = 0
        if self._stopped:
            return
        if not math.isfinite(dt) or dt < 0.0:
            logger.debug("ignoring invalid frame dt=%r", dt)
            return

        self._elapsed += dt
        if not self._started:
            if self._elapsed + _EPS < self._startup_delay:
                return
            self._started = True
            self._accumulator += self._elapsed - self._startup_delay
            logger.info("simulation started after %.3fs", self._startup_delay)
        else:
            self._accumulator += dt

        steps = 0
        while self._accumulator + _EPS >= self._interval:
            if self._max_ticks is not None and self._tick_count >= self._max_ticks:
                self._stopped = True
                self._accumulator = 0.0
                logger.info("simulation stopped at max_ticks=%d", self._max_ticks)
                break
            if steps >= self._max_steps:
                logger.debug(
                    "dropping %.4fs of simulation backlog (max_steps_per_frame=%d)",
                    self._accumulator,
                    self._max_steps,
                )
                self._accumulator = 0.0
                break
            self._accumulator -= self._interval
            for cb in self._callbacks:
                cb()
            self._tick_count += 1
            steps += 1
        self.last_steps = steps


__all__ = ["SimulationClock"]
