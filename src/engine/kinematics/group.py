"""
どこで: `engine.kinematics.group`
何を: 複数の独立したトラッカーを 1 tick 境界でまとめて進め、入力系（速度/リセット/
      オフセット表示）の操作と描画用スナップショットの切り出しを提供する `TrackerGroup`。
なぜ: スケジューラからの入口を `tick()` 1 つに揃え、退化したトラッカーだけを止めて
      他を継続させる振る舞いを 1 箇所で保証するため。
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from common.settings import get as get_settings

from .errors import DegenerateState, InvalidConfiguration
from .offset import build_companions
from .snapshot import GroupSnapshot, TrackerSnapshot
from .tracker import KinematicTracker

logger = logging.getLogger(__name__)


class TrackerGroup:
    """トラッカー集合（逐次に進める。トラッカー間で状態は共有しない）。"""

    def __init__(
        self,
        trackers: Iterable[KinematicTracker] = (),
        *,
        show_offsets: bool | None = None,
        rate_bounds: tuple[float, float] | None = None,
    ) -> None:
        settings = get_settings()
        lo, hi = rate_bounds if rate_bounds is not None else (settings.RATE_MIN, settings.RATE_MAX)
        if lo > hi:
            raise InvalidConfiguration(f"rate_bounds must satisfy min <= max, got {(lo, hi)}")
        self._rate_bounds = (float(lo), float(hi))
        self._trackers: list[KinematicTracker] = []
        self._show_offsets = bool(settings.SHOW_OFFSETS if show_offsets is None else show_offsets)
        self._tick_count = 0
        # tick/リセット/表示切替のたびに増える（スナップショット再発行の判定用）
        self._version = 0
        for t in trackers:
            self.add(t)

    # ── 集合操作 ──────────────────
    def add(self, tracker: KinematicTracker) -> KinematicTracker:
        if any(t is tracker for t in self._trackers):
            raise ValueError(f"tracker already registered: {tracker.name}")
        self._trackers.append(tracker)
        self._version += 1
        return tracker

    def remove(self, tracker: KinematicTracker) -> None:
        """明示的に取り除く（バッファは参照が切れた時点で解放される）。"""
        self._trackers = [t for t in self._trackers if t is not tracker]
        self._version += 1

    @property
    def trackers(self) -> tuple[KinematicTracker, ...]:
        return tuple(self._trackers)

    @property
    def live_trackers(self) -> tuple[KinematicTracker, ...]:
        return tuple(t for t in self._trackers if not t.halted)

    def __iter__(self) -> Iterator[KinematicTracker]:
        return iter(tuple(self._trackers))

    def __len__(self) -> int:
        return len(self._trackers)

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def version(self) -> int:
        return self._version

    # ── スケジューラ入口 ─────────────
    def tick(self) -> None:
        """全ての稼働中トラッカーを 1 tick 進める。

        `DegenerateState` は該当トラッカーのみ停止してログに残し、他は継続する。
        `InconsistentBuffers` はコアのバグなのでそのまま送出する。
        """
        for tracker in self._trackers:
            if tracker.halted:
                continue
            try:
                tracker.advance()
            except DegenerateState as e:
                logger.error("halting %s: %s", tracker.name, e)
        self._tick_count += 1
        self._version += 1

    # ── 入力/設定 ──────────────────
    @property
    def rate_bounds(self) -> tuple[float, float]:
        return self._rate_bounds

    @property
    def revolution_rate(self) -> float | None:
        """先頭トラッカーの公転角速度（空なら None）。"""
        return self._trackers[0].revolution_rate if self._trackers else None

    def _clamp_rate(self, rate: float) -> float:
        lo, hi = self._rate_bounds
        return min(hi, max(lo, float(rate)))

    def set_revolution_rate(self, rate: float) -> float:
        """全トラッカーへ同じ公転角速度を設定（範囲へクランプ）し、先頭の適用値を返す。

        各トラッカーは自身の `rate_bounds` でさらにクランプする。空なら群の範囲でクランプした値。
        """
        value = self._clamp_rate(rate)
        for tracker in self._trackers:
            tracker.set_revolution_rate(value)
        self._version += 1
        applied = self.revolution_rate
        return value if applied is None else applied

    def nudge_revolution_rate(self, delta: float) -> float | None:
        """各トラッカーの公転角速度を `delta` だけ増減し、先頭の適用値を返す。"""
        for tracker in self._trackers:
            tracker.set_revolution_rate(self._clamp_rate(tracker.revolution_rate + float(delta)))
        self._version += 1
        return self.revolution_rate

    def reset(self, index: int | None = None) -> None:
        """`index` 指定で 1 本、None で全トラッカーをリセットする。"""
        targets = self._trackers if index is None else [self._trackers[index]]
        for tracker in targets:
            tracker.reset()
        if index is None:
            self._tick_count = 0
        self._version += 1

    @property
    def show_offsets(self) -> bool:
        return self._show_offsets

    @show_offsets.setter
    def show_offsets(self, value: bool) -> None:
        self._show_offsets = bool(value)
        self._version += 1

    def toggle_offsets(self) -> bool:
        self.show_offsets = not self._show_offsets
        return self._show_offsets

    # ── 描画側への受け渡し ───────────
    def snapshot(self) -> GroupSnapshot:
        """全トラッカーの不変スナップショットを作る（オフセットは表示時のみ計算）。"""
        items: list[TrackerSnapshot] = []
        for tracker in self._trackers:
            tracker.check_buffers()
            points = tracker.trace_points.copy()
            inferior = superior = None
            if self._show_offsets:
                inferior, superior = build_companions(tracker)
            items.append(
                TrackerSnapshot(
                    name=tracker.name,
                    outer_radius=tracker.outer_radius,
                    inner_radius=tracker.inner_radius,
                    poses=tracker.poses(),
                    trace_points=points,
                    inferior=inferior,
                    superior=superior,
                    halted=tracker.halted,
                    tick_count=tracker.tick_count,
                )
            )
        return GroupSnapshot(
            trackers=tuple(items), version=self._version, show_offsets=self._show_offsets
        )


__all__ = ["TrackerGroup"]
