"""
どこで: `api.sketch_runner.controls`
何を: キー入力を「操作名」に写し、TrackerGroup/SimulationClock/Renderer への操作を実行する。
なぜ: pyglet のキーコードとシミュレーション操作を切り離し、GL なしで操作を検証できるようにするため。

既定の割り当て:
    UP/DOWN    公転角速度を ±rate_step
    RIGHT/LEFT 刻み間隔を 1/factor 倍（速く）/ factor 倍（遅く）
    R          全トラッカーをリセット
    O          伴走曲線の表示切替
    A          装置（外円/内円/アーム）の表示切替
    ESC        終了
"""

from __future__ import annotations

import logging
from typing import Callable

from engine.core.sim_clock import SimulationClock
from engine.kinematics.group import TrackerGroup

logger = logging.getLogger(__name__)

# pyglet.window.key の属性名 → 操作名
KEY_ACTIONS: dict[str, str] = {
    "UP": "rate_up",
    "DOWN": "rate_down",
    "RIGHT": "faster",
    "LEFT": "slower",
    "R": "reset",
    "O": "toggle_offsets",
    "A": "toggle_apparatus",
    "ESCAPE": "quit",
}


class SketchControls:
    """操作名で呼び出せる入力ハンドラ。"""

    def __init__(
        self,
        group: TrackerGroup,
        clock: SimulationClock,
        *,
        rate_step: float = 0.005,
        interval_factor: float = 1.25,
        toggle_apparatus: Callable[[], bool] | None = None,
        close: Callable[[], None] | None = None,
    ) -> None:
        if interval_factor <= 1.0:
            raise ValueError(f"interval_factor must be > 1, got {interval_factor}")
        self._group = group
        self._clock = clock
        self._rate_step = float(rate_step)
        self._interval_factor = float(interval_factor)
        self._toggle_apparatus = toggle_apparatus
        self._close = close

    def rate_up(self) -> None:
        rate = self._group.nudge_revolution_rate(self._rate_step)
        logger.info("revolution rate: %s", rate)

    def rate_down(self) -> None:
        rate = self._group.nudge_revolution_rate(-self._rate_step)
        logger.info("revolution rate: %s", rate)

    def faster(self) -> None:
        interval = self._clock.scale_interval(1.0 / self._interval_factor)
        logger.info("tick interval: %.5fs", interval)

    def slower(self) -> None:
        interval = self._clock.scale_interval(self._interval_factor)
        logger.info("tick interval: %.5fs", interval)

    def reset(self) -> None:
        self._group.reset()
        logger.info("traces reset")

    def toggle_offsets(self) -> None:
        logger.info("offset curves: %s", "on" if self._group.toggle_offsets() else "off")

    def toggle_apparatus(self) -> None:
        if self._toggle_apparatus is not None:
            visible = self._toggle_apparatus()
            logger.info("apparatus: %s", "on" if visible else "off")

    def quit(self) -> None:
        if self._close is not None:
            self._close()

    def dispatch(self, action: str) -> bool:
        """操作名を実行する。未知の操作名なら False。"""
        handler = getattr(self, action, None) if action in KEY_ACTIONS.values() else None
        if handler is None:
            return False
        handler()
        return True

    def handle_key(self, key_name: str) -> bool:
        """キー名（例: "UP", "R"）を操作へ写して実行する。"""
        action = KEY_ACTIONS.get(key_name.upper())
        return self.dispatch(action) if action is not None else False


__all__ = ["KEY_ACTIONS", "SketchControls"]
