"""
どこで: `common.settings`
何を: シミュレーションの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

環境変数（接頭辞 `HYPO_`）:
- `HYPO_TICK_INTERVAL` / `HYPO_TICK_INTERVAL_MIN` / `HYPO_TICK_INTERVAL_MAX` — 固定ステップ [sec] と範囲
- `HYPO_STARTUP_DELAY` — 最初の tick までの待ち時間 [sec]
- `HYPO_MAX_STEPS_PER_FRAME` — 1 描画フレームで消化する最大 tick 数
- `HYPO_MAX_TICKS` — 実行 tick 数の上限（0 で無制限）
- `HYPO_REVOLUTION_RATE` / `HYPO_RATE_MIN` / `HYPO_RATE_MAX` — 公転角速度 [rad/tick] と範囲
- `HYPO_NORM_TOLERANCE` — 四元数ノルム逸脱の警告閾値
- `HYPO_AXIS_MODE` — `fixed` / `evolving`
- `HYPO_SHOW_OFFSETS` — 伴走曲線（内側/外側オフセット）の初期表示（0/1）
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_bool, env_float, env_int


@dataclass
class _Settings:
    # SimulationClock
    TICK_INTERVAL: float = 1.0 / 120.0
    TICK_INTERVAL_MIN: float = 1.0 / 1000.0
    TICK_INTERVAL_MAX: float = 0.5
    STARTUP_DELAY: float = 1.0
    MAX_STEPS_PER_FRAME: int = 8
    MAX_TICKS: int = 0

    # Kinematics
    REVOLUTION_RATE: float = -0.05
    RATE_MIN: float = -0.5
    RATE_MAX: float = 0.5
    NORM_TOLERANCE: float = 1e-5
    AXIS_MODE: str = "fixed"
    SHOW_OFFSETS: bool = True


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 区間系は下限丸めを適用し、`MIN > MAX` の場合は入れ替える。
    - 不正値は既定値へフォールバック（例外は投げない）。
    """
    defaults = _Settings()

    _settings.TICK_INTERVAL_MIN = env_float(
        "HYPO_TICK_INTERVAL_MIN", defaults.TICK_INTERVAL_MIN, min_value=1e-6
    )
    _settings.TICK_INTERVAL_MAX = env_float(
        "HYPO_TICK_INTERVAL_MAX", defaults.TICK_INTERVAL_MAX, min_value=1e-6
    )
    if _settings.TICK_INTERVAL_MIN > _settings.TICK_INTERVAL_MAX:
        _settings.TICK_INTERVAL_MIN, _settings.TICK_INTERVAL_MAX = (
            _settings.TICK_INTERVAL_MAX,
            _settings.TICK_INTERVAL_MIN,
        )
    _settings.TICK_INTERVAL = env_float(
        "HYPO_TICK_INTERVAL",
        defaults.TICK_INTERVAL,
        min_value=_settings.TICK_INTERVAL_MIN,
        max_value=_settings.TICK_INTERVAL_MAX,
    )
    _settings.STARTUP_DELAY = env_float("HYPO_STARTUP_DELAY", defaults.STARTUP_DELAY, min_value=0.0)
    _settings.MAX_STEPS_PER_FRAME = (
        env_int("HYPO_MAX_STEPS_PER_FRAME", defaults.MAX_STEPS_PER_FRAME, min_value=1) or 1
    )
    _settings.MAX_TICKS = env_int("HYPO_MAX_TICKS", defaults.MAX_TICKS, min_value=0) or 0

    _settings.RATE_MIN = env_float("HYPO_RATE_MIN", defaults.RATE_MIN)
    _settings.RATE_MAX = env_float("HYPO_RATE_MAX", defaults.RATE_MAX)
    if _settings.RATE_MIN > _settings.RATE_MAX:
        _settings.RATE_MIN, _settings.RATE_MAX = _settings.RATE_MAX, _settings.RATE_MIN
    _settings.REVOLUTION_RATE = env_float(
        "HYPO_REVOLUTION_RATE",
        defaults.REVOLUTION_RATE,
        min_value=_settings.RATE_MIN,
        max_value=_settings.RATE_MAX,
    )
    _settings.NORM_TOLERANCE = env_float(
        "HYPO_NORM_TOLERANCE", defaults.NORM_TOLERANCE, min_value=0.0
    )

    raw_mode = (os.getenv("HYPO_AXIS_MODE") or defaults.AXIS_MODE).strip().lower()
    _settings.AXIS_MODE = raw_mode if raw_mode in {"fixed", "evolving"} else defaults.AXIS_MODE
    _settings.SHOW_OFFSETS = env_bool("HYPO_SHOW_OFFSETS", defaults.SHOW_OFFSETS)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
