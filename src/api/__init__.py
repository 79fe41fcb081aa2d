"""
どこで: `api` 入口（高レベル公開 API）。
何を: トラッカー/グループ/解析曲線とランナー `run_hypocycloid` を単一名前空間から再輸出。
なぜ: 利用者がトラッカーの生成から対話実行までを 1 つの import で完結できるようにするため。

Usage:
    from api import KinematicTracker, run_hypocycloid

    t = KinematicTracker(inner_radius=15.0, outer_radius=37.68, revolution_rate=-0.05)
    for _ in range(1000):
        t.advance()
    run_hypocycloid()
"""

from engine.core.geometry import Geometry
from engine.kinematics import (
    AxisMode,
    GroupSnapshot,
    KinematicTracker,
    RollingConstraintSolver,
    TrackerGroup,
    build_offset,
)
from shapes import hypotrochoid_at

from .sketch import prepare_sketch
from .sketch import run_hypocycloid
from .sketch import run_hypocycloid as run

__all__ = [
    "KinematicTracker",
    "TrackerGroup",
    "GroupSnapshot",
    "RollingConstraintSolver",
    "AxisMode",
    "build_offset",
    "Geometry",
    "hypotrochoid_at",
    "prepare_sketch",
    "run_hypocycloid",
    "run",
]

__version__ = "2026.10"
