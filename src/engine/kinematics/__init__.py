"""
どこで: `engine.kinematics` サブパッケージ。
何を: 転がり円の運動学コア（歯車拘束・トラッカー・オフセット曲線・トラッカー集合）を提供。
なぜ: 曲線の正しさを決める回転合成とバッファ管理を描画/入力から切り離し、単体で検証可能にするため。
"""

from .errors import DegenerateState, InconsistentBuffers, InvalidConfiguration, KinematicsError
from .gearing import RollingConstraintSolver, spin_rate_for
from .group import TrackerGroup
from .offset import build_companions, build_offset, build_offset_arrays
from .snapshot import GroupSnapshot, TrackerSnapshot
from .tracker import AxisMode, KinematicTracker, TrackerPoses

__all__ = [
    "KinematicsError",
    "InvalidConfiguration",
    "DegenerateState",
    "InconsistentBuffers",
    "RollingConstraintSolver",
    "spin_rate_for",
    "AxisMode",
    "KinematicTracker",
    "TrackerPoses",
    "build_offset",
    "build_offset_arrays",
    "build_companions",
    "TrackerGroup",
    "TrackerSnapshot",
    "GroupSnapshot",
]
