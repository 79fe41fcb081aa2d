"""
どこで: `engine.kinematics.gearing`
何を: 滑りなし転がりの歯車比から、公転角速度に対応する自転角速度を導出する。
なぜ: 接点が外円上を進む弧長と内円の周上を転がる弧長を一致させる拘束
      （`spin = -(R / r) * revolution`）を、トラッカー本体から切り離した純関数として持つため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

from .errors import InvalidConfiguration


def spin_rate_for(outer_radius: float, inner_radius: float, revolution_rate: float) -> float:
    """自転角速度 `-(outer_radius / inner_radius) * revolution_rate` を返す。

    Raises
    ------
    InvalidConfiguration
        `inner_radius == 0` または入力が非有限の場合。
    """
    if inner_radius == 0:
        raise InvalidConfiguration("inner_radius must be non-zero")
    for name, value in (
        ("outer_radius", outer_radius),
        ("inner_radius", inner_radius),
        ("revolution_rate", revolution_rate),
    ):
        if not math.isfinite(value):
            raise InvalidConfiguration(f"{name} must be finite, got {value!r}")
    return -(float(outer_radius) / float(inner_radius)) * float(revolution_rate)


@dataclass(frozen=True)
class RollingConstraintSolver:
    """外円半径 `R` と内円半径 `r` を保持する歯車拘束ソルバ（不変・副作用なし）。"""

    outer_radius: float
    inner_radius: float

    def __post_init__(self) -> None:
        if self.inner_radius == 0:
            raise InvalidConfiguration("inner_radius must be non-zero")
        if not (math.isfinite(self.outer_radius) and math.isfinite(self.inner_radius)):
            raise InvalidConfiguration(
                f"radii must be finite, got R={self.outer_radius!r}, r={self.inner_radius!r}"
            )

    @property
    def ratio(self) -> float:
        """半径比 `K = R / r`。"""
        return float(self.outer_radius) / float(self.inner_radius)

    def spin_rate(self, revolution_rate: float) -> float:
        return spin_rate_for(self.outer_radius, self.inner_radius, revolution_rate)

    def rates(self, revolution_rate: float) -> tuple[float, float]:
        """`(revolution_rate, spin_rate)` の組を返す。"""
        return float(revolution_rate), self.spin_rate(revolution_rate)

    def turns_to_close(self, *, max_denominator: int = 1000, tol: float = 1e-9) -> int | None:
        """曲線が閉じるまでの公転回数を返す（`K` が有理数とみなせない場合は None）。

        `K = p / q`（既約）のとき、内円中心が `q` 周した時点で点が始点に戻る。
        """
        k = self.ratio
        frac = Fraction(k).limit_denominator(max_denominator)
        if abs(float(frac) - k) > tol * max(1.0, abs(k)):
            return None
        return frac.denominator


__all__ = ["RollingConstraintSolver", "spin_rate_for"]
