"""
どこで: `common` パッケージ。
何を: engine/shapes/api から使う軽量基盤（型エイリアス・環境設定・ロギング初期化）。
なぜ: 依存の最内層に置き、循環 import を避けて依存の向きを単純化するため。
"""

from .logging import setup_default_logging
from .types import Quat, Vec3

__all__ = [
    "setup_default_logging",
    "Vec3",
    "Quat",
]
