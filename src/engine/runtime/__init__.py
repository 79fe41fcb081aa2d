"""
どこで: `engine.runtime` サブパッケージ。
何を: SwapBuffer/SnapshotPublisher によるシミュレーション → 描画のデータ受け渡しを提供。
なぜ: 書き手と読み手を tick 境界で分離し、読み手が完全な状態だけを観測するため。
"""

from .buffer import SwapBuffer
from .publisher import SnapshotPublisher

__all__ = ["SwapBuffer", "SnapshotPublisher"]
