"""
どこで: `engine.core` の更新インターフェース。
何を: 描画フレーム単位の `Tickable.tick(dt)` と、固定ステップ単位の `Steppable.tick()` を定義。
なぜ: 可変レートの描画ループと、固定刻みのシミュレーションを型で区別して結線するため。
"""

from typing import Protocol


class Tickable(Protocol):
    """描画 1 フレーム分の更新を行うインターフェース（`dt` は可変）。"""

    def tick(self, dt: float) -> None:
        """内部状態を `dt` 秒ぶん進める。"""


class Steppable(Protocol):
    """固定刻み 1 ステップ分の更新を行うインターフェース（SimulationClock から呼ばれる）。"""

    def tick(self) -> None:
        """ちょうど 1 ステップ進める。"""
