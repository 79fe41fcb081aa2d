"""
どこで: `engine.runtime` のダブルバッファ。
何を: 書き手（シミュレーション側）が `push` した最新データを、読み手（描画側）が
      `try_swap` でフロントへ取り込む `SwapBuffer`。
なぜ: 読み手が常に「前回 tick 後」か「今回 tick 後」のどちらか一方の完全な状態だけを
      観測し、書き込み途中のデータを見ないようにするため。
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class SwapBuffer(Generic[T]):
    """単一書き手/単一読み手のフロント/バック切替バッファ。

    - `push` はバックを上書きする（未取り込みの古いデータは捨てる: latest wins）。
    - `try_swap` はバックに新しいデータがある場合のみフロントへ移し、`version` を進める。
    """

    def __init__(self) -> None:
        self._front: T | None = None
        self._back: T | None = None
        self._ready = False
        self._version = 0
        self._lock = threading.Lock()

    def push(self, data: T) -> None:
        with self._lock:
            self._back = data
            self._ready = True

    def is_data_ready(self) -> bool:
        with self._lock:
            return self._ready

    def try_swap(self) -> bool:
        """新しいデータがあればフロントと入れ替えて True を返す。"""
        with self._lock:
            if not self._ready:
                return False
            self._front, self._back = self._back, None
            self._ready = False
            self._version += 1
            return True

    def get_front(self) -> T | None:
        with self._lock:
            return self._front

    def version(self) -> int:
        with self._lock:
            return self._version


__all__ = ["SwapBuffer"]
