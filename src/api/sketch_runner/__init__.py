"""
内部ヘルパ群（API 非公開）。

どこで: `api.sketch_runner`
何を: `api.sketch` の補助（設定解決/トラッカー構築/入力操作/描画初期化）を分離する。
なぜ: `run_hypocycloid` 本体を薄く保つため。
"""

from __future__ import annotations

__all__: list[str] = []
