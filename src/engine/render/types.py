"""
どこで: `engine.render` 型定義。
何を: レイヤー描画用の軽量データクラス `Layer`。
なぜ: 1 フレーム内で色/太さが異なる複数のジオメトリ（装置・軌跡・伴走曲線）を
      順描画するためのコンテナが必要。
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.core.geometry import Geometry

RGBA = tuple[float, float, float, float]


@dataclass(frozen=True)
class Layer:
    """色/太さ付きの描画レイヤー。"""

    geometry: Geometry
    color: RGBA | None  # None なら Renderer の基準色を使用
    thickness: float | None  # None なら Renderer の基準太さを使用
    name: str | None = None


__all__ = ["Layer", "RGBA"]
