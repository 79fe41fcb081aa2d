"""
どこで: `api.sketch_runner.utils`（純粋関数/小ヘルパ）。
何を: FPS/キャンバス/描画倍率の解決と投影行列の構築を提供。
なぜ: `api.sketch` を薄く保ち、テスト容易性と再利用性を上げるため。
"""

from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from util.constants import CANVAS_SIZES


def resolve_fps(
    requested_fps: int | None, canvas_cfg: Mapping[str, Any], *, default: int = 60
) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先。
    - それ以外は `canvas.fps`、数値化できない場合は既定値。
    """
    value = requested_fps if requested_fps is not None else canvas_cfg.get("fps", default)
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return max(1, int(default))


def resolve_canvas_size(canvas_size: str | tuple[int, int]) -> tuple[int, int]:
    """キャンバス寸法（ワールド単位）を解決する。

    - 文字列: `CANVAS_SIZES` のキー（大文字/小文字は無視）
    - タプル: `(width, height)` をそのまま（正であることを検証）
    - それ以外/未知キーは `ValueError`
    """
    if isinstance(canvas_size, str):
        key = canvas_size.upper()
        if key not in CANVAS_SIZES:
            allowed = ", ".join(sorted(CANVAS_SIZES.keys()))
            raise ValueError(f"invalid canvas_size: {canvas_size}; allowed={allowed}")
        w, h = CANVAS_SIZES[key]
        return int(w), int(h)
    try:
        w, h = int(canvas_size[0]), int(canvas_size[1])
    except (TypeError, ValueError, IndexError) as e:
        raise ValueError(f"invalid canvas_size tuple: {canvas_size}") from e
    if w <= 0 or h <= 0:
        raise ValueError(f"canvas_size must be positive, got: {(w, h)}")
    return w, h


def resolve_window_size(canvas: tuple[int, int], render_scale: float) -> tuple[int, int]:
    """キャンバス寸法 × 倍率をピクセルへ丸める（1px 以上）。"""
    if float(render_scale) <= 0.0:
        raise ValueError(f"render_scale must be > 0, got {render_scale}")
    w, h = canvas
    return max(1, int(round(w * render_scale))), max(1, int(round(h * render_scale)))


def build_projection(canvas_width: float, canvas_height: float) -> "np.ndarray":
    """キャンバス座標（左上原点, Y 下向き）を基準とする正射影行列（ModernGL 用の転置済み）。"""
    proj = np.array(
        [
            [2 / canvas_width, 0, 0, -1],
            [0, -2 / canvas_height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj


__all__ = [
    "resolve_fps",
    "resolve_canvas_size",
    "resolve_window_size",
    "build_projection",
]
