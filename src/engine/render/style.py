"""
どこで: `engine.render.style`
何を: 装置/軌跡/伴走曲線の色・太さ・表示可否をまとめた不変設定 `RenderStyle`。
なぜ: 描画の見た目を運動学コアから切り離し、設定ファイル（`render:` セクション）から
      一箇所で解決するため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from util.color import normalize_color

from .types import RGBA

logger = logging.getLogger(__name__)

_COLOR_FIELDS = (
    "background",
    "outer_color",
    "inner_color",
    "arm_color",
    "trace_color",
    "inferior_color",
    "superior_color",
)


@dataclass(frozen=True)
class RenderStyle:
    """描画スタイル（色は RGBA 0–1、太さはクリップ空間基準）。"""

    background: RGBA = (1.0, 1.0, 1.0, 1.0)
    outer_color: RGBA = (0.6, 0.6, 0.6, 1.0)
    inner_color: RGBA = (0.6, 0.6, 0.6, 1.0)
    arm_color: RGBA = (0.85, 0.3, 0.2, 1.0)
    trace_color: RGBA = (0.0, 0.0, 0.0, 1.0)
    inferior_color: RGBA = (0.2, 0.4, 0.85, 0.8)
    superior_color: RGBA = (0.2, 0.65, 0.35, 0.8)
    line_thickness: float = 0.0006
    trace_thickness: float = 0.0008
    circle_segments: int = 128
    show_apparatus: bool = True

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None) -> "RenderStyle":
        """`render:` セクションから生成する（未知キーは無視、色は `normalize_color` で正規化）。

        Raises
        ------
        ValueError
            色指定が解釈できない場合。
        """
        if not cfg:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in cfg.items():
            if key not in known:
                logger.debug("ignoring unknown render option: %s", key)
                continue
            if key in _COLOR_FIELDS:
                kwargs[key] = normalize_color(value)
            elif key in ("line_thickness", "trace_thickness"):
                kwargs[key] = float(value)
            elif key == "circle_segments":
                kwargs[key] = max(3, int(value))
            else:
                kwargs[key] = bool(value)
        return cls(**kwargs)

    def with_apparatus(self, visible: bool) -> "RenderStyle":
        return replace(self, show_apparatus=bool(visible))


__all__ = ["RenderStyle"]
