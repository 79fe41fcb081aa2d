"""
どこで: `common.logging`
何を: ランナー/スクリプト向けのロギング初期化 `setup_default_logging`。
なぜ: 各モジュールは `logging.getLogger(__name__)` で出力するだけにし、ハンドラ/レベルの
      決定を入口（`main.py` など）の 1 箇所に寄せるため。

環境変数:
- `HYPO_LOG_LEVEL` — ルートのレベル（既定 INFO）
- `HYPO_LOG_DEBUG` — DEBUG へ下げるロガー名のカンマ区切り
  （例: `engine.core.sim_clock,engine.runtime.publisher`）
"""

from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("HYPO_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        return getattr(logging, level.strip().upper(), logging.INFO)
    return int(level)


def _debug_loggers() -> list[str]:
    raw = os.getenv("HYPO_LOG_DEBUG", "")
    return [name.strip() for name in raw.split(",") if name.strip()]


def setup_default_logging(level: int | str | None = None) -> None:
    """ルートロガーに最小構成を 1 度だけ適用する。

    - ルートにハンドラが既にあればアプリ側の設定とみなし、レベル/ハンドラは変更しない
    - `HYPO_LOG_DEBUG` に挙げたロガーはどちらの場合も DEBUG にする
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=_resolve_level(level), format=_FORMAT)
    for name in _debug_loggers():
        logging.getLogger(name).setLevel(logging.DEBUG)


__all__ = ["setup_default_logging"]
