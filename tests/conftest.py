"""共通フィクスチャ。

- 乱数シード固定
- 既定設定（環境変数 HYPO_*）の隔離
- 代表的なトラッカー試料
"""

from __future__ import annotations

import os
from typing import Iterator

import numpy as np
import pytest

from common import settings as settings_mod
from engine.kinematics.tracker import KinematicTracker

# 外円/内円の歯数比 31 : 12.3398748789、内円 15
INNER_R = 15.0
OUTER_R = 15.0 * 31.0 / 12.3398748789
RATE = -0.05


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """HYPO_* 環境変数を外し、既定設定で各テストを開始する。"""
    for name in list(os.environ):
        if name.startswith("HYPO_"):
            monkeypatch.delenv(name, raising=False)
    settings_mod.reload_from_env()
    yield
    monkeypatch.undo()
    settings_mod.reload_from_env()


@pytest.fixture()
def tracker() -> KinematicTracker:
    return KinematicTracker(INNER_R, OUTER_R, revolution_rate=RATE, name="main")


@pytest.fixture()
def small_tracker() -> KinematicTracker:
    return KinematicTracker(1.0, 4.0, revolution_rate=0.1, name="small")
