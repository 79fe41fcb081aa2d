from __future__ import annotations

import logging
from pathlib import Path

from util.utils import _find_project_root, config_section, load_config


def test_find_project_root_fallback(tmp_path: Path) -> None:
    # 上流に .git/pyproject.toml/configs が無い構造では start.parent.parent を返す
    start = tmp_path / "a" / "b"
    start.mkdir(parents=True)
    assert _find_project_root(start) == start.parent.parent


def test_repository_default_config_is_loaded() -> None:
    cfg = load_config()
    assert config_section(cfg, "canvas").get("size") == "SQUARE_100"
    trackers = cfg.get("trackers")
    assert isinstance(trackers, list) and trackers[0]["name"] == "main"


def test_root_config_overrides_top_level_sections(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "canvas:\n  size: A4\n  fps: 30\nsimulation:\n  interval: 0.01\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text("canvas:\n  size: A5\n", encoding="utf-8")
    cfg = load_config(tmp_path)
    # トップレベルのみ上書き（ネストはマージしない）
    assert cfg["canvas"] == {"size": "A5"}
    assert cfg["simulation"] == {"interval": 0.01}


def test_broken_yaml_is_logged_and_skipped(tmp_path: Path, caplog) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("canvas: [1, 2\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="util.utils"):
        cfg = load_config(tmp_path)
    assert cfg == {}
    assert any("failed to read config" in r.getMessage() for r in caplog.records)


def test_config_section_tolerates_non_mappings() -> None:
    assert config_section({"render": [1, 2]}, "render") == {}
    assert config_section({}, "render") == {}
    assert config_section({"render": {"a": 1}}, "render") == {"a": 1}
