from __future__ import annotations

import logging

import pytest

from common.logging import setup_default_logging


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    prev = root.level
    yield root
    root.setLevel(prev)


def _empty_root_handlers(root: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> list:
    # pytest のログ捕捉ハンドラは呼び出しフェーズで付くため、テスト本体で差し替える
    handlers: list = []
    monkeypatch.setattr(root, "handlers", handlers)
    return handlers


def test_configures_root_from_environment(
    restore_root_level, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = restore_root_level
    handlers = _empty_root_handlers(root, monkeypatch)
    monkeypatch.setenv("HYPO_LOG_LEVEL", "error")
    try:
        setup_default_logging()
        assert len(handlers) == 1
        assert root.level == logging.ERROR
    finally:
        for h in handlers:
            h.close()


def test_existing_handlers_are_respected(
    restore_root_level, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = restore_root_level
    handlers = _empty_root_handlers(root, monkeypatch)
    handler = logging.NullHandler()
    root.addHandler(handler)
    root.setLevel(logging.ERROR)
    monkeypatch.setenv("HYPO_LOG_DEBUG", "hypo.test.a, hypo.test.b")
    try:
        setup_default_logging("DEBUG")
        assert handlers == [handler]
        assert root.level == logging.ERROR
        assert logging.getLogger("hypo.test.a").level == logging.DEBUG
        assert logging.getLogger("hypo.test.b").level == logging.DEBUG
    finally:
        logging.getLogger("hypo.test.a").setLevel(logging.NOTSET)
        logging.getLogger("hypo.test.b").setLevel(logging.NOTSET)
