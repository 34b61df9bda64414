from __future__ import annotations

import logging
from pathlib import Path

import pytest

from booksum.config import BookSumSettings, get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from a developer's .env and cached settings."""
    monkeypatch.chdir(tmp_path)
    for var in ("OPENAI_API_KEY", "LOG_FORMAT", "LOG_LEVEL", "DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_clock():
    """Provide a FakeClock starting at t=0."""
    from tests.fakes import FakeClock

    return FakeClock()


@pytest.fixture
def settings(tmp_path: Path) -> BookSumSettings:
    """Settings with a temp data dir and no settling delay."""
    return BookSumSettings(
        data_dir=tmp_path / "data",
        rate_limit={"settling_delay_seconds": 0},
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
