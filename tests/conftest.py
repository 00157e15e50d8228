from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

import portfolio_sync.data.db as app_db
from portfolio_sync.data.db import init_db


@pytest.fixture
def history_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Use a temporary SQLite DB for sync history."""
    db_path = tmp_path / "history.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db.reset_engine()
    init_db()
    yield
    app_db.reset_engine()


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point every configurable directory into tmp_path and clear credentials."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_USER",
        "PORTFOLIO_MAX_WORKERS",
        "PORTFOLIO_FETCH_TIMEOUT",
        "PORTFOLIO_WRITE_DELAY",
        "PORTFOLIO_LOG_LEVEL",
    ):
        # setenv first so teardown also removes values a .env file adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("PORTFOLIO_CONTENT_DIR", (tmp_path / "content").as_posix())
    monkeypatch.setenv("PORTFOLIO_FILES_DIR", (tmp_path / "portfolio-files").as_posix())
    monkeypatch.setenv("PORTFOLIO_DRAFTS_DIR", (tmp_path / "portfolio-drafts").as_posix())
    return tmp_path


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically add the history_db fixture to tests in API test files."""
    for item in items:
        test_file_path = Path(str(item.fspath))
        if "api" in test_file_path.stem.lower():
            item.add_marker(pytest.mark.usefixtures("history_db"))
            item.add_marker(pytest.mark.api)
