"""Tests for local and layered document sources."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from portfolio_sync.models.errors import TransportError
from portfolio_sync.services.document_sources import LayeredSource, LocalDirectorySource

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


def _write(directory: Path, name: str, text: str = "---\ntitle: X\n---\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("PORTFOLIO-my-app.md", "my-app"),
        ("PORTFOLIOmy-app.md", "my-app"),
        ("PORTFOLIO.md", "PORTFOLIO.md"),
        ("PORTFOLIO-TEMPLATE.md", None),
        ("README.md", None),
        ("PORTFOLIO-my-app.txt", None),
    ],
)
def test_project_id_for(filename: str, expected: str | None) -> None:
    assert LocalDirectorySource.project_id_for(filename) == expected


def test_local_source_lists_and_fetches(tmp_path: Path) -> None:
    _write(tmp_path, "PORTFOLIO-beta.md", "beta")
    _write(tmp_path, "PORTFOLIO-alpha.md", "alpha")
    _write(tmp_path, "PORTFOLIO-TEMPLATE.md")
    _write(tmp_path, "notes.md")
    source = LocalDirectorySource(tmp_path, owner="octo", clock=lambda: FIXED_NOW)

    assert source.list_projects() == ["alpha", "beta"]

    document = source.fetch("alpha")
    assert document is not None
    assert document.text == "alpha"
    assert document.metadata.repo_name == "alpha"
    assert document.metadata.repo_url == "https://github.com/octo/alpha"
    assert document.metadata.stars == 0
    assert document.metadata.updated_at == FIXED_NOW.isoformat()


def test_missing_directory_yields_nothing(tmp_path: Path) -> None:
    source = LocalDirectorySource(tmp_path / "absent", owner="octo")

    assert source.list_projects() == []
    assert source.fetch("anything") is None


def test_collision_last_scanned_wins(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path, "PORTFOLIO-app.md", "dash")
    _write(tmp_path, "PORTFOLIOapp.md", "no dash")
    source = LocalDirectorySource(tmp_path, owner="octo")

    with caplog.at_level(logging.WARNING):
        document = source.fetch("app")

    # "PORTFOLIOapp.md" sorts after "PORTFOLIO-app.md"
    assert document.text == "no dash"
    assert source.list_projects() == ["app"]
    assert "both map to project 'app'" in caplog.text


def test_unreadable_file_raises_transport_error(tmp_path: Path) -> None:
    _write(tmp_path, "PORTFOLIO-bad.md", "")
    (tmp_path / "PORTFOLIO-bad.md").write_bytes(b"\xff\xfe\xfa")
    source = LocalDirectorySource(tmp_path, owner="octo")

    with pytest.raises(TransportError):
        source.fetch("bad")


def test_unlistable_directory_raises_transport_error(tmp_path: Path) -> None:
    source = LocalDirectorySource(tmp_path, owner="octo")

    with patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
        with pytest.raises(TransportError, match="Cannot list"):
            source.fetch("app")


def test_local_assets(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    _write(assets / "app" / "screenshots", "one.png")
    source = LocalDirectorySource(tmp_path / "docs", owner="octo", assets_root=assets)

    entries = source.list_assets("app", "screenshots")

    assert [(entry.name, entry.path) for entry in entries] == [("one.png", "screenshots/one.png")]
    assert source.list_assets("app", "missing") == []


def test_layered_last_registered_wins(tmp_path: Path) -> None:
    files_dir = tmp_path / "portfolio-files"
    drafts_dir = tmp_path / "portfolio-drafts"
    _write(files_dir, "PORTFOLIO-shared.md", "published")
    _write(files_dir, "PORTFOLIO-only-files.md", "files")
    _write(drafts_dir, "PORTFOLIO-shared.md", "draft")
    _write(drafts_dir, "PORTFOLIO-only-drafts.md", "drafts")

    layered = LayeredSource()
    layered.register(LocalDirectorySource(files_dir, owner="octo", name="files"))
    layered.register(LocalDirectorySource(drafts_dir, owner="octo", name="drafts"))

    assert layered.describe() == ["files", "drafts"]
    assert layered.list_projects() == ["only-files", "shared", "only-drafts"]
    assert layered.fetch("shared").text == "draft"
    assert layered.fetch("only-files").text == "files"
    assert layered.fetch("missing") is None
