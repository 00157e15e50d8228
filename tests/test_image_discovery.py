"""Tests for screenshot and thumbnail discovery."""

from __future__ import annotations

from pathlib import Path

from portfolio_sync.services.document_sources import AssetEntry, LocalDirectorySource
from portfolio_sync.services.image_discovery import ProjectImages, discover_project_images, is_image


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")


def test_is_image() -> None:
    assert is_image(AssetEntry(name="Shot.PNG", path="Shot.PNG"))
    assert not is_image(AssetEntry(name="notes.md", path="notes.md"))
    assert not is_image(AssetEntry(name="icons.png", path="icons.png", is_file=False))


def test_discovers_folder_and_hinted_root_images(tmp_path: Path) -> None:
    project = tmp_path / "assets" / "bot"
    _touch(project / "screenshots" / "dashboard.png")
    _touch(project / "screenshots" / "readme.txt")
    _touch(project / "public" / "images" / "hero-banner.webp")
    _touch(project / "preview.jpg")
    _touch(project / "logo.png")
    source = LocalDirectorySource(tmp_path / "docs", owner="octo", assets_root=tmp_path / "assets")

    found = discover_project_images(source, "bot")

    assert [image.path for image in found.images] == [
        "screenshots/dashboard.png",
        "public/images/hero-banner.webp",
        "preview.jpg",
    ]
    assert found.thumbnail.path == "public/images/hero-banner.webp"


def test_thumbnail_falls_back_to_first_image() -> None:
    images = [AssetEntry(name="a.png", path="images/a.png"), AssetEntry(name="b.png", path="b.png")]

    assert ProjectImages("bot", images).thumbnail.path == "images/a.png"
    assert ProjectImages("bot").thumbnail is None


def test_project_without_assets(tmp_path: Path) -> None:
    source = LocalDirectorySource(tmp_path, owner="octo")

    assert discover_project_images(source, "bot").images == []
