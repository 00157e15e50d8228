"""Discover screenshot and thumbnail candidates in a project's source tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from portfolio_sync.services.document_sources import AssetEntry, DocumentSource

IMAGE_FOLDERS = (
    "screenshots",
    "images",
    "public/images",
    "public/screenshots",
    "docs/images",
    "assets",
)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")
ROOT_IMAGE_HINTS = ("thumbnail", "screenshot", "preview", "hero", "cover", "banner")
THUMBNAIL_HINTS = ("thumbnail", "hero", "preview")


@dataclass(slots=True)
class ProjectImages:
    """Images found for one project and the suggested thumbnail."""

    project_id: str
    images: list[AssetEntry] = field(default_factory=list)

    @property
    def thumbnail(self) -> AssetEntry | None:
        for image in self.images:
            name = image.name.lower()
            if any(hint in name for hint in THUMBNAIL_HINTS):
                return image
        return self.images[0] if self.images else None


def is_image(entry: AssetEntry) -> bool:
    return entry.is_file and PurePosixPath(entry.name).suffix.lower() in IMAGE_EXTENSIONS


def discover_project_images(source: DocumentSource, project_id: str) -> ProjectImages:
    """List images in the conventional folders plus hinted files at the root.

    Raises:
        TransportError: If the source cannot be reached.
    """
    images: list[AssetEntry] = []
    for folder in IMAGE_FOLDERS:
        images.extend(entry for entry in source.list_assets(project_id, folder) if is_image(entry))

    for entry in source.list_assets(project_id):
        if is_image(entry) and any(hint in entry.name.lower() for hint in ROOT_IMAGE_HINTS):
            images.append(entry)

    return ProjectImages(project_id=project_id, images=images)
