"""Document source implementations.

A document source answers two questions for the sync engine: which project
identifiers it knows about, and what the PORTFOLIO.md text is for one of them.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from portfolio_sync.models.errors import TransportError

logger = logging.getLogger(__name__)

_LOCAL_PREFIX_RE = re.compile(r"^PORTFOLIO-?")
_LOCAL_SUFFIX = ".md"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RepositoryMetadata:
    """Provenance attached to every record coming from a source."""

    repo_name: str
    repo_url: str
    stars: int = 0
    forks: int = 0
    language: str | None = None
    updated_at: str = ""
    description: str = ""
    topics: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw document text plus the metadata of the source it came from."""

    project_id: str
    text: str
    metadata: RepositoryMetadata


@dataclass(frozen=True, slots=True)
class AssetEntry:
    """A file or folder listed under a project's source tree."""

    name: str
    path: str
    is_file: bool = True
    download_url: str | None = None


class DocumentSource(ABC):
    """Abstract base class for PORTFOLIO.md document sources."""

    name: str = "source"

    @abstractmethod
    def list_projects(self) -> list[str]:
        """Return the identifiers of every project this source can be asked about."""

    @abstractmethod
    def fetch(self, project_id: str) -> SourceDocument | None:
        """Return the document for a project, or None when it has none.

        Raises:
            TransportError: If the source could not be reached.
        """

    def list_assets(self, project_id: str, folder: str = "") -> list[AssetEntry]:
        """List the entries of a folder in the project's tree.

        Sources without a browsable tree return an empty list.
        """
        return []


class LocalDirectorySource(DocumentSource):
    """Documents stored as ``PORTFOLIO-<project>.md`` files in one directory.

    The project identifier is derived from the file name by stripping the
    ``PORTFOLIO``/``PORTFOLIO-`` prefix and the ``.md`` suffix. Files whose name
    contains ``TEMPLATE`` are ignored. If two files map to the same identifier,
    the one scanned last (by sorted file name) wins and a warning is logged.
    """

    def __init__(
        self,
        directory: Path,
        *,
        owner: str,
        name: str | None = None,
        assets_root: Path | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.directory = Path(directory)
        self.owner = owner
        self.name = name or self.directory.name
        self.assets_root = assets_root
        self._clock = clock

    @staticmethod
    def project_id_for(filename: str) -> str | None:
        """Return the project identifier for a file name, or None if it is not a document."""
        if not filename.startswith("PORTFOLIO") or not filename.endswith(_LOCAL_SUFFIX):
            return None
        if "TEMPLATE" in filename:
            return None
        stripped = _LOCAL_PREFIX_RE.sub("", filename)[: -len(_LOCAL_SUFFIX)]
        return stripped or filename

    def _index(self) -> dict[str, Path]:
        if not self.directory.is_dir():
            return {}

        try:
            entries = sorted(self.directory.iterdir(), key=lambda path: path.name)
        except OSError as exc:
            raise TransportError(f"Cannot list {self.directory}: {exc}") from exc

        files: dict[str, Path] = {}
        for entry in entries:
            if not entry.is_file():
                continue
            project_id = self.project_id_for(entry.name)
            if project_id is None:
                continue
            if project_id in files:
                logger.warning(
                    "%s: %s and %s both map to project %r; using %s",
                    self.name,
                    files[project_id].name,
                    entry.name,
                    project_id,
                    entry.name,
                )
            files[project_id] = entry
        return files

    def list_projects(self) -> list[str]:
        return list(self._index())

    def fetch(self, project_id: str) -> SourceDocument | None:
        path = self._index().get(project_id)
        if path is None:
            return None

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TransportError(f"Failed to read {path}: {exc}", project_id=project_id) from exc

        metadata = RepositoryMetadata(
            repo_name=project_id,
            repo_url=f"https://github.com/{self.owner}/{project_id}",
            updated_at=self._clock().isoformat(),
        )
        return SourceDocument(project_id=project_id, text=text, metadata=metadata)

    def list_assets(self, project_id: str, folder: str = "") -> list[AssetEntry]:
        if self.assets_root is None:
            return []

        base = self.assets_root / project_id
        target = base / folder if folder else base
        if not target.is_dir():
            return []

        return [
            AssetEntry(
                name=entry.name,
                path=entry.relative_to(base).as_posix(),
                is_file=entry.is_file(),
            )
            for entry in sorted(target.iterdir(), key=lambda path: path.name)
        ]


@dataclass
class LayeredSource(DocumentSource):
    """Combine several sources; the last registered one supplying a project wins.

    Replacement is whole-document: no field-level merging happens between layers.
    """

    sources: list[DocumentSource] = field(default_factory=list)
    name: str = "layered"

    def register(self, source: DocumentSource) -> None:
        """Add a source with higher precedence than every source registered so far."""
        self.sources.append(source)

    def list_projects(self) -> list[str]:
        seen: dict[str, None] = {}
        for source in self.sources:
            for project_id in source.list_projects():
                seen.setdefault(project_id, None)
        return list(seen)

    def _owner(self, project_id: str) -> DocumentSource | None:
        for source in reversed(self.sources):
            if project_id in source.list_projects():
                return source
        return None

    def fetch(self, project_id: str) -> SourceDocument | None:
        for source in reversed(self.sources):
            document = source.fetch(project_id)
            if document is not None:
                return document
        return None

    def list_assets(self, project_id: str, folder: str = "") -> list[AssetEntry]:
        owner = self._owner(project_id)
        if owner is None:
            return []
        return owner.list_assets(project_id, folder)

    def describe(self) -> Sequence[str]:
        """Return source names in precedence order, lowest first."""
        return [source.name for source in self.sources]
