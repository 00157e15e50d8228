"""Write frontmatter changes back to PORTFOLIO.md files in remote repositories.

Only the ``portfolio_enabled`` and ``category`` lines inside the header are
rewritten; every other byte of the document is preserved.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from portfolio_sync.constants.portfolio_constants import ProjectCategory
from portfolio_sync.models.errors import ConfigurationError, TransportError
from portfolio_sync.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "chore: update portfolio settings"


class FrontmatterUpdate(BaseModel):
    """Fields to change in one repository's PORTFOLIO.md."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    portfolio_enabled: bool | None = None
    category: ProjectCategory | None = None


class RepoUpdate(BaseModel):
    """An update targeted at one repository."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    repo: str
    updates: FrontmatterUpdate


_UPDATE_LIST = TypeAdapter(list[RepoUpdate])


@dataclass(slots=True)
class BatchUpdateReport:
    """Counts and per-repository messages of a batch update."""

    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    def format_summary(self) -> str:
        return (
            f"{len(self.updated)} updated, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed"
        )


def load_updates(path: Path) -> list[RepoUpdate]:
    """Load a JSON list of ``{"repo": ..., "updates": {...}}`` entries.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    try:
        return _UPDATE_LIST.validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read update list {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid update list {path}: {exc}") from exc


def update_frontmatter_text(content: str, updates: FrontmatterUpdate) -> str:
    """Rewrite the targeted header lines of a document.

    Lines outside the first ``---`` delimited block are left untouched, as are
    header lines for fields not present in ``updates``.
    """
    lines = content.split("\n")
    result: list[str] = []
    delimiters_seen = 0

    for line in lines:
        if line.strip() == "---" and delimiters_seen < 2:
            delimiters_seen += 1
            result.append(line)
            continue

        in_header = delimiters_seen == 1
        if in_header and updates.portfolio_enabled is not None and line.startswith(
            "portfolio_enabled:"
        ):
            result.append(f"portfolio_enabled: {json.dumps(updates.portfolio_enabled)}")
        elif in_header and updates.category is not None and line.startswith("category:"):
            result.append(f'category: "{updates.category.value}"')
        else:
            result.append(line)

    return "\n".join(result)


def apply_batch_updates(
    client: GitHubClient,
    updates: Sequence[RepoUpdate],
    *,
    dry_run: bool = False,
    delay: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchUpdateReport:
    """Apply frontmatter updates to each repository's PORTFOLIO.md.

    Repositories without a document, or whose document already holds the
    requested values, are skipped. A failed write is recorded and the batch
    continues. Between write attempts the function sleeps ``delay`` seconds.
    """
    report = BatchUpdateReport()
    wrote_before = False

    for entry in updates:
        try:
            remote = client.get_file(entry.repo)
        except TransportError as exc:
            logger.warning("Reading PORTFOLIO.md from %s failed: %s", entry.repo, exc)
            report.failed[entry.repo] = str(exc)
            continue

        if remote is None:
            report.skipped.append(entry.repo)
            continue

        updated = update_frontmatter_text(remote.content, entry.updates)
        if updated == remote.content:
            report.skipped.append(entry.repo)
            continue

        if dry_run:
            report.updated.append(entry.repo)
            continue

        if wrote_before:
            sleep(delay)
        wrote_before = True

        try:
            client.put_file(entry.repo, updated, message=COMMIT_MESSAGE, sha=remote.sha)
        except TransportError as exc:
            logger.warning("Writing PORTFOLIO.md to %s failed: %s", entry.repo, exc)
            report.failed[entry.repo] = str(exc)
        else:
            report.updated.append(entry.repo)

    return report
