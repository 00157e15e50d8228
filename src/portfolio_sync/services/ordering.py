"""Hand-maintained ordering and featured overrides.

The override file (``content/portfolio-order.json``) looks like::

    {"order": ["slug-a", "slug-b"], "featured": ["slug-b"]}

Featured policy: the override list is unioned with each record's own
``portfolio_featured`` flag. A listed slug is always featured; an unlisted
record keeps whatever its frontmatter says.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from portfolio_sync.models.errors import ConfigurationError
from portfolio_sync.models.project import OrderingOverride, PortfolioDataset, ProjectRecord

logger = logging.getLogger(__name__)

__all__ = [
    "apply_featured",
    "apply_order",
    "apply_override",
    "load_ordering_override",
]


def load_ordering_override(path: Path) -> OrderingOverride:
    """Load the override file; a missing file yields an empty override.

    Raises:
        ConfigurationError: If the file exists but is not a valid override.
    """
    if not path.exists():
        logger.info("No ordering override at %s; using defaults", path)
        return OrderingOverride()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return OrderingOverride.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid ordering override {path}: {exc}") from exc


def apply_featured(
    projects: Sequence[ProjectRecord], featured: Sequence[str]
) -> list[ProjectRecord]:
    """Force ``portfolio_featured`` on listed slugs, keeping everyone else's flag."""
    featured_slugs = set(featured)
    return [
        project.model_copy(update={"portfolio_featured": True})
        if project.slug in featured_slugs and not project.portfolio_featured
        else project
        for project in projects
    ]


def apply_order(projects: Sequence[ProjectRecord], order: Sequence[str]) -> list[ProjectRecord]:
    """Put listed slugs first in the given sequence, the rest after in their current order.

    An empty ``order`` leaves the sequence untouched. A repeated slug keeps its
    first position.
    """
    if not order:
        return list(projects)

    position = {slug: index for index, slug in enumerate(dict.fromkeys(order))}
    unlisted = len(position)
    return sorted(projects, key=lambda project: position.get(project.slug, unlisted))


def apply_override(dataset: PortfolioDataset, override: OrderingOverride) -> PortfolioDataset:
    """Return a new dataset with the override's featured flags and order applied."""
    if override.is_empty:
        return dataset

    projects = apply_featured(dataset.projects, override.featured)
    projects = apply_order(projects, override.order)
    return dataset.model_copy(update={"projects": tuple(projects)})
