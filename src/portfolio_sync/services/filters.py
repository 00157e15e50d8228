"""Pure filter and sort views over portfolio records.

Nothing here mutates its input: every function returns a new list, so the same
dataset can be queried repeatedly with identical results.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from portfolio_sync.constants.portfolio_constants import ALL_CATEGORIES, SortOption
from portfolio_sync.models.project import OrderingOverride, ProjectRecord
from portfolio_sync.services.ordering import apply_order

_OLDEST = datetime.min.replace(tzinfo=UTC)


def _updated_at(project: ProjectRecord) -> datetime:
    # Unparseable or missing timestamps sort after every real one.
    try:
        parsed = datetime.fromisoformat(project.github_updated_at.replace("Z", "+00:00"))
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def filter_projects(projects: Sequence[ProjectRecord], category: str) -> list[ProjectRecord]:
    """Return the projects in ``category``; ``"all"`` returns every project."""
    if category == ALL_CATEGORIES:
        return list(projects)
    return [project for project in projects if project.category == category]


def sort_projects(
    projects: Sequence[ProjectRecord],
    sort_by: SortOption | str,
    override: OrderingOverride | None = None,
) -> list[ProjectRecord]:
    """Return the projects sorted by the given strategy.

    All strategies are stable: ties keep their input order.

    Args:
        projects: Records to sort.
        sort_by: ``priority`` (ascending, override-aware), ``recent``
            (newest ``github_updated_at`` first) or ``popular`` (most stars first).
        override: Ordering override to honour for ``priority``.

    Raises:
        ValueError: If ``sort_by`` is not a known strategy.
    """
    option = SortOption(sort_by)

    if option is SortOption.PRIORITY:
        by_priority = sorted(projects, key=lambda project: project.portfolio_priority)
        if override is not None:
            return apply_order(by_priority, override.order)
        return by_priority
    if option is SortOption.RECENT:
        return sorted(projects, key=_updated_at, reverse=True)
    return sorted(projects, key=lambda project: project.github_stars, reverse=True)


def categories_in_use(projects: Sequence[ProjectRecord]) -> list[str]:
    """Return the distinct categories present, in first-seen order."""
    seen: dict[str, None] = {}
    for project in projects:
        seen.setdefault(str(project.category), None)
    return list(seen)
