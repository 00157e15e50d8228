from __future__ import annotations

from portfolio_sync.constants.portfolio_constants import (
    ALL_CATEGORIES,
    COMPLEXITY_TO_STATUS,
    DEFAULT_STATUS,
    PORTFOLIO_FILENAME,
    LegacyComplexity,
    ProjectCategory,
    ProjectStatus,
    SortOption,
    migrate_complexity,
)

__all__ = [
    "ALL_CATEGORIES",
    "COMPLEXITY_TO_STATUS",
    "DEFAULT_STATUS",
    "PORTFOLIO_FILENAME",
    "LegacyComplexity",
    "ProjectCategory",
    "ProjectStatus",
    "SortOption",
    "migrate_complexity",
]
