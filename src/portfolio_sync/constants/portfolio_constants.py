"""Portfolio taxonomy and schema limits.

This module defines the enumerated values a portfolio document may use
(categories, status, legacy complexity), the table migrating the legacy
complexity field to the canonical status, and the size limits enforced by
the frontmatter schema.
"""

from __future__ import annotations

from enum import StrEnum

PORTFOLIO_FILENAME = "PORTFOLIO.md"

SLUG_PATTERN = r"^[a-z0-9-]+$"


class ProjectCategory(StrEnum):
    """Categories a portfolio project can be filed under."""

    AI_AUTOMATION = "AI Automation"
    TEMPLATES = "Templates"
    TOOLS = "Tools"
    DEVELOPER_TOOLS = "Developer Tools"
    CLIENT_WORK = "Client Work"
    GAMES = "Games"
    MARKETING = "Marketing"
    CREATIVE = "Creative"


class ProjectStatus(StrEnum):
    """Canonical project status."""

    PRODUCTION = "Production"
    MVP = "MVP"
    DEMO = "Demo"
    ARCHIVED = "Archived"


class LegacyComplexity(StrEnum):
    """Deprecated three-valued field replaced by ``status``."""

    MVP = "MVP"
    PRODUCTION = "Production"
    ENTERPRISE = "Enterprise"


class SortOption(StrEnum):
    """Sort strategies offered by the query layer."""

    PRIORITY = "priority"
    RECENT = "recent"
    POPULAR = "popular"


ALL_CATEGORIES = "all"

DEFAULT_STATUS = ProjectStatus.PRODUCTION

# Legacy complexity -> canonical status
COMPLEXITY_TO_STATUS: dict[LegacyComplexity, ProjectStatus] = {
    LegacyComplexity.MVP: ProjectStatus.MVP,
    LegacyComplexity.PRODUCTION: ProjectStatus.PRODUCTION,
    LegacyComplexity.ENTERPRISE: ProjectStatus.PRODUCTION,
}

# Schema limits
MIN_PRIORITY = 1
MAX_PRIORITY = 10
MAX_TITLE_LENGTH = 100
MAX_TAGLINE_LENGTH = 300
MAX_NARRATIVE_LENGTH = 2000
MAX_TECH_STACK = 20
MAX_KEY_FEATURES = 10
MAX_METRICS = 6
MAX_HERO_IMAGES = 10
MAX_TAGS = 10


def migrate_complexity(complexity: LegacyComplexity | str) -> ProjectStatus:
    """Map a legacy complexity value to the canonical status.

    Raises:
        ValueError: If the value is not a known legacy complexity.
    """
    return COMPLEXITY_TO_STATUS[LegacyComplexity(complexity)]
