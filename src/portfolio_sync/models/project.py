"""Canonical portfolio records and the dataset handed to the presentation layer."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from portfolio_sync.constants.portfolio_constants import (
    DEFAULT_STATUS,
    MAX_HERO_IMAGES,
    MAX_KEY_FEATURES,
    MAX_METRICS,
    MAX_PRIORITY,
    MAX_TAGS,
    MAX_TECH_STACK,
    MIN_PRIORITY,
    ProjectCategory,
    ProjectStatus,
)
from portfolio_sync.models.fields import (
    ImagePathOrUrl,
    Narrative,
    Slug,
    Tagline,
    Title,
    UrlOrEmpty,
)

# Fields authored in PORTFOLIO.md frontmatter (as opposed to body and provenance)
FRONTMATTER_FIELDS = (
    "portfolio_enabled",
    "portfolio_priority",
    "portfolio_featured",
    "title",
    "tagline",
    "slug",
    "category",
    "tech_stack",
    "thumbnail",
    "status",
    "problem",
    "solution",
    "key_features",
    "metrics",
    "demo_url",
    "live_url",
    "demo_video_url",
    "hero_images",
    "tags",
    "date_completed",
)


class ProjectRecord(BaseModel):
    """A validated portfolio project in canonical form.

    Records are immutable; derived copies are produced with ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    # Control
    portfolio_enabled: bool
    portfolio_priority: Annotated[int, Field(ge=MIN_PRIORITY, le=MAX_PRIORITY)]
    portfolio_featured: bool = False

    # Identity and display
    slug: Slug
    title: Title
    tagline: Tagline
    category: ProjectCategory
    tech_stack: Annotated[tuple[str, ...], Field(min_length=1, max_length=MAX_TECH_STACK)]
    thumbnail: ImagePathOrUrl = ""
    status: ProjectStatus = DEFAULT_STATUS

    # Narrative
    problem: Narrative = ""
    solution: Narrative = ""
    key_features: Annotated[tuple[str, ...], Field(max_length=MAX_KEY_FEATURES)] = ()
    metrics: Annotated[tuple[str, ...], Field(max_length=MAX_METRICS)] = ()
    body_markdown: str = ""

    # Links
    demo_url: UrlOrEmpty = ""
    live_url: UrlOrEmpty = ""
    demo_video_url: ImagePathOrUrl = ""

    # Media and meta
    hero_images: Annotated[tuple[ImagePathOrUrl, ...], Field(max_length=MAX_HERO_IMAGES)] = ()
    tags: Annotated[tuple[str, ...], Field(max_length=MAX_TAGS)] = ()
    date_completed: str | None = None

    # Provenance, attached during aggregation
    repo_name: str = ""
    repo_url: str = ""
    github_stars: int = 0
    github_forks: int = 0
    github_language: str | None = None
    github_updated_at: str = ""
    github_description: str = ""
    github_topics: tuple[str, ...] = ()


class PortfolioDataset(BaseModel):
    """Snapshot produced by one aggregation run."""

    model_config = ConfigDict(frozen=True)

    generated_at: str
    projects: tuple[ProjectRecord, ...] = ()

    @property
    def slugs(self) -> list[str]:
        return [project.slug for project in self.projects]

    def get(self, slug: str) -> ProjectRecord | None:
        """Return the record with the given slug, if present."""
        for project in self.projects:
            if project.slug == slug:
                return project
        return None


class OrderingOverride(BaseModel):
    """Hand-maintained display order and featured list.

    Attributes:
        order: Slugs to show first, in this exact sequence.
        featured: Slugs forced to ``portfolio_featured = True``.
    """

    model_config = ConfigDict(frozen=True)

    order: tuple[str, ...] = ()
    featured: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.order and not self.featured
