"""Raw frontmatter model accepting every field name ever used in PORTFOLIO.md.

Canonical fields and their deprecated aliases live side by side as explicit
optional fields. Reduction to the canonical shape happens in
``portfolio_sync.services.normalizer``; this model only validates structure.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from portfolio_sync.constants.portfolio_constants import (
    MAX_HERO_IMAGES,
    MAX_KEY_FEATURES,
    MAX_METRICS,
    MAX_PRIORITY,
    MAX_TAGS,
    MAX_TECH_STACK,
    MIN_PRIORITY,
    LegacyComplexity,
    ProjectCategory,
    ProjectStatus,
)
from portfolio_sync.models.fields import (
    DateString,
    ImagePathOrUrl,
    Narrative,
    Slug,
    Tagline,
    Title,
    UrlOrEmpty,
)

TechStack = Annotated[list[str], Field(min_length=1, max_length=MAX_TECH_STACK)]
FeatureList = Annotated[list[str], Field(max_length=MAX_KEY_FEATURES)]
MetricList = Annotated[list[str], Field(max_length=MAX_METRICS)]
ImageList = Annotated[list[ImagePathOrUrl], Field(max_length=MAX_HERO_IMAGES)]
TagList = Annotated[list[str], Field(max_length=MAX_TAGS)]

REQUIRED_FIELDS = (
    "portfolio_enabled",
    "portfolio_priority",
    "title",
    "tagline",
    "slug",
    "category",
    "tech_stack",
)


class RawFrontmatter(BaseModel):
    """Union of canonical and legacy PORTFOLIO.md header fields."""

    model_config = ConfigDict(extra="ignore")

    # Control flags
    portfolio_enabled: StrictBool
    portfolio_priority: Annotated[StrictInt, Field(ge=MIN_PRIORITY, le=MAX_PRIORITY)]
    portfolio_featured: StrictBool = False
    portfolio_last_reviewed: DateString | None = None  # legacy, dropped

    # Card display
    title: Title
    tagline: Tagline
    slug: Slug
    category: ProjectCategory
    tech_stack: TechStack
    thumbnail: ImagePathOrUrl = ""
    thumbnail_url: ImagePathOrUrl | None = None  # legacy alias of thumbnail

    status: ProjectStatus | None = None
    complexity: LegacyComplexity | None = None  # legacy alias of status

    # Detail page
    problem: Narrative | None = None
    solution: Narrative | None = None
    key_features: FeatureList | None = None
    metrics: MetricList | None = None

    # Detail page, legacy names
    problem_solved: Narrative | None = None
    key_outcomes: FeatureList | None = None
    target_audience: str | None = None  # dropped

    # Links
    demo_url: UrlOrEmpty | None = None
    live_url: UrlOrEmpty | None = None
    case_study_url: str | None = None  # dropped
    demo_video_url: ImagePathOrUrl | None = None

    # Optional extras
    hero_images: ImageList = Field(default_factory=list)
    hero_image_urls: ImageList | None = None  # legacy alias of hero_images
    tags: TagList = Field(default_factory=list)
    date_completed: DateString | None = None
