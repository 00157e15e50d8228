"""Reduce raw PORTFOLIO.md frontmatter to a canonical ProjectRecord.

Each canonical field is resolved independently:

1. the canonical field, if non-empty;
2. otherwise the deprecated alias (after migration, for ``complexity``);
3. otherwise the documented default.

A document may therefore mix canonical values for some fields with legacy
fallbacks for others.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from portfolio_sync.constants.portfolio_constants import DEFAULT_STATUS, migrate_complexity
from portfolio_sync.models.frontmatter import RawFrontmatter
from portfolio_sync.models.project import ProjectRecord
from portfolio_sync.models.sync import FieldViolation, NormalizationResult

__all__ = ["canonicalize", "normalize", "violations_from_error"]

T = TypeVar("T")


def _first_non_empty(*candidates: T | None, default: T) -> T:
    for candidate in candidates:
        if candidate:
            return candidate
    return default


def violations_from_error(error: ValidationError) -> list[FieldViolation]:
    """Convert a pydantic ValidationError into one violation per error entry."""
    violations: list[FieldViolation] = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"]) or "frontmatter"
        violations.append(FieldViolation(field=path, message=issue["msg"]))
    return violations


def canonicalize(raw: RawFrontmatter) -> ProjectRecord:
    """Map a structurally valid RawFrontmatter onto the canonical record."""
    legacy_status = migrate_complexity(raw.complexity) if raw.complexity else None

    return ProjectRecord(
        portfolio_enabled=raw.portfolio_enabled,
        portfolio_priority=raw.portfolio_priority,
        portfolio_featured=raw.portfolio_featured,
        slug=raw.slug,
        title=raw.title,
        tagline=raw.tagline,
        category=raw.category,
        tech_stack=tuple(raw.tech_stack),
        thumbnail=_first_non_empty(raw.thumbnail, raw.thumbnail_url, default=""),
        status=_first_non_empty(raw.status, legacy_status, default=DEFAULT_STATUS),
        problem=_first_non_empty(raw.problem, raw.problem_solved, default=""),
        solution=_first_non_empty(raw.solution, default=""),
        key_features=tuple(_first_non_empty(raw.key_features, raw.key_outcomes, default=[])),
        metrics=tuple(_first_non_empty(raw.metrics, default=[])),
        demo_url=_first_non_empty(raw.demo_url, default=""),
        live_url=_first_non_empty(raw.live_url, default=""),
        demo_video_url=_first_non_empty(raw.demo_video_url, default=""),
        hero_images=tuple(_first_non_empty(raw.hero_images, raw.hero_image_urls, default=[])),
        tags=tuple(raw.tags),
        date_completed=raw.date_completed,
    )


def normalize(raw: Mapping[str, Any] | Any) -> NormalizationResult:
    """Validate raw frontmatter and reduce it to a ProjectRecord.

    Validation does not stop at the first problem: every violated constraint of
    the document is reported.

    Args:
        raw: Parsed frontmatter mapping.

    Returns:
        NormalizationResult holding the record, or the list of violations.
    """
    if not isinstance(raw, Mapping):
        return NormalizationResult(
            violations=[FieldViolation(field="frontmatter", message="must be a mapping")]
        )

    try:
        frontmatter = RawFrontmatter.model_validate(dict(raw))
    except ValidationError as exc:
        return NormalizationResult(violations=violations_from_error(exc))

    return NormalizationResult(record=canonicalize(frontmatter))
