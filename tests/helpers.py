"""Factories for canonical headers and records shared by the tests."""

from __future__ import annotations

from typing import Any

from portfolio_sync.models.project import ProjectRecord


def make_frontmatter(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid canonical header, with overrides applied."""
    header: dict[str, Any] = {
        "portfolio_enabled": True,
        "portfolio_priority": 5,
        "title": "Sample Project",
        "tagline": "A sample project used in tests",
        "slug": "sample-project",
        "category": "Tools",
        "tech_stack": ["Python"],
    }
    header.update(overrides)
    return header


def make_record(**overrides: Any) -> ProjectRecord:
    """Return a valid ProjectRecord, with overrides applied."""
    fields: dict[str, Any] = {
        "portfolio_enabled": True,
        "portfolio_priority": 5,
        "slug": "sample-project",
        "title": "Sample Project",
        "tagline": "A sample project used in tests",
        "category": "Tools",
        "tech_stack": ("Python",),
    }
    fields.update(overrides)
    return ProjectRecord(**fields)
