"""Generate draft PORTFOLIO.md documents for repositories that lack one.

Drafts are inferred from repository metadata only (name, description, topics,
language, homepage and dates). Fields that cannot be inferred carry a
``FILL IN:`` placeholder for the author to replace before publishing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from portfolio_sync.constants.portfolio_constants import (
    MAX_PRIORITY,
    MAX_TAGLINE_LENGTH,
    MIN_PRIORITY,
    ProjectCategory,
    ProjectStatus,
)
from portfolio_sync.services.frontmatter_parser import render_document
from portfolio_sync.services.github_client import GitHubClient

PLACEHOLDER = "FILL IN:"

# topic -> display name
TECH_TOPICS: dict[str, str] = {
    "nextjs": "Next.js",
    "react": "React",
    "typescript": "TypeScript",
    "tailwindcss": "Tailwind CSS",
    "supabase": "Supabase",
    "prisma": "Prisma",
    "openai": "OpenAI API",
    "fastapi": "FastAPI",
    "python": "Python",
    "nodejs": "Node.js",
}

_CATEGORY_KEYWORDS: tuple[tuple[ProjectCategory, tuple[str, ...]], ...] = (
    (ProjectCategory.AI_AUTOMATION, ("ai", "chatbot", "gpt", "llm")),
    (ProjectCategory.TEMPLATES, ("starter", "template", "boilerplate")),
    (ProjectCategory.CLIENT_WORK, ("client", "agency", "freelance")),
)

_TITLE_FIXES = (
    (re.compile(r"\bAi\b"), "AI"),
    (re.compile(r"\bApi\b"), "API"),
    (re.compile(r"\bSaas\b"), "SaaS"),
)

_BODY = (
    "<!-- Add 2-3 paragraphs describing this project -->\n"
    "<!-- Focus on the business value and what makes this project notable -->\n"
)


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _days_since(value: str | None, now: datetime) -> float | None:
    parsed = _parse_timestamp(value)
    if parsed is None:
        return None
    return (now - parsed).total_seconds() / 86400


def generate_slug(name: str) -> str:
    """Lowercase the name and collapse every other run of characters into ``-``."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "project"


def format_title(name: str) -> str:
    """Turn ``my-ai-app`` into ``My AI App``."""
    title = re.sub(r"\b\w", lambda match: match.group(0).upper(), name.replace("-", " "))
    for pattern, replacement in _TITLE_FIXES:
        title = pattern.sub(replacement, title)
    return title


def infer_category(repo: dict[str, Any]) -> ProjectCategory:
    """Guess a category from the repository name, description and topics."""
    text = " ".join(
        [repo.get("name") or "", repo.get("description") or "", *(repo.get("topics") or [])]
    ).lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return ProjectCategory.TOOLS


def infer_priority(repo: dict[str, Any], now: datetime) -> int:
    """Score a repository between 1 and 10, lower meaning more prominent."""
    priority = 5
    if len(repo.get("description") or "") > 50:
        priority -= 1
    if len(repo.get("topics") or []) >= 3:
        priority -= 1

    days = _days_since(repo.get("updated_at"), now)
    if days is not None:
        months = days / 30
        if months < 3:
            priority -= 1
        if months > 12:
            priority += 1

    return max(MIN_PRIORITY, min(MAX_PRIORITY, priority))


def infer_status(repo: dict[str, Any], now: datetime) -> ProjectStatus:
    name = (repo.get("name") or "").lower()
    if "starter" in name or "template" in name:
        return ProjectStatus.PRODUCTION

    days = _days_since(repo.get("updated_at"), now)
    if days is not None and days > 180:
        return ProjectStatus.ARCHIVED
    if "mvp" in name or "demo" in name:
        return ProjectStatus.MVP
    return ProjectStatus.PRODUCTION


def infer_tech_stack(repo: dict[str, Any]) -> list[str]:
    """Primary language plus technologies named by topics, at most six entries."""
    stack: list[str] = []
    if repo.get("language"):
        stack.append(repo["language"])

    topics = {topic.lower() for topic in repo.get("topics") or []}
    for topic, tech in TECH_TOPICS.items():
        if topic in topics and tech not in stack:
            stack.append(tech)

    if len(stack) < 3:
        stack.append(f"{PLACEHOLDER} Add tech")
    return stack[:6]


def _problem(repo: dict[str, Any]) -> str:
    description = repo.get("description") or ""
    lowered = description.lower()
    if len(description) > 30 and ("help" in lowered or "automat" in lowered):
        return description
    return f"{PLACEHOLDER} Describe the pain point this project solves."


def _solution(repo: dict[str, Any]) -> str:
    description = repo.get("description") or ""
    if len(description) > 20:
        return description
    return f"{PLACEHOLDER} Describe how this project solves the problem."


def build_draft_frontmatter(repo: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Build the header mapping of a draft document."""
    priority = infer_priority(repo, now)
    homepage = repo.get("homepage") or ""
    if not homepage.startswith(("http://", "https://")):
        homepage = ""
    demo_url = homepage if "demo" in homepage else ""
    live_url = "" if demo_url else homepage

    created = _parse_timestamp(repo.get("created_at"))
    tagline = repo.get("description") or f"{PLACEHOLDER} Add a compelling one-line description"

    header: dict[str, Any] = {
        "portfolio_enabled": True,
        "portfolio_priority": priority,
        "portfolio_featured": priority <= 3,
        "title": format_title(repo["name"]),
        "tagline": tagline[:MAX_TAGLINE_LENGTH],
        "slug": generate_slug(repo["name"]),
        "category": infer_category(repo).value,
        "tech_stack": infer_tech_stack(repo),
        "thumbnail": "",
        "status": infer_status(repo, now).value,
        "problem": _problem(repo),
        "solution": _solution(repo),
        "key_features": [
            f"{PLACEHOLDER} Feature 1 with measurable impact",
            f"{PLACEHOLDER} Feature 2 explaining capability",
            f"{PLACEHOLDER} Feature 3 showing value",
        ],
        "metrics": [],
        "demo_url": demo_url,
        "live_url": live_url,
        "hero_images": [],
        "tags": list((repo.get("topics") or [])[:5]),
    }
    if created is not None:
        header["date_completed"] = created.strftime("%Y-%m")
    return header


def render_draft(repo: dict[str, Any], now: datetime | None = None) -> str:
    """Render a complete draft PORTFOLIO.md for a repository payload."""
    header = build_draft_frontmatter(repo, now or datetime.now(UTC))
    return render_document(header, _BODY)


def repos_without_document(
    client: GitHubClient, repos: Iterable[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Return the repositories that have no PORTFOLIO.md.

    Raises:
        TransportError: If GitHub cannot be reached.
    """
    return [repo for repo in repos if client.get_document_text(repo["name"]) is None]
