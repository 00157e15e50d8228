"""Pydantic schemas for project API responses."""

from __future__ import annotations

from pydantic import BaseModel

from portfolio_sync.constants.portfolio_constants import SortOption
from portfolio_sync.models.project import ProjectRecord


class ProjectListResponse(BaseModel):
    """Projects of one category in the requested order."""

    category: str
    sort: SortOption
    total: int
    generated_at: str
    items: list[ProjectRecord]


class CategoriesResponse(BaseModel):
    """Categories that have at least one published project."""

    categories: list[str]
