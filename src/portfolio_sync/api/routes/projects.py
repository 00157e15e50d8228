"""Project routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portfolio_sync.api.dependencies import get_portfolio_loader
from portfolio_sync.api.schemas.projects import CategoriesResponse, ProjectListResponse
from portfolio_sync.constants.portfolio_constants import ALL_CATEGORIES, SortOption
from portfolio_sync.models.project import ProjectRecord
from portfolio_sync.services.dataset_store import PortfolioLoader

router = APIRouter(prefix="/projects", tags=["projects"])
global_router = APIRouter(tags=["projects"])

Loader = Annotated[PortfolioLoader, Depends(get_portfolio_loader)]


@router.get(
    "",
    response_model=ProjectListResponse,
    summary="List projects",
    description="Return published projects, optionally limited to one category.",
)
def list_projects(
    loader: Loader,
    category: str = Query(
        default=ALL_CATEGORIES,
        description=f"Category name, or '{ALL_CATEGORIES}' for every project",
    ),
    sort: SortOption = Query(
        default=SortOption.PRIORITY,
        description="Ordering: priority (override-aware), recent or popular",
    ),
) -> ProjectListResponse:
    projects = loader.get_projects(category, sort)
    return ProjectListResponse(
        category=category,
        sort=sort,
        total=len(projects),
        generated_at=loader.dataset.generated_at,
        items=projects,
    )


@router.get(
    "/{slug}",
    response_model=ProjectRecord,
    summary="Get a project",
    responses={404: {"description": "Project not found"}},
)
def get_project(slug: str, loader: Loader) -> ProjectRecord:
    project = loader.get_project(slug)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Project '{slug}' not found"
        )
    return project


@global_router.get("/categories", response_model=CategoriesResponse)
def list_categories(loader: Loader) -> CategoriesResponse:
    """Return the categories that have at least one published project."""
    return CategoriesResponse(categories=loader.categories())
