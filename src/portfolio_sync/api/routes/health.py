"""Health check routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from portfolio_sync.api.dependencies import get_portfolio_loader
from portfolio_sync.services.dataset_store import PortfolioLoader

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(
    loader: Annotated[PortfolioLoader, Depends(get_portfolio_loader)],
) -> dict[str, str]:
    """Report API status and whether a synced dataset is available."""
    dataset = "present" if loader.dataset_path.exists() else "missing"
    return {"status": "healthy", "dataset": dataset}
