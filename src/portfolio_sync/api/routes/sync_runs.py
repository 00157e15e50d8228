"""Sync history routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, Query

from portfolio_sync.api.schemas.sync_runs import SyncRunResponse
from portfolio_sync.services.sync_history import get_recent_sync_runs

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

router = APIRouter(prefix="/sync-runs", tags=["sync-runs"])


@router.get(
    "",
    response_model=list[SyncRunResponse],
    summary="Recent sync runs",
    description="Return the most recent aggregation runs, newest first.",
)
def list_sync_runs(
    limit: int = Query(
        default=DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description=f"Maximum number of runs to return (1-{MAX_LIMIT})",
    ),
) -> list[SyncRunResponse]:
    return [SyncRunResponse.model_validate(run) for run in get_recent_sync_runs(limit)]
