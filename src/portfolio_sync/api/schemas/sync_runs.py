"""Pydantic schemas for sync history responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SyncOutcomeResponse(BaseModel):
    project_id: str
    kind: str
    slug: str | None
    message: str | None


class SyncRunResponse(BaseModel):
    """One recorded aggregation run with its per-project outcomes."""

    id: int
    source: str
    generated_at: str
    accepted: int
    skipped_disabled: int
    skipped_invalid: int
    skipped_error: int
    skipped_no_document: int
    skipped_duplicate: int
    created_at: datetime
    outcomes: list[SyncOutcomeResponse]
