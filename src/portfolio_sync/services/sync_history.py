"""Persist and query the history of sync runs.

Recording history is best effort: a database failure is logged and never
turns a successful sync into a failed one.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from portfolio_sync.data.db import get_session
from portfolio_sync.data.models import SyncOutcomeRecord, SyncRun
from portfolio_sync.models.sync import OutcomeKind, SyncOutcome, SyncReport

logger = logging.getLogger(__name__)

__all__ = ["get_recent_sync_runs", "record_sync_run"]


def _outcome_message(outcome: SyncOutcome) -> str | None:
    if outcome.violations:
        return "; ".join(str(violation) for violation in outcome.violations)
    return outcome.message


def _run_to_dict(run: SyncRun) -> dict:
    return {
        "id": run.id,
        "source": run.source,
        "generated_at": run.generated_at,
        "accepted": run.accepted,
        "skipped_disabled": run.skipped_disabled,
        "skipped_invalid": run.skipped_invalid,
        "skipped_error": run.skipped_error,
        "skipped_no_document": run.skipped_no_document,
        "skipped_duplicate": run.skipped_duplicate,
        "created_at": run.created_at,
        "outcomes": [
            {
                "project_id": outcome.project_id,
                "kind": outcome.kind,
                "slug": outcome.slug,
                "message": outcome.message,
            }
            for outcome in run.outcomes
        ],
    }


def record_sync_run(report: SyncReport, source: str) -> int | None:
    """Store a sync report.

    Args:
        report: Report produced by the aggregator.
        source: Name of the document source used for the run.

    Returns:
        ID of the stored run, or None if it could not be stored.
    """
    try:
        with get_session() as session:
            run = SyncRun(
                source=source,
                generated_at=report.dataset.generated_at,
                accepted=report.count(OutcomeKind.ACCEPTED),
                skipped_disabled=report.count(OutcomeKind.SKIPPED_DISABLED),
                skipped_invalid=report.count(OutcomeKind.SKIPPED_INVALID),
                skipped_error=report.count(OutcomeKind.SKIPPED_ERROR),
                skipped_no_document=report.count(OutcomeKind.SKIPPED_NO_DOCUMENT),
                skipped_duplicate=report.count(OutcomeKind.SKIPPED_DUPLICATE),
            )
            run.outcomes = [
                SyncOutcomeRecord(
                    project_id=outcome.project_id,
                    kind=outcome.kind.value,
                    slug=outcome.slug,
                    message=_outcome_message(outcome),
                )
                for outcome in report.outcomes
            ]
            session.add(run)
            session.flush()
            return run.id
    except SQLAlchemyError:
        logger.exception("Failed to record sync run from %s", source)
        return None


def get_recent_sync_runs(limit: int = 10) -> list[dict]:
    """Return the most recent runs, newest first, with their outcomes."""
    with get_session() as session:
        runs = session.query(SyncRun).order_by(SyncRun.id.desc()).limit(limit).all()
        return [_run_to_dict(run) for run in runs]
