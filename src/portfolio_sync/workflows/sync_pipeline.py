"""Aggregate PORTFOLIO.md documents into a validated, ordered dataset.

One bad document never aborts the batch: every project ends with exactly one
outcome in the report, and only accepted records reach the dataset.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import UTC, datetime

from portfolio_sync.models.errors import FrontmatterParseError, TransportError
from portfolio_sync.models.project import PortfolioDataset, ProjectRecord
from portfolio_sync.models.sync import FieldViolation, OutcomeKind, SyncOutcome, SyncReport
from portfolio_sync.services.document_sources import DocumentSource, SourceDocument
from portfolio_sync.services.frontmatter_parser import split_document
from portfolio_sync.services.normalizer import normalize

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4
DEFAULT_FETCH_TIMEOUT = 30.0

# (document, error message)
FetchResult = tuple[SourceDocument | None, str | None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _fetch(source: DocumentSource, project_id: str) -> FetchResult:
    try:
        return source.fetch(project_id), None
    except TransportError as exc:
        return None, str(exc)
    except Exception as exc:
        logger.exception("Unexpected error fetching %s", project_id)
        return None, f"{type(exc).__name__}: {exc}"


def _wait(future: Future[FetchResult], timeout: float | None) -> FetchResult:
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        future.cancel()
        return None, f"Fetch timed out after {timeout}s"


def attach_provenance(record: ProjectRecord, document: SourceDocument, body: str) -> ProjectRecord:
    """Return a copy of the record carrying its body and source metadata."""
    metadata = document.metadata
    return record.model_copy(
        update={
            "body_markdown": body.strip(),
            "repo_name": metadata.repo_name,
            "repo_url": metadata.repo_url,
            "github_stars": metadata.stars,
            "github_forks": metadata.forks,
            "github_language": metadata.language,
            "github_updated_at": metadata.updated_at,
            "github_description": metadata.description,
            "github_topics": metadata.topics,
        }
    )


def process_document(
    project_id: str, document: SourceDocument
) -> tuple[SyncOutcome, ProjectRecord | None]:
    """Parse and normalize one document.

    Returns:
        The outcome, and the record when the document was accepted.
    """
    try:
        header, body = split_document(document.text)
    except FrontmatterParseError as exc:
        violation = FieldViolation(field="frontmatter", message=str(exc))
        return SyncOutcome(project_id, OutcomeKind.SKIPPED_INVALID, violations=[violation]), None

    result = normalize(header)
    if result.record is None:
        return (
            SyncOutcome(project_id, OutcomeKind.SKIPPED_INVALID, violations=result.violations),
            None,
        )

    record = result.record
    if not record.portfolio_enabled:
        return SyncOutcome(project_id, OutcomeKind.SKIPPED_DISABLED, slug=record.slug), None

    record = attach_provenance(record, document, body)
    return SyncOutcome(project_id, OutcomeKind.ACCEPTED, slug=record.slug), record


def aggregate(
    project_ids: Iterable[str],
    source: DocumentSource,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    fetch_timeout: float | None = DEFAULT_FETCH_TIMEOUT,
    clock: Callable[[], datetime] = _utcnow,
) -> SyncReport:
    """Build a dataset from the documents of the given projects.

    Projects are fetched by a bounded worker pool and processed in the order
    supplied. A fetch that fails or outlives ``fetch_timeout`` is recorded as
    ``SKIPPED_ERROR`` and the batch continues. When two documents share a slug,
    the later one replaces the earlier, whose outcome becomes
    ``SKIPPED_DUPLICATE``. Accepted records are stably sorted by
    ``portfolio_priority``.

    Args:
        project_ids: Identifiers to process, in discovery order.
        source: Where documents are fetched from.
        max_workers: Upper bound on concurrent fetches.
        fetch_timeout: Seconds to wait for each fetch result; None waits forever.
        clock: Source of the ``generated_at`` timestamp.

    Returns:
        SyncReport holding the dataset and one outcome per project.
    """
    ids = list(project_ids)
    outcomes: list[SyncOutcome] = []
    accepted: dict[str, tuple[ProjectRecord, SyncOutcome]] = {}

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    try:
        futures = [executor.submit(_fetch, source, project_id) for project_id in ids]

        for project_id, future in zip(ids, futures, strict=True):
            document, error = _wait(future, fetch_timeout)
            if error is not None:
                logger.warning("Fetching %s failed: %s", project_id, error)
                outcomes.append(SyncOutcome(project_id, OutcomeKind.SKIPPED_ERROR, message=error))
                continue

            if document is None:
                outcomes.append(SyncOutcome(project_id, OutcomeKind.SKIPPED_NO_DOCUMENT))
                continue

            outcome, record = process_document(project_id, document)
            outcomes.append(outcome)
            if record is None:
                continue

            previous = accepted.pop(record.slug, None)
            if previous is not None:
                _, previous_outcome = previous
                logger.warning(
                    "Slug %r from %s replaces the one from %s",
                    record.slug,
                    project_id,
                    previous_outcome.project_id,
                )
                previous_outcome.kind = OutcomeKind.SKIPPED_DUPLICATE
                previous_outcome.message = f"replaced by {project_id}"
            accepted[record.slug] = (record, outcome)
    finally:
        # A timed-out fetch keeps its worker thread until it returns on its own.
        executor.shutdown(wait=False, cancel_futures=True)

    projects = sorted(
        (record for record, _ in accepted.values()),
        key=lambda record: record.portfolio_priority,
    )
    dataset = PortfolioDataset(generated_at=clock().isoformat(), projects=tuple(projects))
    return SyncReport(dataset=dataset, outcomes=outcomes)
