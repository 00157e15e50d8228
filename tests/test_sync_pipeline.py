"""Tests for the aggregation pipeline."""

from __future__ import annotations

import logging
import threading
import time
from datetime import UTC, datetime

import pytest
from helpers import make_frontmatter

from portfolio_sync.models.errors import TransportError
from portfolio_sync.models.sync import OutcomeKind
from portfolio_sync.services.document_sources import (
    DocumentSource,
    RepositoryMetadata,
    SourceDocument,
)
from portfolio_sync.services.filters import sort_projects
from portfolio_sync.services.frontmatter_parser import render_document
from portfolio_sync.workflows.sync_pipeline import aggregate, process_document

FIXED_NOW = datetime(2025, 2, 1, 9, 30, tzinfo=UTC)


class InMemorySource(DocumentSource):
    """Source backed by a dict; values that are exceptions are raised on fetch."""

    name = "memory"

    def __init__(self, documents: dict[str, str | Exception]) -> None:
        self.documents = documents

    def list_projects(self) -> list[str]:
        return list(self.documents)

    def fetch(self, project_id: str) -> SourceDocument | None:
        value = self.documents.get(project_id)
        if value is None:
            return None
        if isinstance(value, Exception):
            raise value
        metadata = RepositoryMetadata(
            repo_name=project_id,
            repo_url=f"https://github.com/octo/{project_id}",
            stars=3,
            language="Python",
            updated_at="2025-01-01T00:00:00Z",
            topics=("cli",),
        )
        return SourceDocument(project_id=project_id, text=value, metadata=metadata)


def _doc(body: str = "Body text.", **overrides: object) -> str:
    return render_document(make_frontmatter(**overrides), f"\n{body}\n\n")


def _run(documents: dict[str, str | Exception], **kwargs: object):
    source = InMemorySource(documents)
    return aggregate(source.list_projects(), source, clock=lambda: FIXED_NOW, **kwargs)


def test_accepted_record_carries_body_and_provenance() -> None:
    report = _run({"repo-a": _doc(slug="a", body="  Hello world  ")})

    [record] = report.dataset.projects
    assert record.slug == "a"
    assert record.body_markdown == "Hello world"
    assert record.repo_name == "repo-a"
    assert record.repo_url == "https://github.com/octo/repo-a"
    assert record.github_stars == 3
    assert record.github_topics == ("cli",)
    assert report.dataset.generated_at == FIXED_NOW.isoformat()


def test_priority_order() -> None:
    report = _run(
        {
            "repo-a": _doc(slug="a", portfolio_priority=5),
            "repo-b": _doc(slug="b", portfolio_priority=2),
        }
    )

    assert report.dataset.slugs == ["b", "a"]
    assert [p.slug for p in sort_projects(report.dataset.projects, "priority")] == ["b", "a"]


def test_equal_priorities_keep_discovery_order() -> None:
    report = _run({f"repo-{name}": _doc(slug=name) for name in ("c", "a", "b")})

    assert report.dataset.slugs == ["c", "a", "b"]


def test_every_project_gets_one_outcome() -> None:
    invalid = make_frontmatter(slug="bad")
    del invalid["title"]
    report = _run(
        {
            "ok": _doc(slug="ok"),
            "disabled": _doc(slug="off", portfolio_enabled=False),
            "invalid": render_document(invalid),
            "broken-yaml": "---\ntitle: [oops\n---\n",
            "offline": TransportError("Timed out after 10s"),
            "missing": None,
        }
    )

    kinds = {outcome.project_id: outcome.kind for outcome in report.outcomes}
    assert kinds == {
        "ok": OutcomeKind.ACCEPTED,
        "disabled": OutcomeKind.SKIPPED_DISABLED,
        "invalid": OutcomeKind.SKIPPED_INVALID,
        "broken-yaml": OutcomeKind.SKIPPED_INVALID,
        "offline": OutcomeKind.SKIPPED_ERROR,
        "missing": OutcomeKind.SKIPPED_NO_DOCUMENT,
    }
    assert report.dataset.slugs == ["ok"]
    assert report.format_summary() == (
        "1 accepted, 1 skipped-disabled, 2 skipped-invalid, 1 skipped-error, "
        "1 without document, 0 duplicate"
    )


def test_invalid_document_reports_field_and_batch_continues() -> None:
    invalid = make_frontmatter(slug="x")
    del invalid["title"]

    report = _run({"first": render_document(invalid), "second": _doc(slug="y")})

    first = report.outcomes[0]
    assert first.kind == OutcomeKind.SKIPPED_INVALID
    assert [violation.field for violation in first.violations] == ["title"]
    assert report.dataset.slugs == ["y"]


def test_transport_error_message_is_kept() -> None:
    report = _run({"offline": TransportError("Rate limit exceeded")})

    [outcome] = report.outcomes
    assert outcome.kind == OutcomeKind.SKIPPED_ERROR
    assert outcome.message == "Rate limit exceeded"


def test_disabled_records_never_published() -> None:
    report = _run({"a": _doc(slug="a", portfolio_enabled=False)})

    assert report.dataset.projects == ()
    assert report.outcomes[0].slug == "a"


def test_duplicate_slug_later_document_wins(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        report = _run(
            {
                "first": _doc(slug="same", title="First"),
                "other": _doc(slug="other"),
                "second": _doc(slug="same", title="Second"),
            }
        )

    assert report.dataset.slugs == ["other", "same"]
    assert report.dataset.get("same").title == "Second"
    assert report.outcomes[0].kind == OutcomeKind.SKIPPED_DUPLICATE
    assert report.outcomes[0].message == "replaced by second"
    assert report.outcomes[2].kind == OutcomeKind.ACCEPTED
    assert "Slug 'same'" in caplog.text


def test_empty_input_gives_empty_dataset() -> None:
    report = _run({})

    assert report.dataset.projects == ()
    assert report.outcomes == []
    assert report.summary()["accepted"] == 0


def test_worker_count_does_not_change_result() -> None:
    documents = {f"repo-{i}": _doc(slug=f"s{i}", portfolio_priority=(i % 3) + 1) for i in range(8)}

    serial = _run(documents, max_workers=1)
    parallel = _run(documents, max_workers=8)

    assert serial.dataset == parallel.dataset


def test_process_document_without_header_is_invalid() -> None:
    document = SourceDocument(
        project_id="p",
        text="# No header\n",
        metadata=RepositoryMetadata(repo_name="p", repo_url=""),
    )

    outcome, record = process_document("p", document)

    assert record is None
    assert outcome.kind == OutcomeKind.SKIPPED_INVALID
    assert {violation.field for violation in outcome.violations} >= {"title", "slug"}


def test_unexpected_fetch_error_is_recorded_and_batch_continues(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR):
        report = _run({"bad": PermissionError("denied"), "good": _doc(slug="good")})

    bad, good = report.outcomes
    assert bad.kind == OutcomeKind.SKIPPED_ERROR
    assert bad.message == "PermissionError: denied"
    assert good.kind == OutcomeKind.ACCEPTED
    assert report.dataset.slugs == ["good"]
    assert "Unexpected error fetching bad" in caplog.text


class StalledSource(InMemorySource):
    """Blocks on ``release`` when fetching the ``stalled`` project."""

    def __init__(self, documents: dict[str, str | Exception]) -> None:
        super().__init__(documents)
        self.release = threading.Event()

    def fetch(self, project_id: str) -> SourceDocument | None:
        if project_id == "stalled":
            self.release.wait(timeout=10)
        return super().fetch(project_id)


def test_fetch_past_timeout_is_skipped() -> None:
    source = StalledSource({"stalled": _doc(slug="slow"), "quick": _doc(slug="quick")})

    started = time.monotonic()
    try:
        report = aggregate(
            ["stalled", "quick"],
            source,
            max_workers=2,
            fetch_timeout=0.1,
            clock=lambda: FIXED_NOW,
        )
    finally:
        source.release.set()

    assert time.monotonic() - started < 5
    stalled, quick = report.outcomes
    assert stalled.kind == OutcomeKind.SKIPPED_ERROR
    assert stalled.message == "Fetch timed out after 0.1s"
    assert quick.kind == OutcomeKind.ACCEPTED
    assert report.dataset.slugs == ["quick"]
