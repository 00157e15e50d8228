"""Data models describing the outcome of a sync run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum

from portfolio_sync.models.project import PortfolioDataset, ProjectRecord


class OutcomeKind(StrEnum):
    """What happened to a single project during aggregation."""

    ACCEPTED = "accepted"
    SKIPPED_NO_DOCUMENT = "skipped: no document"
    SKIPPED_INVALID = "skipped: invalid"
    SKIPPED_DISABLED = "skipped: disabled"
    SKIPPED_ERROR = "skipped: error"
    SKIPPED_DUPLICATE = "skipped: duplicate"


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single schema constraint violated by a document.

    Attributes:
        field: Dotted path of the offending field (e.g. ``title`` or ``hero_images.2``).
        message: Human-readable description of the violated constraint.
    """

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(slots=True)
class NormalizationResult:
    """Either a canonical record or the full list of violations."""

    record: ProjectRecord | None = None
    violations: list[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.violations


@dataclass(slots=True)
class SyncOutcome:
    """Per-project entry of the outcome log.

    Attributes:
        project_id: Identifier the document was requested with.
        kind: Outcome classification.
        slug: Slug of the normalized record, when one was produced.
        message: Diagnostic text for errors and duplicates.
        violations: Validation failures for ``SKIPPED_INVALID`` outcomes.
    """

    project_id: str
    kind: OutcomeKind
    slug: str | None = None
    message: str | None = None
    violations: list[FieldViolation] = field(default_factory=list)


@dataclass(slots=True)
class SyncReport:
    """Result of an aggregation run: the dataset plus the outcome log."""

    dataset: PortfolioDataset
    outcomes: list[SyncOutcome] = field(default_factory=list)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind == kind)

    def summary(self) -> dict[str, int]:
        """Return outcome counts keyed by outcome kind value, zeros included."""
        counts = Counter(outcome.kind for outcome in self.outcomes)
        return {kind.value: counts.get(kind, 0) for kind in OutcomeKind}

    def format_summary(self) -> str:
        """Format the end-of-run summary line."""
        return (
            f"{self.count(OutcomeKind.ACCEPTED)} accepted, "
            f"{self.count(OutcomeKind.SKIPPED_DISABLED)} skipped-disabled, "
            f"{self.count(OutcomeKind.SKIPPED_INVALID)} skipped-invalid, "
            f"{self.count(OutcomeKind.SKIPPED_ERROR)} skipped-error, "
            f"{self.count(OutcomeKind.SKIPPED_NO_DOCUMENT)} without document, "
            f"{self.count(OutcomeKind.SKIPPED_DUPLICATE)} duplicate"
        )
