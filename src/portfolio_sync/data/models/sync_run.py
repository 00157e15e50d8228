"""ORM models recording sync runs and their per-project outcomes.

A SyncRun row is written at the end of every aggregation with the summary
counts; each SyncOutcomeRecord row keeps the outcome of one project, including
the validation messages of rejected documents.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_sync.data.db import Base


class SyncRun(Base):
    """Persisted summary of one aggregation run.

    Attributes:
        id: Auto-incrementing primary key.
        source: Name of the document source the run read from.
        generated_at: Timestamp stamped on the produced dataset.
        accepted: Number of records published.
        skipped_disabled: Documents with ``portfolio_enabled: false``.
        skipped_invalid: Documents failing validation.
        skipped_error: Projects whose fetch failed.
        skipped_no_document: Projects without a PORTFOLIO.md.
        skipped_duplicate: Documents replaced by a later one with the same slug.
        created_at: UTC timestamp of when the run was recorded.
    """

    __tablename__ = "sync_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source: Mapped[str] = mapped_column(String, nullable=False)
    generated_at: Mapped[str] = mapped_column(String, nullable=False)
    accepted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped_disabled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped_invalid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped_error: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped_no_document: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skipped_duplicate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    outcomes: Mapped[list[SyncOutcomeRecord]] = relationship(
        "SyncOutcomeRecord",
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="SyncOutcomeRecord.id",
    )


class SyncOutcomeRecord(Base):
    """Outcome of one project within a sync run."""

    __tablename__ = "sync_outcomes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sync_runs.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str | None] = mapped_column(String, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    run: Mapped[SyncRun] = relationship("SyncRun", back_populates="outcomes")
