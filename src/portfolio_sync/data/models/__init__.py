"""ORM models package for database tables.

- SyncRun: Summary counts of one aggregation run
- SyncOutcomeRecord: Per-project outcome within a run

All models inherit from the shared Base declarative class defined in data.db.
"""

from portfolio_sync.data.db import Base
from portfolio_sync.data.models.sync_run import SyncOutcomeRecord, SyncRun

__all__ = ["Base", "SyncOutcomeRecord", "SyncRun"]
