"""Route handlers for the API."""

from portfolio_sync.api.routes import health, projects, sync_runs

__all__ = [
    "health",
    "projects",
    "sync_runs",
]
