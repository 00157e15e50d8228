"""Services"""

from portfolio_sync.services.dataset_store import PortfolioLoader, load_dataset, write_dataset
from portfolio_sync.services.filters import categories_in_use, filter_projects, sort_projects
from portfolio_sync.services.normalizer import normalize
from portfolio_sync.services.ordering import apply_override, load_ordering_override
from portfolio_sync.services.sync_history import get_recent_sync_runs, record_sync_run

__all__ = [
    "normalize",
    "apply_override",
    "load_ordering_override",
    "filter_projects",
    "sort_projects",
    "categories_in_use",
    "PortfolioLoader",
    "load_dataset",
    "write_dataset",
    "record_sync_run",
    "get_recent_sync_runs",
]
