"""Shared dependencies for API routes."""

from __future__ import annotations

from portfolio_sync.config import load_settings
from portfolio_sync.services.dataset_store import PortfolioLoader


def get_portfolio_loader() -> PortfolioLoader:
    """Build a loader over the configured content directory.

    A fresh loader per request means a newly written dataset is served
    without restarting the API. Tests replace this dependency through
    ``app.dependency_overrides``.

    Returns:
        PortfolioLoader: Loader for ``portfolio.json`` and ``portfolio-order.json``.

    Raises:
        ConfigurationError: If the environment holds malformed settings.
    """
    settings = load_settings()
    return PortfolioLoader.from_content_dir(settings.content_dir)
