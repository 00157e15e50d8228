"""Persist portfolio datasets and serve them to the presentation layer.

``content/portfolio.json`` is the only contract between the sync pipeline and
its consumers. ``PortfolioLoader`` reads it together with the ordering override
and exposes filtered, sorted views; it is constructed explicitly and passed to
whoever needs it rather than cached at module level.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from portfolio_sync.constants.portfolio_constants import ALL_CATEGORIES, SortOption
from portfolio_sync.models.project import OrderingOverride, PortfolioDataset, ProjectRecord
from portfolio_sync.services.filters import categories_in_use, filter_projects, sort_projects
from portfolio_sync.services.ordering import apply_override, load_ordering_override

logger = logging.getLogger(__name__)

DATASET_FILENAME = "portfolio.json"
ORDER_FILENAME = "portfolio-order.json"


def write_dataset(dataset: PortfolioDataset, path: Path) -> Path:
    """Write a dataset as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dataset.model_dump(mode="json")
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def load_dataset(path: Path) -> PortfolioDataset:
    """Read a dataset; a missing or unreadable file yields an empty dataset."""
    if not path.exists():
        logger.info("No dataset at %s", path)
        return PortfolioDataset(generated_at="")

    try:
        return PortfolioDataset.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError):
        logger.exception("Failed to load dataset from %s", path)
        return PortfolioDataset(generated_at="")


class PortfolioLoader:
    """Read-only access to a persisted dataset with the ordering override applied.

    Both files are read once, on first access.
    """

    def __init__(self, dataset_path: Path, override_path: Path | None = None) -> None:
        self.dataset_path = dataset_path
        self.override_path = override_path
        self._dataset: PortfolioDataset | None = None
        self._override: OrderingOverride | None = None

    @classmethod
    def from_content_dir(cls, content_dir: Path) -> PortfolioLoader:
        return cls(content_dir / DATASET_FILENAME, content_dir / ORDER_FILENAME)

    @property
    def override(self) -> OrderingOverride:
        if self._override is None:
            self._override = (
                load_ordering_override(self.override_path)
                if self.override_path is not None
                else OrderingOverride()
            )
        return self._override

    @property
    def dataset(self) -> PortfolioDataset:
        if self._dataset is None:
            self._dataset = apply_override(load_dataset(self.dataset_path), self.override)
        return self._dataset

    def get_projects(
        self,
        category: str = ALL_CATEGORIES,
        sort_by: SortOption | str = SortOption.PRIORITY,
    ) -> list[ProjectRecord]:
        """Return projects in a category, sorted by the given strategy."""
        filtered = filter_projects(self.dataset.projects, category)
        return sort_projects(filtered, sort_by, self.override)

    def get_project(self, slug: str) -> ProjectRecord | None:
        return self.dataset.get(slug)

    def categories(self) -> list[str]:
        return categories_in_use(self.dataset.projects)
