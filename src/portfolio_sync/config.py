"""Runtime configuration read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from portfolio_sync.models.errors import ConfigurationError
from portfolio_sync.services.dataset_store import DATASET_FILENAME, ORDER_FILENAME

DEFAULT_GITHUB_USER = "RCushmaniii"


@dataclass(frozen=True, slots=True)
class Settings:
    """Settings shared by the CLI and the API.

    Attributes:
        github_token: Token for the GitHub API; None when not configured.
        github_user: Owner of the repositories holding PORTFOLIO.md files.
        content_dir: Directory holding portfolio.json and portfolio-order.json.
        drafts_dir: Local drafts, taking precedence over ``files_dir``.
        files_dir: Local copies of published documents.
        max_workers: Upper bound on concurrent document fetches.
        fetch_timeout: Per-request HTTP timeout and the limit on each document
            fetch, in seconds.
        write_delay: Pause between write-back requests, in seconds.
    """

    github_token: str | None
    github_user: str = DEFAULT_GITHUB_USER
    content_dir: Path = Path("content")
    drafts_dir: Path = Path("portfolio-drafts")
    files_dir: Path = Path("portfolio-files")
    max_workers: int = 4
    fetch_timeout: float = 10.0
    write_delay: float = 0.5

    @property
    def dataset_path(self) -> Path:
        return self.content_dir / DATASET_FILENAME

    @property
    def override_path(self) -> Path:
        return self.content_dir / ORDER_FILENAME

    def require_token(self) -> str:
        """Return the GitHub token or fail before any remote work starts."""
        if not self.github_token:
            raise ConfigurationError("GITHUB_TOKEN environment variable is required")
        return self.github_token


def _number(name: str, default: float, cast: type[int] | type[float]) -> int | float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Build Settings from environment variables.

    Raises:
        ConfigurationError: If a numeric setting is malformed.
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        github_token=os.environ.get("GITHUB_TOKEN") or None,
        github_user=os.environ.get("GITHUB_USER", DEFAULT_GITHUB_USER),
        content_dir=Path(os.environ.get("PORTFOLIO_CONTENT_DIR", "content")),
        drafts_dir=Path(os.environ.get("PORTFOLIO_DRAFTS_DIR", "portfolio-drafts")),
        files_dir=Path(os.environ.get("PORTFOLIO_FILES_DIR", "portfolio-files")),
        max_workers=int(_number("PORTFOLIO_MAX_WORKERS", 4, int)),
        fetch_timeout=float(_number("PORTFOLIO_FETCH_TIMEOUT", 10.0, float)),
        write_delay=float(_number("PORTFOLIO_WRITE_DELAY", 0.5, float)),
    )
