"""GitHub REST client and the remote PORTFOLIO.md source built on it."""

from __future__ import annotations

import base64
import logging
import threading
from dataclasses import dataclass
from typing import Any

import requests

from portfolio_sync.constants.portfolio_constants import PORTFOLIO_FILENAME
from portfolio_sync.models.errors import TransportError
from portfolio_sync.services.document_sources import (
    AssetEntry,
    DocumentSource,
    RepositoryMetadata,
    SourceDocument,
)

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
ACCEPT_JSON = "application/vnd.github.v3+json"
ACCEPT_RAW = "application/vnd.github.v3.raw"
USER_AGENT = "portfolio-sync"
PAGE_SIZE = 100
MAX_PAGES = 10


@dataclass(frozen=True, slots=True)
class RemoteFile:
    """File content fetched through the contents API, with its blob SHA."""

    content: str
    sha: str


def _describe_status(status_code: int) -> str:
    if status_code == 401:
        return "Invalid GitHub token"
    if status_code == 403:
        return "Rate limit exceeded"
    return f"GitHub API error: {status_code}"


class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints the sync needs.

    Every request carries the configured timeout; network failures and
    unexpected status codes surface as TransportError.
    """

    def __init__(
        self,
        token: str,
        owner: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        base_url: str = GITHUB_API,
    ) -> None:
        self.owner = owner
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
            }
        )

    def _contents_url(self, repo: str, path: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{repo}/contents/{path}".rstrip("/")

    def _request(
        self,
        method: str,
        url: str,
        *,
        accept: str = ACCEPT_JSON,
        project_id: str | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        try:
            return self.session.request(
                method, url, headers={"Accept": accept}, timeout=self.timeout, **kwargs
            )
        except requests.Timeout as exc:
            raise TransportError(
                f"Timed out after {self.timeout}s: {url}", project_id=project_id
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Request failed: {exc}", project_id=project_id) from exc

    @staticmethod
    def _raise_for_status(response: requests.Response, project_id: str | None = None) -> None:
        if response.status_code // 100 != 2:
            raise TransportError(
                _describe_status(response.status_code),
                project_id=project_id,
                status_code=response.status_code,
            )

    @staticmethod
    def _json(response: requests.Response, project_id: str | None = None) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed JSON from GitHub: {exc}", project_id=project_id
            ) from exc

    def list_repositories(self, max_pages: int = MAX_PAGES) -> list[dict[str, Any]]:
        """Return the authenticated user's own repositories, most recently updated first."""
        repos: list[dict[str, Any]] = []
        for page in range(1, max_pages + 1):
            response = self._request(
                "GET",
                f"{self.base_url}/user/repos",
                params={
                    "per_page": PAGE_SIZE,
                    "page": page,
                    "sort": "updated",
                    "affiliation": "owner",
                },
            )
            self._raise_for_status(response)
            data = self._json(response)
            if not data:
                break
            if not isinstance(data, list):
                raise TransportError("Unexpected repository listing from GitHub")
            repos.extend(data)
        return repos

    def get_document_text(self, repo: str, path: str = PORTFOLIO_FILENAME) -> str | None:
        """Return the raw text of a file, or None if it does not exist."""
        response = self._request(
            "GET", self._contents_url(repo, path), accept=ACCEPT_RAW, project_id=repo
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, repo)
        return response.text

    def get_file(self, repo: str, path: str = PORTFOLIO_FILENAME) -> RemoteFile | None:
        """Return a file's decoded content and SHA, or None if it does not exist."""
        response = self._request("GET", self._contents_url(repo, path), project_id=repo)
        if response.status_code == 404:
            return None
        self._raise_for_status(response, repo)
        payload = self._json(response, repo)
        try:
            content = base64.b64decode(payload["content"]).decode("utf-8")
            return RemoteFile(content=content, sha=payload["sha"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(
                f"Unreadable contents payload for {path}: {exc}", project_id=repo
            ) from exc

    def put_file(
        self,
        repo: str,
        content: str,
        *,
        message: str,
        sha: str | None = None,
        path: str = PORTFOLIO_FILENAME,
    ) -> None:
        """Create or update a file through the contents API."""
        body: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if sha is not None:
            body["sha"] = sha

        response = self._request("PUT", self._contents_url(repo, path), project_id=repo, json=body)
        self._raise_for_status(response, repo)

    def list_contents(self, repo: str, folder: str = "") -> list[dict[str, Any]]:
        """Return the entries of a folder, or an empty list if it does not exist."""
        response = self._request("GET", self._contents_url(repo, folder), project_id=repo)
        if response.status_code == 404:
            return []
        self._raise_for_status(response, repo)
        data = self._json(response, repo)
        return data if isinstance(data, list) else []


def metadata_from_repo(repo: dict[str, Any]) -> RepositoryMetadata:
    """Build provenance metadata from a GitHub repository payload."""
    return RepositoryMetadata(
        repo_name=repo["name"],
        repo_url=repo.get("html_url") or "",
        stars=int(repo.get("stargazers_count") or 0),
        forks=int(repo.get("forks_count") or 0),
        language=repo.get("language"),
        updated_at=repo.get("updated_at") or "",
        description=repo.get("description") or "",
        topics=tuple(repo.get("topics") or ()),
    )


class GitHubSource(DocumentSource):
    """One PORTFOLIO.md per repository owned by the authenticated user."""

    name = "github"

    def __init__(self, client: GitHubClient) -> None:
        self.client = client
        self._repos: dict[str, dict[str, Any]] | None = None
        self._repos_lock = threading.Lock()

    def repositories(self) -> dict[str, dict[str, Any]]:
        """Return repository payloads keyed by name, listing them once on first use.

        Safe to call from fetch worker threads; only one listing is made.
        """
        with self._repos_lock:
            if self._repos is None:
                repos = self.client.list_repositories()
                self._repos = {repo["name"]: repo for repo in repos}
                private_count = sum(1 for repo in repos if repo.get("private"))
                logger.info("Found %d repositories (%d private)", len(repos), private_count)
            return self._repos

    def list_projects(self) -> list[str]:
        return list(self.repositories())

    def fetch(self, project_id: str) -> SourceDocument | None:
        repo = self.repositories().get(project_id)
        if repo is None:
            return None

        text = self.client.get_document_text(project_id)
        if text is None:
            return None
        return SourceDocument(project_id=project_id, text=text, metadata=metadata_from_repo(repo))

    def list_assets(self, project_id: str, folder: str = "") -> list[AssetEntry]:
        return [
            AssetEntry(
                name=item["name"],
                path=item["path"],
                is_file=item.get("type") == "file",
                download_url=item.get("download_url"),
            )
            for item in self.client.list_contents(project_id, folder)
        ]
