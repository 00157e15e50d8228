"""Tests for the read API."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from helpers import make_record

from portfolio_sync.api.dependencies import get_portfolio_loader
from portfolio_sync.api.main import app
from portfolio_sync.models.project import PortfolioDataset
from portfolio_sync.models.sync import OutcomeKind, SyncOutcome, SyncReport
from portfolio_sync.services.dataset_store import PortfolioLoader, write_dataset
from portfolio_sync.services.sync_history import record_sync_run


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    dataset = PortfolioDataset(
        generated_at="2025-02-01T09:30:00+00:00",
        projects=(
            make_record(
                slug="kit",
                category="Templates",
                portfolio_priority=1,
                github_stars=3,
                github_updated_at="2024-01-01T00:00:00Z",
            ),
            make_record(
                slug="bot",
                category="AI Automation",
                portfolio_priority=2,
                github_stars=30,
                github_updated_at="2025-01-01T00:00:00Z",
                body_markdown="## Bot",
            ),
            make_record(slug="agent", category="AI Automation", portfolio_priority=3),
        ),
    )
    write_dataset(dataset, tmp_path / "portfolio.json")
    return tmp_path


@pytest.fixture
def client(content_dir: Path) -> Iterator[TestClient]:
    """Create a test client serving the fixture dataset."""
    app.dependency_overrides[get_portfolio_loader] = lambda: PortfolioLoader.from_content_dir(
        content_dir
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "dataset": "present"}


def test_list_projects_default_priority(client: TestClient) -> None:
    response = client.get("/api/projects")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["category"] == "all"
    assert body["sort"] == "priority"
    assert body["generated_at"] == "2025-02-01T09:30:00+00:00"
    assert [item["slug"] for item in body["items"]] == ["kit", "bot", "agent"]


def test_list_projects_filtered_and_sorted(client: TestClient) -> None:
    response = client.get("/api/projects", params={"category": "AI Automation", "sort": "popular"})

    assert [item["slug"] for item in response.json()["items"]] == ["bot", "agent"]


def test_override_file_changes_order(client: TestClient, content_dir: Path) -> None:
    (content_dir / "portfolio-order.json").write_text(
        json.dumps({"order": ["agent"], "featured": ["agent"]}), encoding="utf-8"
    )

    items = client.get("/api/projects").json()["items"]

    assert [item["slug"] for item in items] == ["agent", "kit", "bot"]
    assert items[0]["portfolio_featured"] is True


def test_malformed_override_is_server_error(client: TestClient, content_dir: Path) -> None:
    (content_dir / "portfolio-order.json").write_text("{oops", encoding="utf-8")

    response = client.get("/api/projects")

    assert response.status_code == 500
    assert "Invalid ordering override" in response.json()["detail"]


def test_invalid_sort_is_rejected(client: TestClient) -> None:
    assert client.get("/api/projects", params={"sort": "alphabetical"}).status_code == 422


def test_get_project(client: TestClient) -> None:
    response = client.get("/api/projects/bot")

    assert response.status_code == 200
    assert response.json()["body_markdown"] == "## Bot"


def test_get_missing_project(client: TestClient) -> None:
    response = client.get("/api/projects/nope")

    assert response.status_code == 404
    assert response.json()["detail"] == "Project 'nope' not found"


def test_categories(client: TestClient) -> None:
    response = client.get("/api/categories")

    assert response.json() == {"categories": ["Templates", "AI Automation"]}


def test_sync_runs(client: TestClient) -> None:
    report = SyncReport(
        dataset=PortfolioDataset(generated_at="2025-02-01T09:30:00+00:00"),
        outcomes=[SyncOutcome("repo", OutcomeKind.SKIPPED_DISABLED, slug="repo")],
    )
    run_id = record_sync_run(report, "github")

    response = client.get("/api/sync-runs", params={"limit": 5})

    assert response.status_code == 200
    [run] = response.json()
    assert run["id"] == run_id
    assert run["skipped_disabled"] == 1
    assert run["outcomes"] == [
        {"project_id": "repo", "kind": "skipped: disabled", "slug": "repo", "message": None}
    ]


def test_sync_runs_limit_is_bounded(client: TestClient) -> None:
    assert client.get("/api/sync-runs", params={"limit": 0}).status_code == 422
