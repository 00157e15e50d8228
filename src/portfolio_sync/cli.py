"""Command line entry point for portfolio-sync."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from portfolio_sync.config import Settings, load_settings
from portfolio_sync.models.errors import ConfigurationError, TransportError
from portfolio_sync.models.sync import OutcomeKind, SyncOutcome, SyncReport
from portfolio_sync.services.batch_update import apply_batch_updates, load_updates
from portfolio_sync.services.dataset_store import write_dataset
from portfolio_sync.services.document_sources import (
    DocumentSource,
    LayeredSource,
    LocalDirectorySource,
)
from portfolio_sync.services.draft_generator import render_draft, repos_without_document
from portfolio_sync.services.github_client import GitHubClient, GitHubSource
from portfolio_sync.services.image_discovery import discover_project_images
from portfolio_sync.services.sync_history import record_sync_run
from portfolio_sync.workflows.sync_pipeline import aggregate

OUTCOME_ICONS = {
    OutcomeKind.ACCEPTED: "✅",
    OutcomeKind.SKIPPED_DISABLED: "⏸️ ",
    OutcomeKind.SKIPPED_INVALID: "❌",
    OutcomeKind.SKIPPED_ERROR: "⚠️ ",
    OutcomeKind.SKIPPED_NO_DOCUMENT: "⏭️ ",
    OutcomeKind.SKIPPED_DUPLICATE: "🔁",
}


def _configure_logging() -> None:
    level = getattr(logging, os.environ.get("PORTFOLIO_LOG_LEVEL", "WARNING").upper(), None)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _github_client(settings: Settings) -> GitHubClient:
    return GitHubClient(
        settings.require_token(), settings.github_user, timeout=settings.fetch_timeout
    )


def _print_outcome(outcome: SyncOutcome) -> None:
    label = outcome.slug or outcome.project_id
    line = f"{OUTCOME_ICONS[outcome.kind]} {label}: {outcome.kind.value}"
    if outcome.message:
        line += f" ({outcome.message})"
    print(line)
    for violation in outcome.violations:
        print(f"     - {violation}")


def _run_sync(
    source: DocumentSource,
    settings: Settings,
    *,
    limit: int | None,
    dry_run: bool,
    output: Path | None,
) -> int:
    project_ids = source.list_projects()
    if limit is not None:
        project_ids = project_ids[:limit]
    print(f"🔎 Processing {len(project_ids)} project(s) from {source.name}")
    print("-" * 60)

    report: SyncReport = aggregate(
        project_ids,
        source,
        max_workers=settings.max_workers,
        fetch_timeout=settings.fetch_timeout,
    )
    for outcome in report.outcomes:
        _print_outcome(outcome)

    print("-" * 60)
    if dry_run:
        print("🧪 Dry run: dataset not written")
    else:
        path = write_dataset(report.dataset, output or settings.dataset_path)
        record_sync_run(report, source.name)
        print(f"💾 Wrote {len(report.dataset.projects)} project(s) to {path}")
    print(f"📊 {report.format_summary()}")
    return 0


def cmd_sync(args: argparse.Namespace, settings: Settings) -> int:
    """Aggregate PORTFOLIO.md files from every repository of the configured owner."""
    source = GitHubSource(_github_client(settings))
    return _run_sync(source, settings, limit=args.limit, dry_run=args.dry_run, output=args.output)


def local_source(settings: Settings) -> LayeredSource:
    """Published files first, drafts on top so they take precedence."""
    layered = LayeredSource()
    layered.register(
        LocalDirectorySource(settings.files_dir, owner=settings.github_user, name="portfolio-files")
    )
    layered.register(
        LocalDirectorySource(
            settings.drafts_dir, owner=settings.github_user, name="portfolio-drafts"
        )
    )
    return layered


def cmd_sync_local(args: argparse.Namespace, settings: Settings) -> int:
    """Aggregate local PORTFOLIO-*.md files without touching the network."""
    source = local_source(settings)
    print(f"📁 Sources (lowest precedence first): {' < '.join(source.describe())}")
    return _run_sync(source, settings, limit=args.limit, dry_run=args.dry_run, output=args.output)


def cmd_batch_update(args: argparse.Namespace, settings: Settings) -> int:
    updates = load_updates(args.file)
    client = _github_client(settings)
    print(f"✏️  Updating {len(updates)} repositor{'y' if len(updates) == 1 else 'ies'}")

    report = apply_batch_updates(
        client, updates, dry_run=args.dry_run, delay=settings.write_delay
    )
    for repo in report.updated:
        print(f"✅ {repo}{' (dry run)' if args.dry_run else ''}")
    for repo in report.skipped:
        print(f"⏭️  {repo}: no change")
    for repo, error in report.failed.items():
        print(f"❌ {repo}: {error}")
    print(f"📊 {report.format_summary()}")
    return 1 if report.failed else 0


def cmd_images(args: argparse.Namespace, settings: Settings) -> int:
    source = GitHubSource(_github_client(settings))
    project_ids = [args.project] if args.project else source.list_projects()

    for project_id in project_ids:
        found = discover_project_images(source, project_id)
        if not found.images:
            print(f"⏭️  {project_id}: no images")
            continue
        print(f"🖼️  {project_id}: {len(found.images)} image(s)")
        for image in found.images:
            marker = "*" if image is found.thumbnail else " "
            print(f"   {marker} {image.path}")
    return 0


def cmd_drafts(args: argparse.Namespace, settings: Settings) -> int:
    client = _github_client(settings)
    repos = [repo for repo in client.list_repositories() if not repo.get("fork")]
    missing = repos_without_document(client, repos)
    if args.limit is not None:
        missing = missing[: args.limit]

    print(f"📝 {len(missing)} repositor{'y' if len(missing) == 1 else 'ies'} without PORTFOLIO.md")
    for repo in missing:
        if not args.write:
            print(f"   - {repo['name']}")
            continue

        path = settings.drafts_dir / f"PORTFOLIO-{repo['name']}.md"
        if path.exists():
            print(f"⏭️  {path} already exists")
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_draft(repo), encoding="utf-8")
        print(f"✅ {path}")
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    from portfolio_sync.api.main import main as serve

    serve(host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-sync",
        description="Aggregate PORTFOLIO.md files into a validated portfolio dataset.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("sync", cmd_sync, "Aggregate documents from GitHub"),
        ("sync-local", cmd_sync_local, "Aggregate documents from local directories"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--limit", type=int, help="Process at most this many projects")
        sub.add_argument("--dry-run", action="store_true", help="Do not write the dataset")
        sub.add_argument("--output", type=Path, help="Dataset path (default: content dir)")
        sub.set_defaults(handler=handler)

    batch = subparsers.add_parser("batch-update", help="Write frontmatter changes to GitHub")
    batch.add_argument("--file", type=Path, required=True, help="JSON list of updates")
    batch.add_argument("--dry-run", action="store_true", help="Report without writing")
    batch.set_defaults(handler=cmd_batch_update)

    images = subparsers.add_parser("images", help="List screenshot candidates per repository")
    images.add_argument("--project", help="Only inspect this repository")
    images.set_defaults(handler=cmd_images)

    drafts = subparsers.add_parser("drafts", help="Draft PORTFOLIO.md for repositories lacking one")
    drafts.add_argument("--write", action="store_true", help="Write drafts to the drafts dir")
    drafts.add_argument("--limit", type=int, help="Handle at most this many repositories")
    drafts.set_defaults(handler=cmd_drafts)

    serve = subparsers.add_parser("serve", help="Run the read API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the CLI application."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        _configure_logging()
        return args.handler(args, settings)
    except ConfigurationError as exc:
        print(f"❌ Configuration error: {exc}")
        return 1
    except TransportError as exc:
        print(f"❌ {exc}")
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user. Exiting.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
