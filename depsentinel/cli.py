"""CLI entry point: dep-check.

Subcommands:
    dep-check analyze              # Full dependency index (default)
    dep-check versions             # Version differences across packages
    dep-check missing              # Dependencies missing between root and packages
    dep-check update [--dry-run]   # Sync package versions to the root
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

import click
import structlog

from depsentinel import __version__
from depsentinel.core.logging import setup_logging
from depsentinel.engines.consistency.checker import DependencyChecker, Workspace
from depsentinel.exceptions import ManifestUnreadableError
from depsentinel.report import (
    analysis_to_json,
    conflicts_to_json,
    missing_to_json,
    render_missing_text,
    render_update_text,
    render_versions_text,
    update_to_json,
)

log = structlog.get_logger("depsentinel.cli")


@dataclass
class _Options:
    root: str
    packages: str
    fmt: str


def _emit_json(document: dict[str, Any]) -> None:
    click.echo(json.dumps(document, indent=2))


def _load(opts: _Options) -> tuple[DependencyChecker, Workspace]:
    """Load the workspace, exiting with status 1 if any manifest is unreadable."""
    checker = DependencyChecker(opts.root, opts.packages)
    try:
        return checker, checker.load()
    except ManifestUnreadableError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        if opts.fmt == "json":
            _emit_json({"error": str(e), "path": str(e.path)})
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("-a", "--root", default="./package.json", show_default=True,
              help="Path to the root package.json")
@click.option("-p", "--packages", default="./packages", show_default=True,
              help="Comma-separated package directories or package.json files")
@click.option("-f", "--format", "fmt", type=click.Choice(["text", "json"]), default="text",
              show_default=True, help="Output format")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(__version__, "-V", "--version")
@click.pass_context
def main(ctx: click.Context, root: str, packages: str, fmt: str, verbose: bool) -> None:
    """DepSentinel: check dependency consistency across workspace packages."""
    setup_logging("DEBUG" if verbose else None)
    ctx.obj = _Options(root=root, packages=packages, fmt=fmt)
    if ctx.invoked_subcommand is None:
        ctx.invoke(analyze)


@main.command("analyze")
@click.pass_obj
def analyze(opts: _Options) -> None:
    """Full analysis of every dependency declaration."""
    checker, ws = _load(opts)
    records = checker.analyze(ws)
    if opts.fmt == "json":
        _emit_json(analysis_to_json(records, ws.package_paths()))
    else:
        click.echo(render_versions_text(checker.check_versions(ws), ws.package_paths()))


@main.command("versions")
@click.pass_obj
def versions(opts: _Options) -> None:
    """Show dependencies declared with different versions."""
    checker, ws = _load(opts)
    conflicts = checker.check_versions(ws)
    if opts.fmt == "json":
        _emit_json(conflicts_to_json(conflicts, ws.package_paths()))
    else:
        click.echo(render_versions_text(conflicts, ws.package_paths()))


@main.command("missing")
@click.pass_obj
def missing(opts: _Options) -> None:
    """Show dependencies missing from the root, and root extras."""
    checker, ws = _load(opts)
    report = checker.check_missing(ws)
    if opts.fmt == "json":
        _emit_json(missing_to_json(report))
    else:
        click.echo(render_missing_text(report))


@main.command("update")
@click.option("-d", "--dry-run", is_flag=True, help="Show what would be updated without writing")
@click.pass_obj
def update(opts: _Options, dry_run: bool) -> None:
    """Sync package dependency versions to the root manifest."""
    checker, ws = _load(opts)
    result = checker.update(dry_run=dry_run, ws=ws)
    if opts.fmt == "json":
        _emit_json(update_to_json(result))
    else:
        click.echo(render_update_text(result))
    if not result.ok:
        log.error("cli.update_incomplete", failures=len(result.failures))
        sys.exit(1)


if __name__ == "__main__":
    main()
