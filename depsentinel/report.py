"""Text and JSON rendering of consistency check results."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import click

from depsentinel.engines.consistency.conflicts import recommendation, severity_breakdown
from depsentinel.engines.consistency.models import (
    ApplyResult,
    ConflictEntry,
    DependencyRecord,
    DiffKind,
    MissingReport,
    VersionEntry,
)
from depsentinel.engines.consistency.versions import WORKSPACE_PREFIX, is_workspace_declaration

PackagePaths = Mapping[str, Path | None]

_KIND_COLORS = {
    DiffKind.MAJOR: "red",
    DiffKind.MINOR: "yellow",
    DiffKind.PATCH: "green",
    DiffKind.WORKSPACE: "blue",
    DiffKind.UNKNOWN: "bright_black",
}

_SEVERITY_LABELS = [
    (DiffKind.WORKSPACE, "Workspace dependencies"),
    (DiffKind.MAJOR, "Major differences"),
    (DiffKind.MINOR, "Minor differences"),
    (DiffKind.PATCH, "Patch differences"),
    (DiffKind.UNKNOWN, "Unknown differences"),
]


def _rel(path: Path | None) -> str:
    if path is None:
        return ""
    return os.path.relpath(path, Path.cwd())


def _version_label(version: str) -> str:
    if version.startswith(WORKSPACE_PREFIX):
        return click.style(WORKSPACE_PREFIX, fg="cyan") + version[len(WORKSPACE_PREFIX):]
    return version


def _entry_paths(entry: VersionEntry, paths: PackagePaths) -> list[dict[str, str]]:
    return [{"package": pkg, "path": _rel(paths.get(pkg))} for pkg in sorted(entry.packages)]


# ── text ─────────────────────────────────────────────────────────────────


def render_versions_text(conflicts: list[ConflictEntry], paths: PackagePaths) -> str:
    lines = [click.style("\nVersion Differences Summary:\n", bold=True)]
    if not conflicts:
        lines.append(click.style("✓ No version differences found across packages\n", fg="green"))
        return "\n".join(lines)

    by_version = {
        (entry.name, v.version): v for entry in conflicts for v in entry.versions
    }
    for entry in conflicts:
        lines.append(click.style(f"\n{entry.name}:", fg="yellow"))
        for cmp in entry.comparisons:
            lines.append(click.style(f"\n  Difference ({cmp.kind.value}):", fg="cyan"))
            lines.append(f"    {_version_label(cmp.version1)} vs {_version_label(cmp.version2)}")
            for version in (cmp.version1, cmp.version2):
                label = click.style(_version_label(version), fg="green")
                lines.append(f"\n    Packages using {label} :")
                for item in _entry_paths(by_version[(entry.name, version)], paths):
                    pkg = click.style(item["package"], fg="blue")
                    lines.append(f"      - {pkg} ({click.style(item['path'], fg='bright_black')})")
            lines.append("\n    Recommended action:")
            lines.append(
                click.style(f"    {recommendation(cmp.kind)}", fg=_KIND_COLORS[cmp.kind])
            )

    total = sum(len(entry.comparisons) for entry in conflicts)
    lines.append(click.style("\nSummary Statistics:", bold=True))
    lines.append(f"Dependencies with conflicts: {len(conflicts)}")
    lines.append(f"Total version comparisons: {total}")
    lines.append("\nSeverity breakdown:")
    counts = severity_breakdown(conflicts)
    for kind, label in _SEVERITY_LABELS:
        if counts[kind]:
            lines.append(click.style(f"  {label}: {counts[kind]}", fg=_KIND_COLORS[kind]))
    return "\n".join(lines)


def render_missing_text(report: MissingReport) -> str:
    lines = [click.style("\nChecking for missing dependencies...\n", bold=True)]
    if report.in_sync:
        lines.append(click.style("✓ All dependencies are properly synchronized\n", fg="green"))
        return "\n".join(lines)

    for name, pkg in report.packages.items():
        lines.append(click.style(f"\n{name} ({_rel(pkg.path)}):", fg="yellow"))
        if pkg.missing:
            lines.append(click.style("  Missing from root:", fg="red"))
            lines.extend(f"    - {d.name}@{d.version}" for d in pkg.missing)
        if pkg.extra:
            lines.append(click.style("  Not used by package but in root:", fg="blue"))
            lines.extend(f"    - {d.name}@{d.version}" for d in pkg.extra)

    lines.append(click.style("\nSummary:", bold=True))
    lines.append(f"Packages with dependency mismatches: {len(report.packages)}")
    if report.unique_missing:
        lines.append(
            click.style(
                f"Unique dependencies missing from root: {len(report.unique_missing)}", fg="red"
            )
        )
        lines.append(click.style("  " + ", ".join(sorted(report.unique_missing)), fg="bright_black"))
    if report.unique_extra:
        lines.append(
            click.style(
                f"Unique unused dependencies from root: {len(report.unique_extra)}", fg="blue"
            )
        )
        lines.append(click.style("  " + ", ".join(sorted(report.unique_extra)), fg="bright_black"))
    return "\n".join(lines)


def render_update_text(result: ApplyResult) -> str:
    lines = [click.style("\nUpdating dependencies...\n", bold=True)]
    if not result.edits:
        lines.append(click.style("No updates needed - all versions match the root", fg="green"))
        return "\n".join(lines)

    verb = "[DRY RUN] Would update" if result.dry_run else "Updated"
    for edit in result.edits:
        if not (result.dry_run or result.applied(edit)):
            continue
        lines.append(
            click.style(
                f"{verb} {edit.dependency} in {edit.package} ({edit.section.value})", fg="green"
            )
        )
        lines.append(
            f"  {click.style(edit.from_version, fg='red')} → "
            f"{click.style(edit.to_version, fg='green')}"
        )
    for failure in result.failures:
        lines.append(
            click.style(
                f"Failed to update {failure.package} ({_rel(failure.path)}): {failure.reason}",
                fg="red",
            )
        )
    return "\n".join(lines)


# ── JSON ─────────────────────────────────────────────────────────────────


def analysis_to_json(records: Mapping[str, DependencyRecord], paths: PackagePaths) -> dict[str, Any]:
    """Full analysis document: conflict summary plus the complete index."""
    conflicts = [
        {
            "name": name,
            "versions": [
                {
                    "version": entry.version,
                    "packages": sorted(entry.packages),
                    "paths": _entry_paths(entry, paths),
                    "usages": sorted(entry.usages),
                    "isWorkspace": is_workspace_declaration(entry.version),
                }
                for entry in record.versions.values()
            ],
        }
        for name, record in records.items()
        if record.is_conflicting
    ]
    full = {
        name: {
            "versions": {
                entry.version: {
                    "packages": sorted(entry.packages),
                    "usages": sorted(entry.usages),
                    "isWorkspace": is_workspace_declaration(entry.version),
                }
                for entry in record.versions.values()
            },
            "usedAsNormal": record.used_as_normal,
            "usedAsPeer": record.used_as_peer,
        }
        for name, record in records.items()
    }
    return {"summary": {"conflicts": conflicts}, "fullAnalysis": full}


def conflicts_to_json(conflicts: list[ConflictEntry], paths: PackagePaths) -> dict[str, Any]:
    counts = severity_breakdown(conflicts)
    return {
        "conflicts": [
            {
                "name": entry.name,
                "versions": [
                    {
                        "version": v.version,
                        "packages": sorted(v.packages),
                        "paths": _entry_paths(v, paths),
                        "usages": sorted(v.usages),
                    }
                    for v in entry.versions
                ],
                "comparisons": [
                    {"version1": c.version1, "version2": c.version2, "semverDiff": c.kind.value}
                    for c in entry.comparisons
                ],
            }
            for entry in conflicts
        ],
        "severity": {kind.value: counts[kind] for kind in DiffKind if counts[kind]},
    }


def missing_to_json(report: MissingReport) -> dict[str, Any]:
    return {
        "packages": {
            name: {
                "path": _rel(pkg.path),
                "missing": [{"name": d.name, "version": d.version} for d in pkg.missing],
                "extraDeps": [{"name": d.name, "version": d.version} for d in pkg.extra],
            }
            for name, pkg in report.packages.items()
        },
        "uniqueMissing": sorted(report.unique_missing),
        "uniqueExtra": sorted(report.unique_extra),
    }


def update_to_json(result: ApplyResult) -> dict[str, Any]:
    return {
        "dryRun": result.dry_run,
        "updates": [
            {
                "package": e.package,
                "dependency": e.dependency,
                "from": e.from_version,
                "to": e.to_version,
                "type": e.section.value,
                "applied": result.applied(e),
            }
            for e in result.edits
        ],
        "written": [_rel(p) for p in result.written],
        "failures": [
            {"package": f.package, "path": _rel(f.path), "reason": f.reason}
            for f in result.failures
        ],
    }
