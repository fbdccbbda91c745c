"""Conflict analyzer — dependencies declared with more than one version."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from itertools import combinations

from depsentinel.engines.consistency.models import (
    ConflictEntry,
    DependencyRecord,
    DiffKind,
    VersionComparison,
)
from depsentinel.engines.consistency.versions import classify

_RECOMMENDATIONS: dict[DiffKind, str] = {
    DiffKind.MAJOR: "Major version difference - Manual review recommended",
    DiffKind.MINOR: "Minor version difference - Consider updating to latest",
    DiffKind.PATCH: "Patch version difference - Safe to update to latest",
    DiffKind.WORKSPACE: "Workspace dependency - No action needed",
    DiffKind.UNKNOWN: "Version difference analysis not available",
}


def find_conflicts(records: Mapping[str, DependencyRecord]) -> list[ConflictEntry]:
    """Return one entry per dependency with more than one version string.

    Comparisons cover every unordered pair of versions, in the order the
    versions were first seen.
    """
    conflicts: list[ConflictEntry] = []
    for name, record in records.items():
        if not record.is_conflicting:
            continue
        versions = list(record.versions.values())
        comparisons = [
            VersionComparison(a.version, b.version, classify(a.version, b.version))
            for a, b in combinations(versions, 2)
        ]
        conflicts.append(ConflictEntry(name=name, versions=versions, comparisons=comparisons))
    return conflicts


def severity_breakdown(conflicts: Iterable[ConflictEntry]) -> Counter[DiffKind]:
    """Count comparisons per classification."""
    return Counter(c.kind for entry in conflicts for c in entry.comparisons)


def recommendation(kind: DiffKind) -> str:
    return _RECOMMENDATIONS[kind]
