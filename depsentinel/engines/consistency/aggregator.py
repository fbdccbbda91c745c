"""Dependency aggregator — fold manifests into a cross-package index."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from depsentinel.engines.consistency.models import (
    DependencyRecord,
    DependencySection,
    Manifest,
    VersionEntry,
)
from depsentinel.engines.consistency.versions import is_workspace_declaration
from depsentinel.engines.consistency.workspace import WorkspaceClassifier

log = structlog.get_logger("depsentinel.engine")

ROOT_MARKER = " (root)"
WORKSPACE_USAGE = "workspace"


def aggregate(
    manifests: Iterable[Manifest],
    root: Manifest,
    classifier: WorkspaceClassifier | None = None,
) -> dict[str, DependencyRecord]:
    """Index every declaration of every manifest by dependency name.

    *root* is folded once whether or not it also appears in *manifests*.
    Distinct raw version strings are kept apart even when they normalize to
    the same version. With a *classifier*, dependencies naming a workspace
    package are left out of the index.
    """
    records: dict[str, DependencyRecord] = {}
    ordered = [root] + [m for m in manifests if m is not root]

    for manifest in ordered:
        is_root = manifest is root
        for section, dep, version in manifest.iter_declarations():
            if classifier is not None and classifier.is_workspace_package(dep):
                continue
            _record(records, manifest.name, section, dep, version, is_root)

    log.debug(
        "aggregator.done",
        manifests=len(ordered),
        dependencies=len(records),
    )
    return records


def _record(
    records: dict[str, DependencyRecord],
    package: str,
    section: DependencySection,
    dep: str,
    version: str,
    is_root: bool,
) -> None:
    record = records.get(dep)
    if record is None:
        record = records[dep] = DependencyRecord(name=dep)

    entry = record.versions.get(version)
    if entry is None:
        entry = record.versions[version] = VersionEntry(version=version)

    entry.packages.add(package)
    entry.usages.add(section.tag + (ROOT_MARKER if is_root else ""))
    if is_workspace_declaration(version):
        entry.usages.add(WORKSPACE_USAGE)

    if section is DependencySection.NORMAL:
        record.used_as_normal = True
    elif section is DependencySection.PEER:
        record.used_as_peer = True
