"""Missing/extra analyzer — compare each package against the root manifest."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from depsentinel.engines.consistency.models import (
    Manifest,
    MissingDependency,
    MissingReport,
    PackageSyncReport,
)
from depsentinel.engines.consistency.workspace import WorkspaceClassifier

log = structlog.get_logger("depsentinel.engine")


def find_missing(
    root: Manifest,
    others: Iterable[Manifest],
    classifier: WorkspaceClassifier,
) -> MissingReport:
    """Find, per package, dependencies missing from the root and root extras.

    The root baseline is its dependencies + peerDependencies; root dev
    tooling need not be mirrored by packages. A package peer dependency
    absent from the root is always reported, whatever the workspace filter
    says.
    """
    root_deps = root.runtime()
    report = MissingReport()

    for manifest in others:
        if manifest is root:
            continue
        package_deps = manifest.runtime()
        missing: list[MissingDependency] = []
        extra: list[MissingDependency] = []

        for dep, version in package_deps.items():
            if dep in root_deps:
                continue
            if dep in manifest.peer_dependencies or classifier.should_include(
                dep, version, manifest
            ):
                missing.append(MissingDependency(dep, version))
                report.unique_missing.add(dep)

        for dep, version in root_deps.items():
            if dep in package_deps:
                continue
            if classifier.should_include(dep, version, root):
                extra.append(MissingDependency(dep, version))
                report.unique_extra.add(dep)

        if missing or extra:
            report.packages[manifest.name] = PackageSyncReport(
                package=manifest.name,
                path=manifest.path,
                missing=missing,
                extra=extra,
            )

    log.debug(
        "missing.done",
        packages_out_of_sync=len(report.packages),
        unique_missing=len(report.unique_missing),
        unique_extra=len(report.unique_extra),
    )
    return report
