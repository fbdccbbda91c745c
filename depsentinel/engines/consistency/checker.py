"""DependencyChecker — load a workspace and run one consistency check."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from depsentinel.engines.consistency.aggregator import aggregate
from depsentinel.engines.consistency.conflicts import find_conflicts
from depsentinel.engines.consistency.loader import load_manifests
from depsentinel.engines.consistency.missing import find_missing
from depsentinel.engines.consistency.models import (
    ApplyResult,
    ConflictEntry,
    DependencyRecord,
    Manifest,
    MissingReport,
)
from depsentinel.engines.consistency.planner import (
    UpdateStrategy,
    apply_updates,
    plan_updates,
)
from depsentinel.engines.consistency.workspace import WorkspaceClassifier

log = structlog.get_logger("depsentinel.engine")


@dataclass
class Workspace:
    """Manifests loaded for one run, plus the classifier built from them."""

    root: Manifest
    packages: list[Manifest]
    classifier: WorkspaceClassifier

    def package_paths(self) -> dict[str, Path | None]:
        """Manifest path per package name (root included)."""
        return {m.name: m.path for m in [self.root, *self.packages]}


class DependencyChecker:
    """Run consistency checks over a root manifest and its sibling packages.

    Each check loads the manifests afresh unless handed a :class:`Workspace`
    from :meth:`load`; nothing is kept between runs.
    """

    def __init__(self, root_path: str | Path, packages: str | Path | Iterable[str | Path]) -> None:
        self.root_path = Path(root_path)
        self.packages = packages if isinstance(packages, (str, Path)) else list(packages)

    def load(self) -> Workspace:
        root, others = load_manifests(self.root_path, self.packages)
        return Workspace(
            root=root,
            packages=others,
            classifier=WorkspaceClassifier.from_manifests(others),
        )

    def analyze(self, ws: Workspace | None = None) -> dict[str, DependencyRecord]:
        """Full index of every declaration, workspace packages included."""
        ws = ws or self.load()
        return aggregate(ws.packages, ws.root)

    def check_versions(self, ws: Workspace | None = None) -> list[ConflictEntry]:
        ws = ws or self.load()
        records = aggregate(ws.packages, ws.root, ws.classifier)
        conflicts = find_conflicts(records)
        log.info("checker.versions", conflicts=len(conflicts))
        return conflicts

    def check_missing(self, ws: Workspace | None = None) -> MissingReport:
        ws = ws or self.load()
        return find_missing(ws.root, ws.packages, ws.classifier)

    def update(
        self,
        dry_run: bool = False,
        strategy: UpdateStrategy = UpdateStrategy.SYNC_TO_ROOT,
        ws: Workspace | None = None,
    ) -> ApplyResult:
        """Plan sync-to-root edits and write them unless *dry_run*."""
        ws = ws or self.load()
        edits = plan_updates(ws.root, ws.packages, strategy)
        result = apply_updates(edits, ws.packages, dry_run=dry_run)
        log.info(
            "checker.update",
            edits=len(edits),
            written=len(result.written),
            failures=len(result.failures),
            dry_run=dry_run,
        )
        return result
