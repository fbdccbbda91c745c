"""Workspace classifier — decide which dependencies are internal to the repo."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from depsentinel.engines.consistency.models import Manifest
from depsentinel.engines.consistency.versions import is_workspace_declaration

__all__ = ["WorkspaceClassifier", "is_workspace_declaration"]


@dataclass(frozen=True)
class WorkspaceClassifier:
    """Membership test against the package names discovered for one run.

    Built once per run and passed explicitly to the analyzers.
    """

    workspace_packages: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_manifests(cls, manifests: Iterable[Manifest]) -> WorkspaceClassifier:
        return cls(frozenset(m.name for m in manifests))

    def is_workspace_package(self, name: str) -> bool:
        return name in self.workspace_packages

    def should_include(self, dep: str, version: str, manifest: Manifest) -> bool:
        """Whether *dep* takes part in missing/extra analysis for *manifest*.

        Excluded: workspace declarations, workspace package names, and names
        that *manifest* declares as a workspace dependency in any section.
        """
        if is_workspace_declaration(version):
            return False
        if self.is_workspace_package(dep):
            return False
        return not any(
            name == dep and is_workspace_declaration(ver)
            for _, name, ver in manifest.iter_declarations()
        )
