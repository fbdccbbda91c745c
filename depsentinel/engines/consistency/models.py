"""Data models for the dependency consistency engine."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from depsentinel.exceptions import WriteFailure


class DependencySection(str, Enum):
    """A dependency section of a manifest, valued by its JSON key."""

    NORMAL = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"

    @property
    def tag(self) -> str:
        """Short usage tag: ``normal``, ``dev`` or ``peer``."""
        return _SECTION_TAGS[self]


_SECTION_TAGS = {
    DependencySection.NORMAL: "normal",
    DependencySection.DEV: "dev",
    DependencySection.PEER: "peer",
}


class DiffKind(str, Enum):
    """Classification of the difference between two version strings."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    WORKSPACE = "workspace"
    UNKNOWN = "unknown"


@dataclass
class Manifest:
    """A parsed package manifest.

    ``raw`` holds the full decoded document so that rewrites keep keys the
    engine does not know about.
    """

    name: str
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    path: Path | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    def section(self, section: DependencySection) -> dict[str, str]:
        if section is DependencySection.NORMAL:
            return self.dependencies
        if section is DependencySection.DEV:
            return self.dev_dependencies
        return self.peer_dependencies

    def iter_declarations(
        self,
        order: tuple[DependencySection, ...] = (
            DependencySection.NORMAL,
            DependencySection.PEER,
            DependencySection.DEV,
        ),
    ) -> Iterator[tuple[DependencySection, str, str]]:
        """Yield ``(section, dependency, version)`` for every declaration."""
        for section in order:
            for dep, version in self.section(section).items():
                yield section, dep, version

    def combined(self) -> dict[str, str]:
        """All three sections merged; later sections win (normal < dev < peer)."""
        return {**self.dependencies, **self.dev_dependencies, **self.peer_dependencies}

    def runtime(self) -> dict[str, str]:
        """dependencies + peerDependencies, the set compared for sync checks."""
        return {**self.dependencies, **self.peer_dependencies}


@dataclass
class VersionEntry:
    """One distinct raw version string seen for a dependency."""

    version: str
    packages: set[str] = field(default_factory=set)
    usages: set[str] = field(default_factory=set)


@dataclass
class DependencyRecord:
    """Every version of one dependency across the analyzed manifests."""

    name: str
    versions: dict[str, VersionEntry] = field(default_factory=dict)
    used_as_normal: bool = False
    used_as_peer: bool = False

    @property
    def is_conflicting(self) -> bool:
        return len(self.versions) > 1


@dataclass(frozen=True)
class VersionComparison:
    version1: str
    version2: str
    kind: DiffKind


@dataclass
class ConflictEntry:
    """A dependency declared with more than one distinct version string."""

    name: str
    versions: list[VersionEntry]
    comparisons: list[VersionComparison]


@dataclass(frozen=True)
class MissingDependency:
    name: str
    version: str


@dataclass
class PackageSyncReport:
    """Missing/extra findings for one non-root package."""

    package: str
    path: Path | None
    missing: list[MissingDependency] = field(default_factory=list)
    extra: list[MissingDependency] = field(default_factory=list)


@dataclass
class MissingReport:
    """Result of a missing/extra analysis run."""

    packages: dict[str, PackageSyncReport] = field(default_factory=dict)
    unique_missing: set[str] = field(default_factory=set)
    unique_extra: set[str] = field(default_factory=set)

    @property
    def in_sync(self) -> bool:
        return not self.packages


@dataclass(frozen=True)
class UpdateEdit:
    """A single planned version change in one manifest section."""

    package: str
    dependency: str
    section: DependencySection
    from_version: str
    to_version: str
    path: Path | None = None  # manifest file the edit targets

    @property
    def target(self) -> tuple[str, Path | None]:
        """Identifies the manifest: names alone may repeat across packages."""
        return self.package, self.path


@dataclass
class ApplyResult:
    """Outcome of applying (or dry-running) an update plan."""

    edits: list[UpdateEdit]
    dry_run: bool
    written: list[Path] = field(default_factory=list)
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def applied(self, edit: UpdateEdit) -> bool:
        """True when *edit* was written to disk."""
        if self.dry_run:
            return False
        return all((f.package, f.path) != edit.target for f in self.failures)
