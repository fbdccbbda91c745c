"""Dependency consistency engine — cross-package version and sync checks."""

from depsentinel.engines.consistency.aggregator import aggregate
from depsentinel.engines.consistency.checker import DependencyChecker, Workspace
from depsentinel.engines.consistency.conflicts import find_conflicts
from depsentinel.engines.consistency.loader import load_manifests
from depsentinel.engines.consistency.missing import find_missing
from depsentinel.engines.consistency.models import (
    ConflictEntry,
    DependencyRecord,
    DependencySection,
    DiffKind,
    Manifest,
    MissingReport,
    UpdateEdit,
)
from depsentinel.engines.consistency.planner import UpdateStrategy, apply_updates, plan_updates
from depsentinel.engines.consistency.versions import classify, normalize
from depsentinel.engines.consistency.workspace import WorkspaceClassifier

__all__ = [
    "ConflictEntry",
    "DependencyChecker",
    "DependencyRecord",
    "DependencySection",
    "DiffKind",
    "Manifest",
    "MissingReport",
    "UpdateEdit",
    "UpdateStrategy",
    "Workspace",
    "WorkspaceClassifier",
    "aggregate",
    "apply_updates",
    "classify",
    "find_conflicts",
    "find_missing",
    "load_manifests",
    "normalize",
    "plan_updates",
]
