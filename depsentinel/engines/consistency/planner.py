"""Update planner — sync package dependency versions to the root manifest."""

from __future__ import annotations

import json
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from depsentinel.engines.consistency.models import (
    ApplyResult,
    DependencySection,
    Manifest,
    UpdateEdit,
)
from depsentinel.engines.consistency.versions import (
    is_workspace_declaration,
    normalize,
    split_range_prefix,
)
from depsentinel.exceptions import ApplyError, WriteFailure

log = structlog.get_logger("depsentinel.engine")

_PLAN_ORDER = (
    DependencySection.NORMAL,
    DependencySection.DEV,
    DependencySection.PEER,
)


class UpdateStrategy(str, Enum):
    SYNC_TO_ROOT = "sync-to-root"


def plan_updates(
    root: Manifest,
    others: Iterable[Manifest],
    strategy: UpdateStrategy = UpdateStrategy.SYNC_TO_ROOT,
) -> list[UpdateEdit]:
    """Compute the edits that bring every package in line with the root.

    The package keeps its own range operator (``^``, ``~``, none, ...) and
    takes the root's version number. Nothing is written here.
    """
    if strategy is not UpdateStrategy.SYNC_TO_ROOT:
        raise ValueError(f"unsupported update strategy: {strategy!r}")

    root_deps = root.combined()
    edits: list[UpdateEdit] = []

    for manifest in others:
        if manifest is root:
            continue
        for section, dep, version in manifest.iter_declarations(_PLAN_ORDER):
            if is_workspace_declaration(version):
                continue
            root_version = root_deps.get(dep)
            if root_version is None or root_version == version:
                continue

            target = _sync_target(version, root_version)
            if target is None:
                log.debug(
                    "planner.root_unresolvable",
                    package=manifest.name,
                    dependency=dep,
                    root_version=root_version,
                )
                continue
            if target == version:
                continue

            edits.append(
                UpdateEdit(
                    package=manifest.name,
                    dependency=dep,
                    section=section,
                    from_version=version,
                    to_version=target,
                    path=manifest.path,
                )
            )

    log.debug("planner.done", strategy=strategy.value, edits=len(edits))
    return edits


def _sync_target(current: str, root_version: str) -> str | None:
    """*current*'s operator prefix + the root's version number, or None."""
    if is_workspace_declaration(root_version):
        return None
    resolved = normalize(root_version)
    if resolved is None:
        return None
    prefix, _ = split_range_prefix(current)
    return prefix + str(resolved)


def apply_updates(
    edits: Iterable[UpdateEdit],
    manifests: Iterable[Manifest],
    dry_run: bool = False,
) -> ApplyResult:
    """Write planned edits, one read-modify-write per manifest file.

    A failure for one manifest skips that manifest's write entirely and is
    recorded in the result; the other manifests are still written. With
    *dry_run* nothing touches the disk.
    """
    edits = list(edits)
    result = ApplyResult(edits=edits, dry_run=dry_run)
    if dry_run or not edits:
        return result

    by_target = {(m.name, m.path): m for m in manifests}
    grouped: dict[tuple[str, Path | None], list[UpdateEdit]] = {}
    for edit in edits:
        grouped.setdefault(edit.target, []).append(edit)

    for (package, path), package_edits in grouped.items():
        manifest = by_target.get((package, path))
        try:
            if manifest is None or path is None:
                raise ApplyError(f"no manifest file known for package {package!r}")
            document = _apply_to_document(path, package_edits)
            path.write_text(
                json.dumps(document, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except (ApplyError, OSError, ValueError) as exc:
            log.warning("apply.write_failed", package=package, path=str(path), error=str(exc))
            result.failures.append(WriteFailure(package=package, path=path, reason=str(exc)))
            continue

        for edit in package_edits:
            manifest.section(edit.section)[edit.dependency] = edit.to_version
        manifest.raw = document
        result.written.append(path)
        log.info("apply.written", package=package, path=str(path), edits=len(package_edits))

    return result


def _apply_to_document(path: Path, edits: list[UpdateEdit]) -> dict[str, Any]:
    """Re-read *path* and return its document with *edits* applied.

    Raises ApplyError when the file no longer matches the plan.
    """
    document = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ApplyError(f"{path} does not contain a JSON object")

    for edit in edits:
        section = document.get(edit.section.value)
        if not isinstance(section, dict) or section.get(edit.dependency) != edit.from_version:
            raise ApplyError(
                f"{edit.dependency} in {edit.section.value} is no longer "
                f"{edit.from_version!r}; manifest changed since planning"
            )
        section[edit.dependency] = edit.to_version
    return document
