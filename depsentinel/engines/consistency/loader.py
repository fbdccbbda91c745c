"""Manifest discovery and parsing for workspace repositories."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from depsentinel.engines.consistency.models import Manifest
from depsentinel.exceptions import ManifestUnreadableError

log = structlog.get_logger("depsentinel.engine")

MANIFEST_NAME = "package.json"


class PackageManifestSchema(BaseModel):
    """The subset of ``package.json`` the engine relies on."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, str] = Field(default_factory=dict, alias="peerDependencies")

    @field_validator("dependencies", "dev_dependencies", "peer_dependencies", mode="before")
    @classmethod
    def _null_section(cls, v: object) -> object:
        return {} if v is None else v


def parse_manifest(path: Path, content: str) -> Manifest:
    """Parse ``package.json`` text into a :class:`Manifest`.

    Raises ManifestUnreadableError for invalid JSON or a missing name.
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestUnreadableError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestUnreadableError(path, "top-level value is not an object")

    try:
        schema = PackageManifestSchema.model_validate(document)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ManifestUnreadableError(path, errors) from exc

    return Manifest(
        name=schema.name,
        dependencies=dict(schema.dependencies),
        dev_dependencies=dict(schema.dev_dependencies),
        peer_dependencies=dict(schema.peer_dependencies),
        path=path,
        raw=document,
    )


def read_manifest(path: Path) -> Manifest:
    """Read and parse the manifest at *path*."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestUnreadableError(path, str(exc)) from exc
    manifest = parse_manifest(path, content)
    log.debug("loader.manifest_loaded", package=manifest.name, path=str(path))
    return manifest


def split_package_paths(packages: str | Path | Iterable[str | Path]) -> list[Path]:
    """Accept a comma-separated string, a single path or an iterable of paths."""
    if isinstance(packages, Path):
        return [packages]
    if isinstance(packages, str):
        items: Iterable[str | Path] = [p.strip() for p in packages.split(",") if p.strip()]
    else:
        items = packages
    return [Path(p) for p in items]


def discover_manifests(packages: str | Path | Iterable[str | Path]) -> list[Path]:
    """Find the package manifests under the given packages paths.

    A directory contributes ``<dir>/<child>/package.json`` for each child
    directory that has one; a path ending in ``package.json`` contributes
    itself. Anything else is an error.
    """
    found: list[Path] = []
    for input_path in split_package_paths(packages):
        if input_path.is_dir():
            for child in sorted(input_path.iterdir()):
                candidate = child / MANIFEST_NAME
                if child.is_dir() and candidate.is_file():
                    found.append(candidate)
        elif input_path.name == MANIFEST_NAME and input_path.is_file():
            found.append(input_path)
        elif not input_path.exists():
            raise ManifestUnreadableError(input_path, "path not found")
        else:
            raise ManifestUnreadableError(
                input_path, f"must be a directory or a {MANIFEST_NAME} file"
            )
    return found


def load_manifests(
    root_path: str | Path,
    packages: str | Path | Iterable[str | Path],
) -> tuple[Manifest, list[Manifest]]:
    """Load the root manifest and every package manifest.

    Any unreadable manifest fails the whole run. Each file is loaded once and
    the root is never returned among the packages.
    """
    root_file = Path(root_path)
    root = read_manifest(root_file)

    seen = {root_file.resolve()}
    others: list[Manifest] = []
    for path in discover_manifests(packages):
        key = path.resolve()
        if key in seen:
            continue
        seen.add(key)
        others.append(read_manifest(path))

    log.info("loader.done", root=root.name, packages=len(others))
    return root, others
