"""Shared fixtures for depsentinel tests.

``workspace`` writes a small repository to ``tmp_path``:

    package.json              app   react ^17.0.2, axios ^1.2.0, dev eslint
    packages/pkg1/package.json      react ^18.0.0, lodash, pkg2 workspace:*,
                                    peer react-dom
    packages/pkg2/package.json      axios ~1.0.0, dev typescript
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depsentinel.engines.consistency.models import Manifest

ROOT_MANIFEST = {
    "name": "app",
    "version": "1.0.0",
    "private": True,
    "dependencies": {"react": "^17.0.2", "axios": "^1.2.0"},
    "devDependencies": {"eslint": "^8.57.1"},
}

PKG1_MANIFEST = {
    "name": "pkg1",
    "version": "0.1.0",
    "dependencies": {
        "react": "^18.0.0",
        "lodash": "^4.17.21",
        "pkg2": "workspace:*",
    },
    "peerDependencies": {"react-dom": "^18.0.0"},
}

PKG2_MANIFEST = {
    "name": "pkg2",
    "version": "0.2.0",
    "dependencies": {"axios": "~1.0.0"},
    "devDependencies": {"typescript": "^5.0.0"},
}


def _write_manifest(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


def _manifest(name: str, deps=None, dev=None, peer=None, path: Path | None = None) -> Manifest:
    return Manifest(
        name=name,
        dependencies=dict(deps or {}),
        dev_dependencies=dict(dev or {}),
        peer_dependencies=dict(peer or {}),
        path=path,
    )


@pytest.fixture
def make_manifest():
    """Build an in-memory Manifest: ``make_manifest("P", deps={...}, peer={...})``."""
    return _manifest


@pytest.fixture
def workspace(tmp_path) -> Path:
    """A root manifest plus two packages under ``packages/``."""
    _write_manifest(tmp_path / "package.json", ROOT_MANIFEST)
    _write_manifest(tmp_path / "packages" / "pkg1" / "package.json", PKG1_MANIFEST)
    _write_manifest(tmp_path / "packages" / "pkg2" / "package.json", PKG2_MANIFEST)
    return tmp_path
