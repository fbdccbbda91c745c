"""Version normalization and difference classification.

``normalize`` is the single answer to "can these two version strings be
compared": anything it cannot turn into a :class:`semver.Version` is
classified as ``unknown`` rather than raising.
"""

from __future__ import annotations

import re

import semver

from depsentinel.engines.consistency.models import DiffKind

WORKSPACE_PREFIX = "workspace:"
WILDCARD = "*"
LATEST = "latest"

# Leading range operators (^, ~, >=, >, <=, <, =) and the whitespace after them
_RANGE_PREFIX_RE = re.compile(r"^[~^<>=]+\s*")


def is_workspace_declaration(version: str | None) -> bool:
    """True when *version* resolves inside the workspace (``workspace:…`` or ``*``)."""
    return bool(version) and (version.startswith(WORKSPACE_PREFIX) or version == WILDCARD)


def split_range_prefix(raw: str) -> tuple[str, str]:
    """Split *raw* into its range-operator prefix and the remainder.

    >>> split_range_prefix(">= 1.2.0")
    ('>= ', '1.2.0')
    """
    m = _RANGE_PREFIX_RE.match(raw)
    if not m:
        return "", raw
    return m.group(0), raw[m.end():]


def _parse(text: str) -> semver.Version | None:
    # npm tolerates a single leading "v" on an exact version
    text = text.strip()
    if text.startswith("v"):
        text = text[1:]
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError):
        return None


def normalize(raw: str) -> semver.Version | None:
    """Turn a raw version string into a comparable version, or None."""
    if raw.startswith(WORKSPACE_PREFIX):
        remainder = raw[len(WORKSPACE_PREFIX):]
        if remainder == WILDCARD:
            return None
        return _parse(remainder)

    if raw in (WILDCARD, LATEST):
        return None

    _, remainder = split_range_prefix(raw)
    return _parse(remainder)


def classify(version1: str, version2: str) -> DiffKind:
    """Classify the difference between two raw version strings.

    Symmetric: ``classify(a, b) == classify(b, a)``.
    """
    if is_workspace_declaration(version1) or is_workspace_declaration(version2):
        return DiffKind.WORKSPACE

    v1 = normalize(version1)
    v2 = normalize(version2)
    if v1 is None or v2 is None:
        return DiffKind.UNKNOWN

    if v1.major != v2.major:
        return DiffKind.MAJOR
    if v1.minor != v2.minor:
        return DiffKind.MINOR
    if v1.patch != v2.patch:
        return DiffKind.PATCH
    # Only pre-release/build differ (or nothing does): no numeric category
    return DiffKind.UNKNOWN
