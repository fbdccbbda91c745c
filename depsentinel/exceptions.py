"""Custom exceptions for DepSentinel."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class DepSentinelError(Exception):
    """Base exception for all DepSentinel errors."""


class ManifestUnreadableError(DepSentinelError):
    """Raised when a root or package manifest is missing or cannot be parsed.

    Fatal for the run: nothing is reported and nothing is written.
    """

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load manifest {self.path}: {reason}")


class ApplyError(DepSentinelError):
    """Raised when the edits for a single manifest cannot be applied."""


@dataclass
class WriteFailure:
    """A manifest whose planned edits did not take effect."""

    package: str
    path: Path | None
    reason: str
