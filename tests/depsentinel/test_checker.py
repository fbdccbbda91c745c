"""Tests for DependencyChecker run orchestration."""

from __future__ import annotations

import json

import pytest

from depsentinel.engines.consistency.checker import DependencyChecker
from depsentinel.engines.consistency.models import DiffKind
from depsentinel.exceptions import ManifestUnreadableError


@pytest.fixture
def checker(workspace):
    return DependencyChecker(workspace / "package.json", str(workspace / "packages"))


class TestDependencyChecker:
    def test_load_builds_classifier(self, checker):
        ws = checker.load()
        assert ws.root.name == "app"
        assert ws.classifier.workspace_packages == frozenset({"pkg1", "pkg2"})
        assert set(ws.package_paths()) == {"app", "pkg1", "pkg2"}

    def test_analyze_includes_workspace_entries(self, checker):
        records = checker.analyze()
        assert "pkg2" in records
        assert records["pkg2"].versions["workspace:*"].packages == {"pkg1"}

    def test_check_versions(self, checker):
        conflicts = {c.name: c for c in checker.check_versions()}
        assert set(conflicts) == {"react", "axios"}
        assert conflicts["react"].comparisons[0].kind is DiffKind.MAJOR
        assert conflicts["axios"].comparisons[0].kind is DiffKind.MINOR

    def test_check_missing(self, checker):
        report = checker.check_missing()
        pkg1 = report.packages["pkg1"]
        assert {d.name for d in pkg1.missing} == {"lodash", "react-dom"}
        assert {d.name for d in pkg1.extra} == {"axios"}
        assert {d.name for d in report.packages["pkg2"].extra} == {"react"}

    def test_update_dry_run_then_apply(self, checker, workspace):
        pkg1_file = workspace / "packages" / "pkg1" / "package.json"
        before = pkg1_file.read_bytes()

        dry = checker.update(dry_run=True)
        assert len(dry.edits) == 2
        assert pkg1_file.read_bytes() == before

        result = checker.update()
        assert result.ok
        assert json.loads(pkg1_file.read_text())["dependencies"]["react"] == "^17.0.2"
        assert checker.update(dry_run=True).edits == []

    def test_unreadable_root(self, workspace):
        checker = DependencyChecker(workspace / "nope.json", workspace / "packages")
        with pytest.raises(ManifestUnreadableError):
            checker.check_versions()
