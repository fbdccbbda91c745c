"""Tests for the dependency aggregator and conflict analyzer."""

from __future__ import annotations

from depsentinel.engines.consistency.aggregator import aggregate
from depsentinel.engines.consistency.conflicts import (
    find_conflicts,
    recommendation,
    severity_breakdown,
)
from depsentinel.engines.consistency.models import DiffKind
from depsentinel.engines.consistency.workspace import WorkspaceClassifier


# ── aggregate ────────────────────────────────────────────────────────────


class TestAggregate:
    def test_distinct_raw_strings_kept_apart(self, make_manifest):
        root = make_manifest("app", deps={"axios": "^1.2.0"})
        pkg = make_manifest("pkg1", deps={"axios": "~1.2.0"})
        records = aggregate([pkg], root)
        assert set(records["axios"].versions) == {"^1.2.0", "~1.2.0"}

    def test_packages_and_usages(self, make_manifest):
        root = make_manifest("app", deps={"react": "^18.0.0"})
        pkg1 = make_manifest("pkg1", peer={"react": "^18.0.0"})
        pkg2 = make_manifest("pkg2", dev={"react": "^18.0.0"})
        records = aggregate([pkg1, pkg2], root)

        entry = records["react"].versions["^18.0.0"]
        assert entry.packages == {"app", "pkg1", "pkg2"}
        assert entry.usages == {"normal (root)", "peer", "dev"}
        assert records["react"].used_as_normal
        assert records["react"].used_as_peer

    def test_dev_only_sets_no_flags(self, make_manifest):
        records = aggregate([], make_manifest("app", dev={"eslint": "^8.0.0"}))
        assert not records["eslint"].used_as_normal
        assert not records["eslint"].used_as_peer

    def test_workspace_usage_tag(self, make_manifest):
        pkg = make_manifest("pkg1", deps={"shared": "workspace:*"})
        records = aggregate([pkg], make_manifest("app"))
        assert "workspace" in records["shared"].versions["workspace:*"].usages

    def test_root_listed_in_manifests_is_folded_once(self, make_manifest):
        root = make_manifest("app", deps={"react": "^17.0.2"})
        records = aggregate([root], root)
        assert records["react"].versions["^17.0.2"].usages == {"normal (root)"}

    def test_classifier_drops_workspace_packages(self, make_manifest):
        pkg1 = make_manifest("pkg1", deps={"pkg2": "workspace:*", "react": "^18.0.0"})
        pkg2 = make_manifest("pkg2", deps={"react": "^18.0.0"})
        classifier = WorkspaceClassifier.from_manifests([pkg1, pkg2])
        records = aggregate([pkg1, pkg2], make_manifest("app"), classifier)
        assert "pkg2" not in records
        assert "react" in records

    def test_order_independent(self, make_manifest):
        root = make_manifest("app", deps={"react": "^17.0.2"})
        pkg1 = make_manifest("pkg1", deps={"react": "^18.0.0", "lodash": "^4.0.0"})
        pkg2 = make_manifest("pkg2", deps={"react": "^18.0.0"}, peer={"lodash": "^4.17.0"})

        forward = aggregate([pkg1, pkg2], root)
        backward = aggregate([pkg2, pkg1], root)
        assert forward.keys() == backward.keys()
        for name, record in forward.items():
            other = backward[name]
            assert record.versions == other.versions
            assert record.used_as_normal == other.used_as_normal
            assert record.used_as_peer == other.used_as_peer


# ── find_conflicts ───────────────────────────────────────────────────────


class TestFindConflicts:
    def test_major_conflict(self, make_manifest):
        root = make_manifest("app", deps={"react": "^17.0.2"})
        pkg = make_manifest("P", deps={"react": "^18.0.0"})
        conflicts = find_conflicts(aggregate([pkg], root))

        assert len(conflicts) == 1
        assert conflicts[0].name == "react"
        assert len(conflicts[0].comparisons) == 1
        assert conflicts[0].comparisons[0].kind is DiffKind.MAJOR

    def test_no_conflict_for_single_version(self, make_manifest):
        root = make_manifest("app", deps={"react": "^18.0.0"})
        pkg = make_manifest("P", deps={"react": "^18.0.0"})
        assert find_conflicts(aggregate([pkg], root)) == []

    def test_pair_count(self, make_manifest):
        root = make_manifest("app", deps={"lodash": "4.17.21"})
        others = [
            make_manifest("a", deps={"lodash": "^4.17.0"}),
            make_manifest("b", deps={"lodash": "~4.16.0"}),
            make_manifest("c", deps={"lodash": "3.10.1"}),
        ]
        conflicts = find_conflicts(aggregate(others, root))
        assert len(conflicts[0].versions) == 4
        assert len(conflicts[0].comparisons) == 6

    def test_comparisons_follow_insertion_order(self, make_manifest):
        root = make_manifest("app", deps={"axios": "^1.2.0"})
        pkg = make_manifest("P", deps={"axios": "~1.0.0"})
        cmp = find_conflicts(aggregate([pkg], root))[0].comparisons[0]
        assert (cmp.version1, cmp.version2) == ("^1.2.0", "~1.0.0")
        assert cmp.kind is DiffKind.MINOR

    def test_workspace_package_excluded_entirely(self, make_manifest):
        pkg1 = make_manifest("pkg1", deps={"internal-pkg": "workspace:*"})
        internal = make_manifest("internal-pkg", deps={})
        pkg3 = make_manifest("pkg3", deps={"internal-pkg": "^1.0.0"})
        others = [pkg1, internal, pkg3]
        classifier = WorkspaceClassifier.from_manifests(others)
        conflicts = find_conflicts(aggregate(others, make_manifest("app"), classifier))
        assert [c.name for c in conflicts] == []

    def test_latest_classified_unknown(self, make_manifest):
        root = make_manifest("app", deps={"vite": "latest"})
        pkg = make_manifest("P", dev={"vite": "^2.0.0"})
        cmp = find_conflicts(aggregate([pkg], root))[0].comparisons[0]
        assert cmp.kind is DiffKind.UNKNOWN

    def test_severity_breakdown(self, make_manifest):
        root = make_manifest("app", deps={"react": "^17.0.2", "axios": "^1.2.0", "vite": "latest"})
        pkg = make_manifest("P", deps={"react": "^18.0.0", "axios": "^1.2.5", "vite": "^5.0.0"})
        counts = severity_breakdown(find_conflicts(aggregate([pkg], root)))
        assert counts[DiffKind.MAJOR] == 1
        assert counts[DiffKind.PATCH] == 1
        assert counts[DiffKind.UNKNOWN] == 1
        assert counts[DiffKind.MINOR] == 0

    def test_every_kind_has_recommendation(self):
        for kind in DiffKind:
            assert recommendation(kind)
