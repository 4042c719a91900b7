"""Tests for merging dependency sets into project dependency lists."""

import logging

from common.errors import CyclicExtendsError
from resolution.merger import distinct_dependencies, merge_project, requests_any_sets, select_profiles
from resolution.models import (
    BASE_CONTEXT,
    Catalog,
    DependencySetDef,
    DependencySpec,
    Profile,
    ProjectDescriptor,
)


def dep(token):
    artifact, version = token.split("@")
    return DependencySpec(artifact, version)


def deps(*tokens):
    return tuple(dep(t) for t in tokens)


def make_catalog(**sets):
    return Catalog({
        set_id: DependencySetDef(set_id=set_id, dependencies=deps(*body.get("deps", ())),
                                 extends=tuple(body.get("extends", ())))
        for set_id, body in sets.items()
    })


def make_project(dependencies=(), sets=(), profiles=()):
    return ProjectDescriptor(
        name="api.receipt",
        group="eReceipts",
        version="0.1.0-SNAPSHOT",
        dependencies=deps(*dependencies),
        dependency_sets=tuple(sets),
        profiles=tuple(profiles),
    )


def artifacts(dependencies):
    return [f"{d.artifact}@{d.version}" for d in dependencies]


class TestScenarios:
    """End-to-end merge scenarios."""

    def test_extended_set_dependencies_first(self):
        catalog = make_catalog(A={"deps": ["x@1"]}, B={"deps": ["y@1"], "extends": ["A"]})
        result = merge_project(make_project(sets=["B"]), catalog)
        base = result.context(BASE_CONTEXT)
        assert base.ordered == ("A", "B")
        assert artifacts(result.project.dependencies) == ["x@1", "y@1"]

    def test_direct_declaration_wins(self):
        catalog = make_catalog(A={"deps": ["x@2"]})
        result = merge_project(make_project(dependencies=["x@1"], sets=["A"]), catalog)
        assert artifacts(result.project.dependencies) == ["x@1"]

    def test_unknown_set_leaves_dependencies_unchanged(self):
        catalog = make_catalog(A={"deps": ["x@1"]})
        project = make_project(dependencies=["w@1"], sets=["Z"])
        result = merge_project(project, catalog)
        assert artifacts(result.project.dependencies) == ["w@1"]
        assert result.context(BASE_CONTEXT).unknown == ("Z",)
        assert len(result.unknown_reports) == 1
        report = result.unknown_reports[0]
        assert report.project == "eReceipts/api.receipt"
        assert report.context == BASE_CONTEXT
        assert report.unknown_ids == ("Z",)
        assert report.known_ids == ("A",)

    def test_cycle_is_fatal_for_its_context_only(self):
        catalog = make_catalog(A={"extends": ["B"]}, B={"extends": ["A"]}, T={"deps": ["t@1"]})
        project = make_project(
            dependencies=["w@1"],
            sets=["A"],
            profiles=[Profile(name="dev", dependency_sets=("T",))],
        )
        result = merge_project(project, catalog)
        base = result.context(BASE_CONTEXT)
        assert isinstance(base.error, CyclicExtendsError)
        assert artifacts(base.dependencies) == ["w@1"]
        dev = result.context("dev")
        assert dev.ok
        assert artifacts(dev.dependencies) == ["t@1"]
        assert [ctx.context for ctx in result.errors] == [BASE_CONTEXT]
        assert artifacts(result.effective) == ["w@1", "t@1"]


class TestOrderingAndDedup:
    """Ordering and deduplication laws."""

    def test_set_order_is_authored_order(self):
        catalog = make_catalog(A={"deps": ["c@1", "a@1", "b@1"]})
        result = merge_project(make_project(sets=["A"]), catalog)
        assert artifacts(result.project.dependencies) == ["c@1", "a@1", "b@1"]

    def test_first_set_occurrence_wins(self):
        catalog = make_catalog(A={"deps": ["x@1"]}, B={"deps": ["x@2", "y@1"]})
        result = merge_project(make_project(sets=["A", "B"]), catalog)
        assert artifacts(result.project.dependencies) == ["x@1", "y@1"]

    def test_distinct_dependencies_keeps_first(self):
        assert artifacts(distinct_dependencies(deps("a@1", "b@1", "a@2", "c@1", "b@3"))) == ["a@1", "b@1", "c@1"]

    def test_merge_is_stable_under_reapplication(self):
        catalog = make_catalog(A={"deps": ["x@1"]}, B={"deps": ["y@1"], "extends": ["A"]}, T={"deps": ["t@1", "x@9"]})
        project = make_project(
            dependencies=["w@1"],
            sets=["B"],
            profiles=[Profile(name="dev", dependencies=deps("d@1"), dependency_sets=("T",))],
        )
        once = merge_project(project, catalog)
        twice = merge_project(once.project, catalog)
        assert twice.project.dependencies == once.project.dependencies
        assert twice.project.profiles == once.project.profiles
        assert twice.effective == once.effective
        assert twice.project.authored == project
        for first, second in zip(once.contexts, twice.contexts):
            assert second.context == first.context
            assert second.dependencies == first.dependencies

    def test_remerge_with_fewer_profiles(self):
        catalog = make_catalog(T={"deps": ["t@1"]})
        project = make_project(
            dependencies=["w@1"],
            profiles=[Profile(name="dev", dependency_sets=("T",)), Profile(name="prod", dependencies=deps("p@1"))],
        )
        merged = merge_project(project, catalog).project
        again = merge_project(merged, catalog, active_profiles=["prod"])
        fresh = merge_project(project, catalog, active_profiles=["prod"])
        assert artifacts(again.context(BASE_CONTEXT).dependencies) == ["w@1"]
        assert artifacts(again.effective) == ["w@1", "p@1"]
        assert again.effective == fresh.effective
        assert again.project.profiles == fresh.project.profiles

    def test_input_is_not_mutated(self):
        catalog = make_catalog(A={"deps": ["x@1"]})
        project = make_project(dependencies=["w@1"], sets=["A"])
        result = merge_project(project, catalog)
        assert artifacts(project.dependencies) == ["w@1"]
        assert result.project is not project
        assert result.project.source_view is project


class TestProfiles:
    """Per-profile contexts and the fold into the base list."""

    def test_profiles_merge_independently_then_fold(self):
        catalog = make_catalog(
            database={"deps": ["postgres@1.0"]},
            **{"repl-help": {"deps": ["repl-help@1.3", "repl-fix@1.4.0"]}},
            testing={"deps": ["testing@1.0"], "extends": ["repl-help"]},
        )
        project = make_project(
            dependencies=["io.aviso:pretty@0.1.20"],
            sets=["database"],
            profiles=[Profile(name="dev", dependencies=deps("io.aviso:toolchest@0.1.3"), dependency_sets=("testing",))],
        )
        result = merge_project(project, catalog)
        assert artifacts(result.context(BASE_CONTEXT).dependencies) == ["io.aviso:pretty@0.1.20", "postgres@1.0"]
        assert artifacts(result.context("dev").dependencies) == [
            "io.aviso:toolchest@0.1.3", "repl-help@1.3", "repl-fix@1.4.0", "testing@1.0",
        ]
        assert artifacts(result.project.profile("dev").dependencies) == artifacts(result.context("dev").dependencies)
        assert artifacts(result.effective) == [
            "io.aviso:pretty@0.1.20", "postgres@1.0",
            "io.aviso:toolchest@0.1.3", "repl-help@1.3", "repl-fix@1.4.0", "testing@1.0",
        ]
        assert result.project.dependencies == result.effective

    def test_activation_order(self):
        project = make_project(profiles=[Profile(name="dev"), Profile(name="test"), Profile(name="prod")])
        assert [p.name for p in select_profiles(project, ["test", "dev"])] == ["test", "dev"]
        assert [p.name for p in select_profiles(project, None)] == ["dev", "test", "prod"]

    def test_unknown_profile_is_skipped(self, caplog):
        project = make_project(profiles=[Profile(name="dev")])
        with caplog.at_level(logging.WARNING):
            selected = select_profiles(project, ["nope", "dev"])
        assert [p.name for p in selected] == ["dev"]
        assert "no profile nope" in caplog.text

    def test_inactive_profile_not_folded(self):
        catalog = make_catalog(T={"deps": ["t@1"]})
        project = make_project(
            dependencies=["w@1"],
            profiles=[Profile(name="dev", dependency_sets=("T",)), Profile(name="prod", dependencies=deps("p@1"))],
        )
        result = merge_project(project, catalog, active_profiles=["prod"])
        assert [ctx.context for ctx in result.contexts] == [BASE_CONTEXT, "prod"]
        assert artifacts(result.effective) == ["w@1", "p@1"]
        # Inactive profiles keep their authored dependencies.
        assert result.project.profile("dev").dependencies == ()


class TestWithoutCatalog:
    """A missing catalog passes the project through."""

    def test_passthrough(self):
        project = make_project(dependencies=["w@1"], sets=["A"], profiles=[Profile(name="dev", dependencies=deps("d@1"))])
        result = merge_project(project, None)
        assert result.catalog_available is False
        assert result.project is project
        assert artifacts(result.effective) == ["w@1", "d@1"]
        assert result.unknown_reports == []


def test_requests_any_sets():
    assert requests_any_sets(make_project(sets=["A"]))
    assert requests_any_sets(make_project(profiles=[Profile(name="dev", dependency_sets=("A",))]))
    assert not requests_any_sets(make_project(dependencies=["w@1"]))


def test_unknown_report_from_plain_mapping():
    catalog = {2: DependencySetDef(2), "a": DependencySetDef("a")}
    result = merge_project(make_project(sets=["Z"]), catalog)
    assert result.unknown_reports[0].known_ids == ("2", "a")
