"""Tests for dependency declaration parsing."""

import pytest

from common.errors import InvalidDependencyError
from resolution.models import DependencySpec
from resolution.parser import (
    parse_dependencies,
    parse_dependency,
    parse_set_ids,
    tokenize_rightmost_colon,
)


class TestTokenizeRightmostColon:
    """Tests for the rightmost-colon split."""

    def test_group_artifact_version(self):
        assert tokenize_rightmost_colon("org.example:lib:1.2.0") == ("org.example:lib", "1.2.0")

    def test_artifact_version(self):
        assert tokenize_rightmost_colon(" lib:1.0 ") == ("lib", "1.0")

    def test_no_colon(self):
        assert tokenize_rightmost_colon("lib") == ("lib", None)

    def test_trailing_colon(self):
        assert tokenize_rightmost_colon("lib:") == ("lib", None)


class TestParseDependency:
    """Tests for the accepted dependency shapes."""

    def test_string_token(self):
        dep = parse_dependency("io.aviso:pretty:0.1.20")
        assert dep == DependencySpec(artifact="io.aviso:pretty", version="0.1.20")
        assert dep.identity == "io.aviso:pretty"
        assert str(dep) == "io.aviso:pretty:0.1.20"

    def test_list_with_options(self):
        dep = parse_dependency(["postgres", "1.0", {"classifier": "jdk8", "exclusions": ["log4j"]}])
        assert dep.artifact == "postgres"
        assert dep.version == "1.0"
        assert dep.option("classifier") == "jdk8"
        assert dep.option("exclusions") == ("log4j",)
        assert dep.option("missing", "default") == "default"

    def test_mapping(self):
        dep = parse_dependency({"artifact": "testing", "version": 1.5, "scope": "test"})
        assert dep.artifact == "testing"
        assert dep.version == "1.5"
        assert dep.options == (("scope", "test"),)

    def test_specs_are_hashable(self):
        raw = {"artifact": "a", "version": "1", "exclusions": [{"artifact": "b"}]}
        assert hash(parse_dependency(raw)) == hash(parse_dependency(dict(raw)))

    def test_passthrough(self):
        dep = DependencySpec("x", "1")
        assert parse_dependency(dep) is dep

    @pytest.mark.parametrize("value", ["lib", ["lib"], {"version": "1.0"}, {"artifact": "", "version": "1"}, 42])
    def test_invalid_shapes(self, value):
        with pytest.raises(InvalidDependencyError):
            parse_dependency(value)

    def test_list_options_must_be_maps(self):
        with pytest.raises(InvalidDependencyError):
            parse_dependency(["lib", "1.0", "oops"])


def test_parse_dependencies_preserves_order():
    deps = parse_dependencies(["b:2", "a:1", "c:3"])
    assert [d.artifact for d in deps] == ["b", "a", "c"]


def test_parse_dependencies_rejects_non_list():
    with pytest.raises(InvalidDependencyError):
        parse_dependencies("a:1")
    assert parse_dependencies(None) == ()


def test_parse_set_ids():
    assert parse_set_ids(None) == ()
    assert parse_set_ids("testing") == ("testing",)
    assert parse_set_ids(["a", "b"]) == ("a", "b")


@pytest.mark.parametrize("value", [["A", ["B"]], [{"a": 1}], {"a": 1}, [True], [1.5]])
def test_parse_set_ids_rejects_non_scalar_ids(value):
    with pytest.raises(InvalidDependencyError):
        parse_set_ids(value)


def test_parse_set_ids_accepts_integers():
    assert parse_set_ids([1, "two"]) == (1, "two")
