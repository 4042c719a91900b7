"""Tests for reading and exporting project descriptors."""

import pytest

from common.errors import ProjectDescriptorError
from constants import Constants
from descriptor.loader import find_project_file, parse_project, project_to_dict, read_project_file

PROJECT_YAML = """\
group: eReceipts
name: api.receipt
version: 0.1.0-SNAPSHOT
dependencies:
  - io.aviso:pretty:0.1.20
dependency_sets: [database, logging]
profiles:
  dev:
    dependencies:
      - ["io.aviso:toolchest", "0.1.3", {scope: test}]
    dependency_sets: testing
  prod:
"""


def test_read_project_file(tmp_path):
    path = tmp_path / "project.yml"
    path.write_text(PROJECT_YAML, encoding="utf-8")
    project = read_project_file(str(path))
    assert project.identity == "eReceipts/api.receipt"
    assert project.coordinate == "eReceipts:api.receipt"
    assert project.version == "0.1.0-SNAPSHOT"
    assert project.root == str(tmp_path)
    assert [str(d) for d in project.dependencies] == ["io.aviso:pretty:0.1.20"]
    assert project.dependency_sets == ("database", "logging")
    assert project.profile_names() == ["dev", "prod"]
    dev = project.profile("dev")
    assert dev.dependency_sets == ("testing",)
    assert dev.dependencies[0].option("scope") == "test"
    assert project.profile("prod").dependencies == ()


def test_find_project_file(tmp_path):
    assert find_project_file(str(tmp_path)) is None
    (tmp_path / "project.yml").write_text("name: x\n", encoding="utf-8")
    assert find_project_file(str(tmp_path)) == str(tmp_path / "project.yml")


def test_defaults():
    project = parse_project({"name": "solo"})
    assert project.group is None
    assert project.identity == "solo"
    assert project.version == Constants.DEFAULT_VERSION
    assert project.dependencies == ()
    assert project.profiles == ()


@pytest.mark.parametrize(
    "data",
    [
        None,
        ["name", "x"],
        {"version": "1.0"},
        {"name": "x", "profiles": ["dev"]},
        {"name": "x", "profiles": {"dev": "oops"}},
        {"name": "x", "dependencies": ["no-version"]},
    ],
)
def test_invalid_descriptor(data):
    with pytest.raises(ProjectDescriptorError):
        parse_project(data, source="project.yml")


def test_unparseable_file(tmp_path):
    path = tmp_path / "project.yml"
    path.write_text("name: [unclosed\n", encoding="utf-8")
    with pytest.raises(ProjectDescriptorError):
        read_project_file(str(path))


def test_project_to_dict():
    data = project_to_dict(parse_project({
        "name": "api",
        "group": "g",
        "version": "2",
        "dependencies": [["lib", "1.0", {"classifier": "jdk8"}]],
        "dependency_sets": "database",
        "profiles": {"dev": {"dependencies": ["t:1"]}},
    }))
    assert data == {
        "name": "api",
        "group": "g",
        "version": "2",
        "dependencies": [{"artifact": "lib", "version": "1.0", "classifier": "jdk8"}],
        "dependency_sets": ["database"],
        "profiles": {"dev": {"dependencies": [{"artifact": "t", "version": "1"}], "dependency_sets": []}},
    }


@pytest.mark.parametrize(
    "data",
    [
        {"name": "p", "dependency_sets": [["A"]]},
        {"name": "p", "profiles": {"dev": {"dependency_sets": [{"a": 1}]}}},
    ],
)
def test_unhashable_set_ids_rejected(data):
    with pytest.raises(ProjectDescriptorError):
        parse_project(data, source="project.yml")
