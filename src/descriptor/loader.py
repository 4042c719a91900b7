"""Reading and exporting project descriptors (``project.yml``)."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from common.errors import InvalidDependencyError, ProjectDescriptorError
from constants import Constants
from resolution.models import DependencySpec, Profile, ProjectDescriptor
from resolution.parser import parse_dependencies, parse_set_ids

logger = logging.getLogger(__name__)


def find_project_file(directory: str, file_name: Optional[str] = None) -> Optional[str]:
    """Return the descriptor path inside ``directory`` if it exists."""
    path = os.path.join(directory, file_name or Constants.PROJECT_FILE)
    return path if os.path.isfile(path) else None


def _parse_profile(name: Any, body: Any, source: str) -> Profile:
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ProjectDescriptorError(f"Profile {name} in `{source}' must be a map")
    return Profile(
        name=str(name),
        dependencies=parse_dependencies(body.get("dependencies")),
        dependency_sets=parse_set_ids(body.get("dependency_sets")),
    )


def parse_project(data: Any, source: str = "<memory>", root: Optional[str] = None) -> ProjectDescriptor:
    """Build a ProjectDescriptor from parsed YAML data."""
    if not isinstance(data, dict):
        raise ProjectDescriptorError(f"Project descriptor `{source}' must be a map")
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ProjectDescriptorError(f"Project descriptor `{source}' has no `name'")
    group = data.get("group")
    profiles = data.get("profiles") or {}
    if not isinstance(profiles, dict):
        raise ProjectDescriptorError(f"`profiles' in `{source}' must be a map of profile names")
    try:
        return ProjectDescriptor(
            name=name.strip(),
            group=str(group).strip() if group else None,
            version=str(data.get("version") or Constants.DEFAULT_VERSION),
            dependencies=parse_dependencies(data.get("dependencies")),
            dependency_sets=parse_set_ids(data.get("dependency_sets")),
            profiles=tuple(_parse_profile(k, v, source) for k, v in profiles.items()),
            root=root,
        )
    except InvalidDependencyError as e:
        raise ProjectDescriptorError(f"{e} (in `{source}')") from e


def read_project_file(path: str) -> ProjectDescriptor:
    """Read a project descriptor from disk.

    Raises:
        ProjectDescriptorError: when the file is missing, unreadable or invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ProjectDescriptorError(f"Unable to read project descriptor `{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ProjectDescriptorError(f"Unable to parse project descriptor `{path}': {e}") from e
    return parse_project(data, source=path, root=os.path.dirname(os.path.abspath(path)))


def dependency_to_dict(dep: DependencySpec) -> Dict[str, Any]:
    data: Dict[str, Any] = {"artifact": dep.artifact, "version": dep.version}
    for key, value in dep.options:
        data[key] = value
    return data


def project_to_dict(project: ProjectDescriptor) -> Dict[str, Any]:
    """Plain-data view of a descriptor, suitable for JSON export."""
    return {
        "name": project.name,
        "group": project.group,
        "version": project.version,
        "dependencies": [dependency_to_dict(d) for d in project.dependencies],
        "dependency_sets": [str(s) for s in project.dependency_sets],
        "profiles": {
            p.name: {
                "dependencies": [dependency_to_dict(d) for d in p.dependencies],
                "dependency_sets": [str(s) for s in p.dependency_sets],
            }
            for p in project.profiles
        },
    }
