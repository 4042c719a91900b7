"""Implicit dependency sets for the modules of a multi-module umbrella.

Every module directory holding a project descriptor contributes a set keyed
by that module's coordinate, containing a single dependency on the module
itself. A project can then request ``example:core`` to depend on its
sibling ``core`` module at the version declared there.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from common.errors import ProjectDescriptorError
from constants import Constants
from descriptor.loader import find_project_file, read_project_file
from resolution.models import Catalog, DependencySetDef, DependencySpec, ProjectDescriptor

logger = logging.getLogger(__name__)


def umbrella_root(project_root: str) -> str:
    """Directory whose subdirectories are the project's siblings."""
    return os.path.dirname(os.path.abspath(project_root))


def discover_module_sets(umbrella: str, file_name: Optional[str] = None) -> Catalog:
    """Synthesize one-dependency sets for each module below ``umbrella``.

    Args:
        umbrella: Directory whose immediate subdirectories are modules.
        file_name: Descriptor file name; defaults to Constants.PROJECT_FILE.

    Returns:
        Catalog of module sets, possibly empty.
    """
    sets: Dict[str, DependencySetDef] = {}
    try:
        entries = sorted(os.listdir(umbrella))
    except OSError as e:
        logger.debug("Unable to list modules in `%s': %s", umbrella, e)
        return Catalog({})

    for entry in entries:
        directory = os.path.join(umbrella, entry)
        if not os.path.isdir(directory):
            continue
        path = find_project_file(directory, file_name or Constants.PROJECT_FILE)
        if path is None:
            continue
        try:
            module = read_project_file(path)
        except ProjectDescriptorError as e:
            logger.debug("Skipping module `%s': %s", directory, e)
            continue
        coordinate = module.coordinate
        if coordinate in sets:
            logger.debug("Duplicate module %s in `%s' ignored.", coordinate, directory)
            continue
        sets[coordinate] = DependencySetDef(
            set_id=coordinate,
            dependencies=(DependencySpec(artifact=coordinate, version=module.version),),
        )

    if sets:
        logger.debug("Found %d module(s) in `%s'.", len(sets), umbrella)
    return Catalog(sets, source=umbrella if sets else None)


def sibling_sets(project: ProjectDescriptor, modules: Catalog) -> Catalog:
    """Module sets visible to ``project``: every module except itself."""
    return Catalog(
        {set_id: definition for set_id, definition in modules.items() if set_id != project.coordinate},
        source=modules.source,
    )
