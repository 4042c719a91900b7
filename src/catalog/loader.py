"""Discovery and parsing of the shared dependency catalog file."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from common.errors import CatalogError, InvalidDependencyError, MalformedCatalogEntryError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from resolution.models import Catalog, DependencySetDef
from resolution.parser import parse_dependencies, parse_set_ids

logger = logging.getLogger(__name__)


def find_catalog_file(root_path: str, file_name: Optional[str] = None) -> Optional[str]:
    """Search ``root_path`` and its ancestors for the catalog file.

    Args:
        root_path: Directory where the search starts.
        file_name: Catalog file name; defaults to Constants.CATALOG_FILE.

    Returns:
        Absolute path of the first match, or None.
    """
    file_name = file_name or Constants.CATALOG_FILE
    logger.debug("Searching for shared dependencies, starting in `%s'.", root_path)
    current = os.path.abspath(root_path)
    while True:
        candidate = os.path.join(current, file_name)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def normalize_entry(set_id: Any, value: Any, source: Optional[str] = None) -> DependencySetDef:
    """Normalize one catalog entry to a DependencySetDef.

    A bare list is shorthand for ``{"dependencies": list}``.
    """
    if isinstance(value, list):
        value = {"dependencies": value}
    if not isinstance(value, dict):
        raise MalformedCatalogEntryError(
            set_id, "expected a list of dependencies or a map with a `dependencies' key", source
        )
    if "dependencies" not in value:
        raise MalformedCatalogEntryError(set_id, "missing `dependencies' key", source)
    dependencies = value.get("dependencies") or []
    if not isinstance(dependencies, list):
        raise MalformedCatalogEntryError(set_id, "`dependencies' must be a list", source)
    extends = value.get("extends")
    if extends is not None and not isinstance(extends, (list, str)):
        raise MalformedCatalogEntryError(set_id, "`extends' must be a set id or a list of set ids", source)
    try:
        parsed = parse_dependencies(dependencies)
        extended = parse_set_ids(extends)
    except InvalidDependencyError as e:
        raise MalformedCatalogEntryError(set_id, str(e), source) from e
    return DependencySetDef(set_id=set_id, dependencies=parsed, extends=extended)


def parse_catalog(data: Any, source: Optional[str] = None) -> Catalog:
    """Build a Catalog from already-parsed YAML data."""
    if data is None:
        return Catalog({}, source=source)
    if not isinstance(data, dict):
        raise CatalogError("Catalog must be a map of dependency set ids to definitions", source)
    sets: Dict[Any, DependencySetDef] = {}
    for set_id, value in data.items():
        sets[set_id] = normalize_entry(set_id, value, source)
    return Catalog(sets, source=source)


def read_catalog_file(path: str) -> Catalog:
    """Read and normalize a catalog file.

    Raises:
        CatalogError: when the file cannot be read or parsed.
        MalformedCatalogEntryError: when an entry has an unsupported shape.
    """
    logger.debug("Reading shared dependencies from `%s'.", path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise CatalogError(f"Unable to read catalog: {e}", path) from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Unable to parse catalog: {e}", path) from e

    catalog = parse_catalog(data, source=path)
    if is_debug_enabled(logger):
        logger.debug(
            "Catalog loaded",
            extra=extra_context(
                event="function_exit",
                component="catalog",
                action="read_catalog_file",
                target=path,
                count=len(catalog),
            ),
        )
    return catalog
