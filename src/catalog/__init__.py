"""Shared dependency catalog package.

- loader.py: discovery and parsing of the catalog file
- siblings.py: implicit sets for modules of a multi-module umbrella
- cache.py: per-invocation cache and catalog assembly for a project
"""

from .loader import find_catalog_file, normalize_entry, parse_catalog, read_catalog_file
from .siblings import discover_module_sets, sibling_sets
from .cache import CatalogCache, load_catalog

__all__ = [
    "find_catalog_file",
    "normalize_entry",
    "parse_catalog",
    "read_catalog_file",
    "discover_module_sets",
    "sibling_sets",
    "CatalogCache",
    "load_catalog",
]
