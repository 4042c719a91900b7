"""Per-invocation cache for catalogs shared by several modules."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from constants import Constants
from resolution.models import Catalog, ProjectDescriptor

from .loader import find_catalog_file, read_catalog_file
from .siblings import discover_module_sets, sibling_sets, umbrella_root

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cached value."""

    value: T
    created_at: float = field(default_factory=time.time)
    hits: int = 0


class CatalogCache:
    """Cache of parsed catalogs and umbrella module sets.

    Construct one per build invocation and drop it afterwards; nothing is
    ever invalidated. Catalogs are immutable, so a cached value may be
    shared freely once stored. A lock guards the tables because several
    modules may resolve concurrently against the same catalog file.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._catalogs: Dict[str, CacheEntry[Catalog]] = {}
        self._modules: Dict[str, CacheEntry[Catalog]] = {}
        self._notices: set = set()

    def _get_or_load(self, table: Dict[str, CacheEntry[Catalog]], key: str, loader: Callable[[str], Catalog]) -> Catalog:
        with self._lock:
            entry = table.get(key)
            if entry is not None:
                entry.hits += 1
                return entry.value
        # Load outside the lock; a racing loader produces an equal value.
        value = loader(key)
        with self._lock:
            entry = table.setdefault(key, CacheEntry(value=value))
            return entry.value

    def catalog(self, path: str) -> Catalog:
        """Parsed catalog for ``path``, read on first use."""
        return self._get_or_load(self._catalogs, path, read_catalog_file)

    def modules(self, umbrella: str) -> Catalog:
        """Module sets below the umbrella directory, scanned on first use."""
        return self._get_or_load(self._modules, umbrella, discover_module_sets)

    def notify_once(self, key: Any) -> bool:
        """Return True the first time ``key`` is seen, False afterwards."""
        with self._lock:
            if key in self._notices:
                return False
            self._notices.add(key)
            return True

    def clear(self) -> None:
        """Drop all cached entries."""
        with self._lock:
            self._catalogs.clear()
            self._modules.clear()
            self._notices.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "catalogs": len(self._catalogs),
                "umbrellas": len(self._modules),
                "catalog_hits": sum(e.hits for e in self._catalogs.values()),
                "module_hits": sum(e.hits for e in self._modules.values()),
            }


def load_catalog(
    project: ProjectDescriptor,
    cache: CatalogCache,
    catalog_path: Optional[str] = None,
    include_siblings: bool = True,
) -> Optional[Catalog]:
    """Assemble the catalog visible to ``project``.

    Entries from the catalog file take precedence over implicit sibling
    sets. Returns None when there is neither a catalog file nor a sibling
    module, after logging a warning.

    Raises:
        CatalogError: when a catalog file exists but cannot be parsed.
    """
    root = project.root or "."
    path = catalog_path or find_catalog_file(root, Constants.CATALOG_FILE)
    file_catalog = cache.catalog(path) if path else None
    siblings = sibling_sets(project, cache.modules(umbrella_root(root))) if include_siblings else None

    if file_catalog is None and not siblings:
        logger.warning(
            "Unable to find %s file in directory `%s', or any parent directory.",
            Constants.CATALOG_FILE,
            root,
        )
        return None
    if not siblings:
        return file_catalog
    return Catalog.layered(file_catalog, siblings)
