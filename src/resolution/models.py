"""Data models for dependency sets, projects and resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Tuple

# Dependency set identifiers are opaque; catalogs read from YAML use strings.
SetId = Hashable


@dataclass(frozen=True)
class DependencySpec:
    """A single artifact dependency.

    Only ``artifact`` takes part in deduplication; ``options`` is carried
    through untouched (exclusions, classifiers and the like).
    """
    artifact: str
    version: str
    options: Tuple[Tuple[str, Any], ...] = ()

    @property
    def identity(self) -> str:
        return self.artifact

    def option(self, key: str, default: Any = None) -> Any:
        for name, value in self.options:
            if name == key:
                return value
        return default

    def __str__(self) -> str:
        return f"{self.artifact}:{self.version}"


@dataclass(frozen=True)
class DependencySetDef:
    """A named, reusable bundle of dependencies."""
    set_id: SetId
    dependencies: Tuple[DependencySpec, ...] = ()
    extends: Tuple[SetId, ...] = ()


class Catalog(Mapping):
    """Read-only mapping of set id to DependencySetDef."""

    def __init__(self, sets: Optional[Mapping[SetId, DependencySetDef]] = None, source: Optional[str] = None):
        self._sets: Dict[SetId, DependencySetDef] = dict(sets or {})
        self._source = source

    @property
    def source(self) -> Optional[str]:
        return self._source

    def __getitem__(self, set_id: SetId) -> DependencySetDef:
        return self._sets[set_id]

    def __iter__(self) -> Iterator[SetId]:
        return iter(self._sets)

    def __len__(self) -> int:
        return len(self._sets)

    def __repr__(self) -> str:
        return f"Catalog({len(self._sets)} sets, source={self._source!r})"

    def known_ids(self) -> List[str]:
        """Set ids rendered as sorted strings, for reporting."""
        return sorted(str(set_id) for set_id in self._sets)

    @classmethod
    def layered(cls, primary: Optional["Catalog"], fallback: Optional["Catalog"]) -> "Catalog":
        """Combine two catalogs; entries in ``primary`` win on conflict."""
        sets: Dict[SetId, DependencySetDef] = {}
        if fallback is not None:
            sets.update(fallback.items())
        if primary is not None:
            sets.update(primary.items())
        source = primary.source if primary is not None else None
        if source is None and fallback is not None:
            source = fallback.source
        return cls(sets, source=source)


@dataclass(frozen=True)
class Profile:
    """An independently activatable layer of dependencies and sets."""
    name: str
    dependencies: Tuple[DependencySpec, ...] = ()
    dependency_sets: Tuple[SetId, ...] = ()


@dataclass(frozen=True)
class ProjectDescriptor:
    """A module's build description.

    ``authored`` holds the descriptor as it was written, before any
    dependency set expansion; it is None on an authored descriptor.
    """
    name: str
    version: str
    group: Optional[str] = None
    dependencies: Tuple[DependencySpec, ...] = ()
    dependency_sets: Tuple[SetId, ...] = ()
    profiles: Tuple[Profile, ...] = ()
    root: Optional[str] = None
    authored: Optional["ProjectDescriptor"] = field(default=None, compare=False, repr=False)

    @property
    def identity(self) -> str:
        """Display identity, ``group/name`` or just ``name``."""
        return f"{self.group}/{self.name}" if self.group else self.name

    @property
    def coordinate(self) -> str:
        """Artifact coordinate other modules depend on, ``group:name`` or ``name``."""
        return f"{self.group}:{self.name}" if self.group else self.name

    @property
    def source_view(self) -> "ProjectDescriptor":
        """The pre-set-expansion shape consumed by packaging metadata."""
        return self.authored if self.authored is not None else self

    def profile(self, name: str) -> Optional[Profile]:
        for prof in self.profiles:
            if prof.name == name:
                return prof
        return None

    def profile_names(self) -> List[str]:
        return [prof.name for prof in self.profiles]


@dataclass(frozen=True)
class SetResolution:
    """Outcome of ordering the requested dependency sets."""
    ordered: Tuple[SetId, ...]
    unknown: Tuple[SetId, ...]


@dataclass(frozen=True)
class UnknownSetReport:
    """Structured warning about set ids missing from the catalog."""
    project: str
    context: str
    unknown_ids: Tuple[str, ...]
    known_ids: Tuple[str, ...]


@dataclass
class ContextResolution:
    """Resolution of a single context: the base project or one profile."""
    context: str
    requested: Tuple[SetId, ...]
    ordered: Tuple[SetId, ...] = ()
    unknown: Tuple[SetId, ...] = ()
    dependencies: Tuple[DependencySpec, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MergeResult:
    """Merged project plus per-context detail for reporting."""
    project: ProjectDescriptor
    contexts: List[ContextResolution] = field(default_factory=list)
    effective: Tuple[DependencySpec, ...] = ()
    unknown_reports: List[UnknownSetReport] = field(default_factory=list)
    catalog_available: bool = True

    @property
    def errors(self) -> List[ContextResolution]:
        return [ctx for ctx in self.contexts if ctx.error is not None]

    def context(self, name: str) -> Optional[ContextResolution]:
        for ctx in self.contexts:
            if ctx.context == name:
                return ctx
        return None


# Name of the context holding the project's own (non-profile) configuration.
BASE_CONTEXT = "base"
