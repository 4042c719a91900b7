"""Exception hierarchy for dependency-set resolution."""

from __future__ import annotations

from typing import Any, Optional, Sequence


class DepsetsError(Exception):
    """Base class for all errors raised by depsets."""


class CatalogError(DepsetsError):
    """The shared dependency catalog could not be read."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{message} (in `{source}')"
        super().__init__(message)


class MalformedCatalogEntryError(CatalogError):
    """A catalog entry is neither a dependency list nor a map with `dependencies`."""

    def __init__(self, set_id: Any, reason: str, source: Optional[str] = None):
        self.set_id = set_id
        self.reason = reason
        super().__init__(f"Malformed dependency set {set_id}: {reason}", source)


class ProjectDescriptorError(DepsetsError):
    """The project descriptor is missing or invalid."""


class InvalidDependencyError(DepsetsError):
    """A dependency declaration could not be parsed."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        super().__init__(f"Invalid dependency {value!r}: {reason}")


class CyclicExtendsError(DepsetsError):
    """Dependency sets extend one another in a cycle."""

    def __init__(self, cycle: Sequence[Any]):
        self.cycle = tuple(cycle)
        path = " -> ".join(str(set_id) for set_id in self.cycle)
        super().__init__(f"Dependency sets extend each other in a cycle: {path}")


class RenderError(DepsetsError):
    """The dependency graph could not be rendered."""
