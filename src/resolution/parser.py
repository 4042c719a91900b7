"""Parsing of dependency declarations into DependencySpec values."""

from typing import Any, Iterable, Optional, Tuple

from common.errors import InvalidDependencyError

from .models import DependencySpec

_ARTIFACT_KEYS = ("artifact", "coordinate", "name")


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule.

    Does not assume ecosystem-specific syntax.
    """
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def _freeze(value: Any) -> Any:
    """Turn YAML lists/maps into hashable tuples so specs stay immutable."""
    if isinstance(value, dict):
        return tuple((str(k), _freeze(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _make_spec(raw: Any, artifact: Any, version: Any, options: Iterable[Tuple[str, Any]]) -> DependencySpec:
    if not isinstance(artifact, str) or not artifact.strip():
        raise InvalidDependencyError(raw, "missing artifact identity")
    if version is None or (isinstance(version, str) and not version.strip()):
        raise InvalidDependencyError(raw, "missing version")
    return DependencySpec(
        artifact=artifact.strip(),
        version=str(version).strip(),
        options=tuple((str(k), _freeze(v)) for k, v in options),
    )


def parse_dependency(value: Any) -> DependencySpec:
    """Parse one dependency declaration.

    Accepted shapes:
      - ``"group:artifact:version"`` or ``"artifact:version"``
      - ``[artifact, version]`` optionally followed by an options map
      - ``{artifact: ..., version: ..., <option>: ...}``
    """
    if isinstance(value, DependencySpec):
        return value
    if isinstance(value, str):
        artifact, version = tokenize_rightmost_colon(value)
        return _make_spec(value, artifact, version, ())
    if isinstance(value, (list, tuple)):
        if len(value) < 2:
            raise InvalidDependencyError(value, "expected [artifact, version]")
        artifact, version, *rest = value
        options = []
        for extra in rest:
            if not isinstance(extra, dict):
                raise InvalidDependencyError(value, "options must be a map")
            options.extend(extra.items())
        return _make_spec(value, artifact, version, options)
    if isinstance(value, dict):
        key = next((k for k in _ARTIFACT_KEYS if k in value), None)
        if key is None:
            raise InvalidDependencyError(value, "missing `artifact' key")
        options = [(k, v) for k, v in value.items() if k not in (key, "version")]
        return _make_spec(value, value[key], value.get("version"), options)
    raise InvalidDependencyError(value, f"unsupported type {type(value).__name__}")


def parse_dependencies(values: Any) -> Tuple[DependencySpec, ...]:
    """Parse a list of dependency declarations, preserving order."""
    if values is None:
        return ()
    if not isinstance(values, (list, tuple)):
        raise InvalidDependencyError(values, "dependencies must be a list")
    return tuple(parse_dependency(v) for v in values)


def _check_set_id(set_id: Any) -> Any:
    # Set ids key the catalog and the resolver's visited set.
    if isinstance(set_id, bool) or not isinstance(set_id, (str, int)):
        raise InvalidDependencyError(set_id, "dependency set ids must be strings or integers")
    return set_id


def parse_set_ids(values: Any) -> Tuple[Any, ...]:
    """Normalize a single set id or a list of them into a tuple.

    Raises:
        InvalidDependencyError: when an id is not a string or an integer.
    """
    if values is None:
        return ()
    if isinstance(values, (list, tuple)):
        return tuple(_check_set_id(v) for v in values)
    return (_check_set_id(values),)
