"""Merging of dependency sets into a project's dependency lists.

Each context (the base project, then every active profile in activation
order) is merged independently: the sets it requests are ordered by
`resolve_sets`, their dependencies are appended to the context's own list,
and the result is deduplicated by artifact identity with the first
occurrence winning. Finally every profile's merged list is folded into the
base list to produce the effective dependencies.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from common.errors import CyclicExtendsError
from common.logging_utils import Timer, extra_context, is_debug_enabled

from .models import (
    BASE_CONTEXT,
    ContextResolution,
    DependencySetDef,
    DependencySpec,
    MergeResult,
    Profile,
    ProjectDescriptor,
    SetId,
    UnknownSetReport,
)
from .set_graph import resolve_sets

logger = logging.getLogger(__name__)


def distinct_dependencies(dependencies: Iterable[DependencySpec]) -> Tuple[DependencySpec, ...]:
    """Drop dependencies whose artifact identity already occurred earlier."""
    seen = set()
    result = []
    for dep in dependencies:
        if dep.identity in seen:
            continue
        seen.add(dep.identity)
        result.append(dep)
    return tuple(result)


def apply_sets(
    dependencies: Sequence[DependencySpec],
    ordered_sets: Iterable[SetId],
    catalog: Mapping[SetId, DependencySetDef],
) -> Tuple[DependencySpec, ...]:
    """Append each set's dependencies in order, then deduplicate."""
    merged: List[DependencySpec] = list(dependencies)
    for set_id in ordered_sets:
        merged.extend(catalog[set_id].dependencies)
    return distinct_dependencies(merged)


def select_profiles(project: ProjectDescriptor, active_profiles: Optional[Sequence[str]] = None) -> List[Profile]:
    """Return the active profiles in activation order.

    ``None`` activates every declared profile in declaration order. Names
    the project does not declare are logged and skipped.
    """
    if active_profiles is None:
        return list(project.profiles)
    selected = []
    for name in dict.fromkeys(active_profiles):
        prof = project.profile(name)
        if prof is None:
            logger.warning(
                "Project %s has no profile %s; defined profiles: %s.",
                project.identity,
                name,
                ", ".join(project.profile_names()) or "(none)",
            )
            continue
        selected.append(prof)
    return selected


def _resolve_context(
    project: ProjectDescriptor,
    context: str,
    dependencies: Tuple[DependencySpec, ...],
    requested: Tuple[SetId, ...],
    catalog: Mapping[SetId, DependencySetDef],
) -> ContextResolution:
    resolution = ContextResolution(context=context, requested=requested, dependencies=dependencies)
    if not requested:
        return resolution

    logger.debug(
        "Applying dependency sets %s to project %s (%s).",
        ", ".join(str(s) for s in requested),
        project.identity,
        context,
    )
    try:
        ordered = resolve_sets(catalog, requested)
    except CyclicExtendsError as exc:
        logger.error("Project %s (%s): %s", project.identity, context, exc)
        resolution.error = exc
        return resolution

    resolution.ordered = ordered.ordered
    resolution.unknown = ordered.unknown
    resolution.dependencies = apply_sets(dependencies, ordered.ordered, catalog)
    return resolution


def _known_ids(catalog: Mapping[SetId, DependencySetDef]) -> List[str]:
    return sorted(str(set_id) for set_id in catalog)


def _unknown_report(project, resolution, catalog) -> UnknownSetReport:
    known = _known_ids(catalog)
    report = UnknownSetReport(
        project=project.identity,
        context=resolution.context,
        unknown_ids=tuple(str(s) for s in resolution.unknown),
        known_ids=tuple(known),
    )
    logger.debug(
        "No such shared dependency set(s) %s (project %s, %s); defined sets: %s.",
        ", ".join(report.unknown_ids),
        report.project,
        report.context,
        ", ".join(report.known_ids),
    )
    return report


def requests_any_sets(project: ProjectDescriptor) -> bool:
    """True when the base project or any profile requests a dependency set."""
    source = project.source_view
    return bool(source.dependency_sets) or any(p.dependency_sets for p in source.profiles)


def merge_project(
    project: ProjectDescriptor,
    catalog: Optional[Mapping[SetId, DependencySetDef]],
    active_profiles: Optional[Sequence[str]] = None,
) -> MergeResult:
    """Merge requested dependency sets into a project.

    Args:
        project: Project descriptor; never modified.
        catalog: Catalog of dependency sets, or None when no catalog exists.
        active_profiles: Profile names in activation order; None for all.

    Returns:
        MergeResult whose ``project`` is a new descriptor with merged
        dependency lists and ``authored`` set to the pre-expansion view.
    """
    # Every context starts from the descriptor as authored, never from a
    # previous merge.
    source = project.source_view
    profiles = select_profiles(source, active_profiles)

    if catalog is None:
        contexts = [ContextResolution(BASE_CONTEXT, source.dependency_sets, dependencies=source.dependencies)]
        contexts.extend(
            ContextResolution(p.name, p.dependency_sets, dependencies=p.dependencies) for p in profiles
        )
        effective = distinct_dependencies(
            list(source.dependencies) + [d for p in profiles for d in p.dependencies]
        )
        return MergeResult(project=project, contexts=contexts, effective=effective, catalog_available=False)

    with Timer() as timer:
        contexts = [
            _resolve_context(
                project, BASE_CONTEXT, tuple(source.dependencies), tuple(source.dependency_sets), catalog
            )
        ]
        for prof in profiles:
            contexts.append(
                _resolve_context(
                    project, prof.name, tuple(prof.dependencies), tuple(prof.dependency_sets), catalog
                )
            )

    reports = [_unknown_report(project, ctx, catalog) for ctx in contexts if ctx.unknown]

    base, profile_contexts = contexts[0], contexts[1:]
    merged_profiles = {ctx.context: ctx.dependencies for ctx in profile_contexts}
    new_profiles = tuple(
        dataclasses.replace(p, dependencies=merged_profiles.get(p.name, p.dependencies))
        for p in source.profiles
    )
    effective = distinct_dependencies(
        list(base.dependencies) + [d for ctx in profile_contexts for d in ctx.dependencies]
    )
    # Profiles contribute additively to the base list seen downstream.
    merged = dataclasses.replace(
        project,
        dependencies=effective,
        profiles=new_profiles,
        authored=source,
    )

    if is_debug_enabled(logger):
        logger.debug(
            "Merged dependency sets",
            extra=extra_context(
                event="function_exit",
                component="merger",
                action="merge_project",
                project=project.identity,
                contexts=len(contexts),
                effective=len(effective),
                errors=len([c for c in contexts if c.error is not None]) or None,
                duration_ms=timer.duration_ms(),
            ),
        )
    return MergeResult(project=merged, contexts=contexts, effective=effective, unknown_reports=reports)
