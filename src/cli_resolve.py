"""CLI entry point for resolving a project's dependency sets."""

from __future__ import annotations

import csv
import json
import logging
import os
import sys
from typing import Any, List, Optional, Tuple

from catalog import CatalogCache, load_catalog
from common.errors import ProjectDescriptorError
from constants import Constants, ExitCodes, OutputFormats
from descriptor.loader import dependency_to_dict, find_project_file, project_to_dict, read_project_file
from resolution.merger import merge_project, requests_any_sets
from resolution.models import Catalog, MergeResult, ProjectDescriptor, UnknownSetReport

logger = logging.getLogger(__name__)


def load_project_and_catalog(args: Any, cache: CatalogCache) -> Tuple[ProjectDescriptor, Optional[Catalog]]:
    """Read the project descriptor and the catalog visible to it.

    Raises:
        ProjectDescriptorError: when no descriptor exists in the directory.
        CatalogError: when the catalog file is invalid.
    """
    directory = getattr(args, "DIRECTORY", None) or "."
    path = find_project_file(directory, Constants.PROJECT_FILE)
    if path is None:
        raise ProjectDescriptorError(
            f"No {Constants.PROJECT_FILE} found in directory `{os.path.abspath(directory)}'"
        )
    project = read_project_file(path)
    catalog = load_catalog(
        project,
        cache,
        catalog_path=getattr(args, "CATALOG", None),
        include_siblings=not getattr(args, "NO_SIBLINGS", False),
    )
    if catalog is None:
        logger.warning("Project %s will be used without shared dependency sets.", project.identity)
    if not requests_any_sets(project) and cache.notify_once(("no-sets", project.identity)):
        logger.warning(
            "Project %s should specify a list of dependency sets in its `dependency_sets' key.",
            project.identity,
        )
    return project, catalog


def format_unknown_report(report: UnknownSetReport, columns: int = Constants.UNKNOWN_REPORT_COLUMNS) -> str:
    """Human-readable rendering of an unknown-set report, known ids in columns."""
    lines = [
        f"Project {report.project} ({report.context}) requests unknown dependency set(s): "
        + ", ".join(report.unknown_ids)
    ]
    if not report.known_ids:
        lines.append("No dependency sets are defined.")
        return "\n".join(lines)
    lines.append("Defined dependency sets:")
    width = max(len(set_id) for set_id in report.known_ids) + 2
    known = list(report.known_ids)
    for start in range(0, len(known), columns):
        row = known[start:start + columns]
        lines.append("  " + "".join(set_id.ljust(width) for set_id in row).rstrip())
    return "\n".join(lines)


def _result_rows(result: MergeResult) -> List[List[str]]:
    rows = []
    for ctx in result.contexts:
        for dep in ctx.dependencies:
            rows.append([ctx.context, dep.artifact, dep.version])
    for dep in result.effective:
        rows.append(["effective", dep.artifact, dep.version])
    return rows


def export_csv(result: MergeResult, path: str) -> None:
    """Exports the merged dependencies to a CSV file.

    Args:
        result: Merge result to export.
        path: File path to export the CSV.
    """
    rows = [["Context", "Artifact", "Version"]] + _result_rows(result)
    with open(path, "w", newline="", encoding="utf-8") as file:
        csv.writer(file).writerows(rows)
    logging.info("CSV file has been successfully exported at: %s", path)


def export_json(result: MergeResult, path: str) -> None:
    """Exports the merged project to a JSON file.

    Args:
        result: Merge result to export.
        path: File path to export the JSON.
    """
    data = {
        "project": project_to_dict(result.project),
        "authored": project_to_dict(result.project.source_view),
        "effective": [dependency_to_dict(d) for d in result.effective],
        "contexts": [
            {
                "context": ctx.context,
                "requested": [str(s) for s in ctx.requested],
                "ordered": [str(s) for s in ctx.ordered],
                "unknown": [str(s) for s in ctx.unknown],
                "error": str(ctx.error) if ctx.error is not None else None,
            }
            for ctx in result.contexts
        ],
        "catalog_available": result.catalog_available,
    }
    with open(path, "w", encoding="utf-8") as file:
        json.dump(data, file, ensure_ascii=False, indent=4)
    logging.info("JSON file has been successfully exported at: %s", path)


def _output_format(args: Any) -> str:
    fmt = getattr(args, "OUTPUT_FORMAT", None)
    if fmt:
        return fmt.lower()
    if args.OUTPUT.lower().endswith(".csv"):
        return OutputFormats.CSV.value
    return OutputFormats.JSON.value


def run_resolve(args: Any, cache: Optional[CatalogCache] = None) -> int:
    """Entry point for the resolve command; returns an exit code.

    Raises:
        DepsetsError: on unreadable descriptors or catalogs.
    """
    cache = cache or CatalogCache()
    project, catalog = load_project_and_catalog(args, cache)
    result = merge_project(project, catalog, getattr(args, "PROFILES", None))

    for report in result.unknown_reports:
        sys.stderr.write(format_unknown_report(report) + "\n")

    if not getattr(args, "QUIET", False):
        for dep in result.effective:
            print(f"{dep.artifact} {dep.version}")

    output = getattr(args, "OUTPUT", None)
    if output:
        try:
            if _output_format(args) == OutputFormats.CSV.value:
                export_csv(result, output)
            else:
                export_json(result, output)
        except OSError as e:
            logging.error("Output file couldn't be written to disk: %s", e)
            return ExitCodes.FILE_ERROR.value

    if result.errors:
        for ctx in result.errors:
            logging.error("Dependency sets for %s (%s) could not be resolved: %s",
                          project.identity, ctx.context, ctx.error)
        return ExitCodes.RESOLUTION_ERROR.value
    if result.unknown_reports and getattr(args, "ERROR_ON_WARNINGS", False):
        logging.error("Warnings present, exiting with non-zero status code.")
        return ExitCodes.EXIT_WARNINGS.value
    return ExitCodes.SUCCESS.value


def run_sets(args: Any, cache: Optional[CatalogCache] = None) -> int:
    """Entry point for the sets command: list catalog entries."""
    cache = cache or CatalogCache()
    _, catalog = load_project_and_catalog(args, cache)
    if not catalog:
        print("No dependency sets are defined.")
        return ExitCodes.SUCCESS.value
    for set_id in sorted(catalog, key=str):
        definition = catalog[set_id]
        extends = ", ".join(str(s) for s in definition.extends)
        line = f"{set_id}: {len(definition.dependencies)} dependencies"
        if extends:
            line += f" (extends {extends})"
        print(line)
    return ExitCodes.SUCCESS.value
