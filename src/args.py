"""Argument parsing functionality for depsets."""

import argparse
from constants import Constants


def _add_common_arguments(parser):
    """Options shared by every subcommand."""
    parser.add_argument("-d", "--directory",
                        dest="DIRECTORY",
                        help="Project directory containing the project descriptor (default: current directory)",
                        action="store", type=str,
                        default=".")
    parser.add_argument("--catalog",
                        dest="CATALOG",
                        help="Path to the shared dependencies catalog (default: search upward for "
                             f"{Constants.CATALOG_FILE})",
                        action="store", type=str)
    parser.add_argument("--no-siblings",
                        dest="NO_SIBLINGS",
                        help="Do not synthesize dependency sets for sibling modules.",
                        action="store_true")
    parser.add_argument("-P", "--profile",
                        dest="PROFILES",
                        help="Activate a profile (repeatable, in activation order; default: all profiles)",
                        action="append", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depsets",
        description=(
            "depsets - Shared dependency sets for multi-module builds"
        ),
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    resolve = subparsers.add_parser(
        "resolve",
        help="Merge the requested dependency sets and print the effective dependencies",
    )
    _add_common_arguments(resolve)
    resolve.add_argument("-o", "--output",
                         dest="OUTPUT",
                         help="Path to output file (JSON or CSV)",
                         action="store",
                         type=str)
    resolve.add_argument("-f", "--format",
                         dest="OUTPUT_FORMAT",
                         help="Output format (json or csv). If not specified, inferred from --output extension; "
                              "defaults to json.",
                         action="store",
                         type=str.lower,
                         choices=Constants.SUPPORTED_OUTPUTS)
    resolve.add_argument("--error-on-warnings",
                         dest="ERROR_ON_WARNINGS",
                         help="Exit with a non-zero status code if unknown dependency sets are requested.",
                         action="store_true")
    resolve.add_argument("-q", "--quiet",
                         dest="QUIET",
                         help="Do not print the dependency list to the console.",
                         action="store_true")

    viz = subparsers.add_parser(
        "viz",
        help="Generate a visualization of the project's dependencies using Graphviz",
    )
    _add_common_arguments(viz)
    viz.add_argument("-o", "--output",
                     dest="OUTPUT",
                     help=f"Path of the rendered graph (default: {Constants.VIZ_OUTPUT_FILE})",
                     action="store",
                     type=str)
    viz.add_argument("-f", "--format",
                     dest="OUTPUT_FORMAT",
                     help=f"Rendered format (default: {Constants.VIZ_FORMAT})",
                     action="store",
                     type=str.lower,
                     choices=Constants.VIZ_FORMATS)
    viz.add_argument("--no-view",
                     dest="NO_VIEW",
                     help="Do not open the generated dependency graph.",
                     action="store_true")
    viz.add_argument("--dot",
                     dest="PRINT_DOT",
                     help="Print the DOT source to stdout instead of rendering a file.",
                     action="store_true")

    sets = subparsers.add_parser(
        "sets",
        help="List the dependency sets defined in the catalog",
    )
    _add_common_arguments(sets)

    return parser.parse_args(argv)
