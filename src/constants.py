"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2
    EXIT_WARNINGS = 3


class OutputFormats(Enum):
    """Export formats for resolved dependency lists.

    Args:
        Enum (string): Export formats supported by the program.
    """

    JSON = "json"
    CSV = "csv"


class NodeShapes(Enum):
    """Graphviz shapes used by the dependency visualization."""

    ROOT = "doubleoctagon"
    DEPENDENCY_SET = "trapezium"
    ARTIFACT = "box"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    CATALOG_FILE = "dependencies.yml"
    PROJECT_FILE = "project.yml"
    DEFAULT_VERSION = "0.0.0"
    SUPPORTED_OUTPUTS = [
        OutputFormats.JSON.value,
        OutputFormats.CSV.value,
    ]
    VIZ_OUTPUT_FILE = "target/dependencies.pdf"
    VIZ_FORMAT = "pdf"
    VIZ_FORMATS = ["pdf", "png", "svg", "dot"]
    VIZ_GRAPH_COLOR = "blue"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPSETS_LOG_LEVEL"
    UNKNOWN_REPORT_COLUMNS = 3
