"""CLI configuration: logging setup and runtime overrides of Constants.

Values come from an optional YAML config file and from CLI flags; CLI flags
take the highest precedence.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from common.errors import DepsetsError
from common.logging_utils import configure_logging
from constants import Constants

logger = logging.getLogger(__name__)

# Config file keys and the Constants attribute each one overrides.
_CONFIG_KEYS = {
    "catalog_file": "CATALOG_FILE",
    "project_file": "PROJECT_FILE",
    "default_version": "DEFAULT_VERSION",
    "viz.output": "VIZ_OUTPUT_FILE",
    "viz.format": "VIZ_FORMAT",
    "viz.color": "VIZ_GRAPH_COLOR",
}


class ConfigError(DepsetsError):
    """The configuration file is invalid."""


def setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    # Honor CLI --loglevel via the environment, as configure_logging reads it
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()

    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML file.

    Missing paths are reported and treated as an empty configuration.

    Raises:
        ConfigError: when the file exists but is not a YAML map.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config `{config_path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config `{config_path}' must be a map")
    return data


def _lookup(config: Dict[str, Any], dot_path: str) -> Any:
    current: Any = config
    for part in dot_path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def apply_config_overrides(config: Dict[str, Any], args: Any = None) -> None:
    """Apply config file values, then CLI flags, onto Constants."""
    for key, attr in _CONFIG_KEYS.items():
        value = _lookup(config, key)
        if value is not None:
            setattr(Constants, attr, str(value))
            logger.debug("Config override %s=%s", key, value)

    if args is None:
        return
    if getattr(args, "action", None) == "viz":
        if getattr(args, "OUTPUT", None):
            Constants.VIZ_OUTPUT_FILE = args.OUTPUT
        if getattr(args, "OUTPUT_FORMAT", None):
            Constants.VIZ_FORMAT = args.OUTPUT_FORMAT
