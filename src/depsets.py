"""depsets - Shared dependency sets for multi-module builds

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from cli_config import ConfigError, apply_config_overrides, load_config_file, setup_logging
from common.errors import CatalogError, DepsetsError, ProjectDescriptorError, RenderError
from common.logging_utils import extra_context, is_debug_enabled
from constants import ExitCodes


def run(args):
    """Dispatch to the selected subcommand and return its exit code."""
    if args.action == "viz":
        from cli_viz import run_viz  # pylint: disable=import-outside-toplevel
        return run_viz(args)
    if args.action == "sets":
        from cli_resolve import run_sets  # pylint: disable=import-outside-toplevel
        return run_sets(args)
    from cli_resolve import run_resolve  # pylint: disable=import-outside-toplevel
    return run_resolve(args)


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        apply_config_overrides(load_config_file(getattr(args, "CONFIG", None)), args)
        code = run(args)
    except (CatalogError, ProjectDescriptorError, ConfigError, RenderError) as e:
        logging.error("%s", e)
        code = ExitCodes.FILE_ERROR.value
    except DepsetsError as e:
        logging.error("%s", e)
        code = ExitCodes.RESOLUTION_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action=args.action, outcome=code)
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
