"""patchres - print the lock file resolution of an installed npm package.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from args import parse_args
from common.config import load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from identity.parser import parse_cli_specifier
from lockfiles.detect import detect_package_manager
from resolution.errors import ResolutionError
from resolution.service import resolve

logger = logging.getLogger(__name__)


def setup_logging(level_name, log_file=None):
    """Configure console logging and an optional log file."""
    os.environ[Constants.ENV_LOG_LEVEL] = str(level_name).upper()
    configure_logging()
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def render(identity, dialect, result, as_json=False):
    """Format a resolution result for stdout."""
    if not as_json:
        return result.value
    return json.dumps({
        "package": identity.path_specifier,
        "package_manager": dialect,
        "resolution": result.value,
        "outcome": result.outcome.value,
        "lockfile": result.lockfile_path,
        "workspace_path": result.workspace.workspace_path if result.workspace else None,
    }, indent=2)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    app_path = os.path.abspath(args.APP_PATH)
    config = load_config(args.CONFIG, app_path)
    setup_logging(args.LOG_LEVEL or config.get("log_level") or "WARNING", args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main",
                                target=args.SPECIFIER)
        )

    identity = parse_cli_specifier(args.SPECIFIER)
    if identity is None:
        print(f"Can't find package {args.SPECIFIER}")
        return ExitCodes.FILE_ERROR.value

    try:
        dialect = detect_package_manager(
            app_path, args.PACKAGE_MANAGER or config.get("package_manager")
        )
        result = resolve(identity, dialect, app_path)
    except ResolutionError as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return ExitCodes.USAGE_ERROR.value

    print(render(identity, dialect, result, args.JSON))
    return ExitCodes.SUCCESS.value


def cli():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
