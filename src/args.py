"""Argument parsing functionality for patchres."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="patchres",
        description=(
            "Print the lock file resolution (tarball URL, git ref, local path "
            "or version) of an installed, possibly nested, npm package"
        ),
        add_help=True,
    )

    parser.add_argument("SPECIFIER",
                        help="Package specifier, e.g. lodash, @scope/pkg or outer/@scope/inner",
                        type=str)
    parser.add_argument("-a", "--app-path",
                        dest="APP_PATH",
                        help="Application root directory (default: current directory)",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("-m", "--package-manager",
                        dest="PACKAGE_MANAGER",
                        help="Lock file dialect; detected from lock files when omitted",
                        action="store",
                        type=str,
                        choices=Constants.SUPPORTED_PACKAGE_MANAGERS)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML or JSON config file",
                        action="store",
                        type=str)
    parser.add_argument("--json",
                        dest="JSON",
                        help="Print the resolution and how it was obtained as JSON",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: WARNING)",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
