"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2


class PackageManagers(Enum):
    """Package managers (lock file dialects) supported by the program.

    Args:
        Enum (string): Package managers supported by the program.
    """

    YARN = "yarn"
    NPM = "npm"
    NPM_SHRINKWRAP = "npm-shrinkwrap"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SUPPORTED_PACKAGE_MANAGERS = [
        PackageManagers.YARN.value,
        PackageManagers.NPM.value,
        PackageManagers.NPM_SHRINKWRAP.value,
    ]
    YARN_LOCK_FILE = "yarn.lock"
    PACKAGE_LOCK_FILE = "package-lock.json"
    SHRINKWRAP_FILE = "npm-shrinkwrap.json"
    LOCKFILE_NAMES = {
        PackageManagers.YARN.value: YARN_LOCK_FILE,
        PackageManagers.NPM.value: PACKAGE_LOCK_FILE,
        PackageManagers.NPM_SHRINKWRAP.value: SHRINKWRAP_FILE,
    }
    YARN_V1_MARKER = "yarn lockfile v1"
    PACKAGE_JSON_FILE = "package.json"
    PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"
    LERNA_FILE = "lerna.json"
    NODE_MODULES = "node_modules"

    PATCH_SUFFIX = ".patch"
    DEV_PATCH_SUFFIX = ".dev.patch"
    NESTING_SEPARATOR = "++"
    PART_SEPARATOR = "+"
    VERSION_PATTERN = r"^\d+\.\d+\.\d+.*$"
    SEQUENCE_NUMBER_WIDTH = 3

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ENV_LOG_LEVEL = "PATCHRES_LOG_LEVEL"
    ENV_CONFIG = "PATCHRES_CONFIG"
    DEFAULT_CONFIG_FILES = [".patchres.yml", ".patchres.yaml", ".patchres.json"]
