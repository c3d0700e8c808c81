"""Detect which package manager dialect an app uses from its lock files."""

from __future__ import annotations

import logging
import os
from typing import Optional

from common.workspaces import find_workspaces_root
from constants import Constants, PackageManagers
from resolution.errors import LockFileNotFoundError

logger = logging.getLogger(__name__)


def _detect_in(dir_path: str) -> Optional[str]:
    package_lock = os.path.isfile(os.path.join(dir_path, Constants.PACKAGE_LOCK_FILE))
    shrinkwrap = os.path.isfile(os.path.join(dir_path, Constants.SHRINKWRAP_FILE))
    yarn_lock = os.path.isfile(os.path.join(dir_path, Constants.YARN_LOCK_FILE))

    npm_dialect = None
    if shrinkwrap:
        npm_dialect = PackageManagers.NPM_SHRINKWRAP.value
    elif package_lock:
        npm_dialect = PackageManagers.NPM.value

    if npm_dialect and yarn_lock:
        logger.warning(
            "Found both %s and an npm lock file in %s; using %s. "
            "Pass --package-manager yarn to use %s instead.",
            Constants.YARN_LOCK_FILE,
            dir_path,
            npm_dialect,
            Constants.YARN_LOCK_FILE,
        )
        return npm_dialect
    if npm_dialect:
        return npm_dialect
    if yarn_lock:
        return PackageManagers.YARN.value
    return None


def detect_package_manager(app_path: str, override: Optional[str] = None) -> str:
    """Return the dialect tag (yarn, npm or npm-shrinkwrap) for app_path.

    An explicit override always wins. Otherwise lock files at the app root are
    inspected, then those at the workspace root.

    Raises:
        LockFileNotFoundError: If no lock file is found.
    """
    if override:
        if override not in Constants.SUPPORTED_PACKAGE_MANAGERS:
            raise ValueError(f"Unsupported package manager {override!r}")
        return override

    dialect = _detect_in(app_path)
    if dialect is None:
        workspace_root = find_workspaces_root(app_path)
        if workspace_root is not None:
            dialect = _detect_in(workspace_root)
    if dialect is None:
        raise LockFileNotFoundError(
            f"No package lock file found in {os.path.abspath(app_path)}. Expected one of "
            f"{Constants.PACKAGE_LOCK_FILE}, {Constants.SHRINKWRAP_FILE} or {Constants.YARN_LOCK_FILE}."
        )
    logger.debug("Detected package manager %s for %s", dialect, app_path)
    return dialect
