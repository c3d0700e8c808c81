"""Entry point of the lock file resolver."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import PackageManagers
from identity.models import PackageIdentity
from lockfiles.loader import load_lockfile
from versioning.installed import installed_version

from .models import ResolutionResult
from .npm import resolve_npm
from .yarn import resolve_yarn

logger = logging.getLogger(__name__)

InstalledVersionLookup = Callable[[PackageIdentity, str], str]


def resolve(
    identity: PackageIdentity,
    dialect: str,
    app_path: str,
    installed_version_lookup: Optional[InstalledVersionLookup] = None,
) -> ResolutionResult:
    """Resolve identity to the exact content reference recorded in the lock file.

    Args:
        identity: Package to resolve, possibly nested.
        dialect: One of ``yarn``, ``npm`` or ``npm-shrinkwrap``.
        app_path: Application root directory.
        installed_version_lookup: Returns the installed version of identity;
            defaults to reading its package.json under app_path. Only the yarn
            dialect needs it.

    Returns:
        ResolutionResult whose ``value`` is the resolution string.

    Raises:
        ResolutionError: Subclass describing why no resolution was found.
    """
    lockfile = load_lockfile(dialect, app_path)
    if dialect == PackageManagers.YARN.value:
        lookup = installed_version_lookup or installed_version
        result = resolve_yarn(identity, lockfile, app_path, lookup(identity, app_path))
    else:
        result = resolve_npm(identity, lockfile)

    if is_debug_enabled(logger):
        logger.debug(
            "Package resolved",
            extra=extra_context(
                event="resolution",
                component="resolver",
                action="resolve",
                outcome=result.outcome.value,
                target=identity.path_specifier,
                dialect=dialect,
                lockfile=lockfile.path,
            )
        )
    return result


def get_package_resolution(
    identity: PackageIdentity,
    dialect: str,
    app_path: str,
    installed_version_lookup: Optional[InstalledVersionLookup] = None,
) -> str:
    """Return only the resolution string for identity."""
    return resolve(identity, dialect, app_path, installed_version_lookup).value
