"""Resolution against yarn.lock (classic v1 and berry share this lookup)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Tuple

from identity.models import PackageIdentity
from lockfiles.loader import LockFile
from versioning.coerce import coerce_semver

from .errors import IncompleteEntryError, VersionMismatchError
from .models import ResolutionOutcome, ResolutionResult

logger = logging.getLogger(__name__)

LOCAL_FILE_PREFIX = "file:"


def _same_version(recorded: Any, installed: str) -> bool:
    if recorded is None:
        return False
    recorded = str(recorded)
    coerced_installed = coerce_semver(installed)
    if coerced_installed is None:
        return recorded == installed
    return coerce_semver(recorded) == coerced_installed


def matching_entries(
    data: Dict[str, Any], name: str, installed_version: str
) -> List[Tuple[str, Dict[str, Any]]]:
    """Return (key, entry) pairs for name whose recorded version is the installed one."""
    prefix = f"{name}@"
    return [
        (key, entry)
        for key, entry in data.items()
        if isinstance(key, str)
        and key.startswith(prefix)
        and isinstance(entry, dict)
        and _same_version(entry.get("version"), installed_version)
    ]


def reconstruct_specifiers(key: str, name: str) -> str:
    """Turn a lock file key into its space-separated specifiers.

    ``pkg@npm:^1.0.0, pkg@npm:^1.2.0`` -> ``^1.0.0 ^1.2.0``
    """
    return key.replace(f"{name}@", "").replace("npm:", "").replace(",", "").strip()


def resolve_yarn(
    identity: PackageIdentity,
    lockfile: LockFile,
    app_path: str,
    installed_version: str,
) -> ResolutionResult:
    """Find the resolution of identity's installed version in a parsed yarn.lock.

    Raises:
        VersionMismatchError: If no entry records the installed version.
        IncompleteEntryError: If the matching entry yields no usable specifier.
    """
    entries = matching_entries(lockfile.data, identity.name, installed_version)
    if not entries:
        raise VersionMismatchError(
            f"`{identity.path_specifier}`'s installed version is {installed_version} "
            "but a lockfile entry for it couldn't be found. Your lockfile is likely "
            "to be corrupt or you forgot to reinstall your packages."
        )

    resolutions = sorted({str(entry["resolved"]) for _, entry in entries if entry.get("resolved")})
    if len(resolutions) > 1:
        logger.warning(
            "Ambiguous lockfile entries for %s. Using version %s",
            identity.path_specifier,
            installed_version,
        )
        logger.debug("Candidate resolutions for %s: %s", identity.path_specifier, resolutions)
        return ResolutionResult(
            value=installed_version,
            outcome=ResolutionOutcome.AMBIGUOUS_FALLBACK,
            lockfile_path=lockfile.path,
        )
    if resolutions:
        return ResolutionResult(
            value=resolutions[0],
            outcome=ResolutionOutcome.LOCKED,
            lockfile_path=lockfile.path,
        )

    key, entry = entries[0]
    specifiers = reconstruct_specifiers(key, identity.name)
    if not specifiers:
        raise IncompleteEntryError(
            f"Lockfile entry {key!r} for {identity.path_specifier} has no resolution or specifier"
        )

    if specifiers.startswith(LOCAL_FILE_PREFIX + "."):
        # berry appends "::locator=..." to file: specifiers
        relative = specifiers[len(LOCAL_FILE_PREFIX):].split("::", 1)[0]
        return ResolutionResult(
            value=LOCAL_FILE_PREFIX + os.path.abspath(os.path.join(app_path, relative)),
            outcome=ResolutionOutcome.LOCAL_PATH,
            lockfile_path=lockfile.path,
        )

    # pin the recorded version so a loose range can't drift to a newer release
    recorded = entry.get("version")
    value = f"{specifiers} {recorded}" if recorded else specifiers
    return ResolutionResult(
        value=value,
        outcome=ResolutionOutcome.RANGE_RECONSTRUCTED,
        lockfile_path=lockfile.path,
    )
