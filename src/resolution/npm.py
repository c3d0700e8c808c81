"""Resolution against package-lock.json / npm-shrinkwrap.json.

Two independent views of the same install are consulted:

* the legacy ``dependencies`` tree (lockfileVersion 1 and 2), nested per
  requester, and
* the flat ``packages`` map (lockfileVersion 2 and 3), keyed by the
  node_modules path of each installed copy.

Scopes are scanned nearest ancestor first so a copy pinned next to its
requester shadows one hoisted to the install root.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from identity.models import PackageIdentity
from lockfiles.loader import LockFile

from .errors import EntryNotFoundError, IncompleteEntryError
from .models import ResolutionOutcome, ResolutionResult, WorkspaceResolution

logger = logging.getLogger(__name__)

Scope = Dict[str, Any]
Strategy = Callable[[Scope, PackageIdentity, Optional[WorkspaceResolution]], Optional[Any]]


def legacy_scopes(lockfile_data: Scope, identity: PackageIdentity) -> List[Scope]:
    """Return the document root plus each ancestor found in the legacy tree, root first.

    Descent stops at the first ancestor the tree does not list.
    """
    scopes = [lockfile_data]
    node = lockfile_data
    for name in identity.package_names[:-1]:
        dependencies = node.get("dependencies")
        if not isinstance(dependencies, dict) or not isinstance(dependencies.get(name), dict):
            break
        node = dependencies[name]
        scopes.append(node)
    return scopes


def find_workspace(lockfile_data: Scope, identity: PackageIdentity) -> Optional[WorkspaceResolution]:
    """Detect a root package that is a linked workspace member."""
    packages = lockfile_data.get("packages")
    if not isinstance(packages, dict):
        return None
    root_path = identity.root_package_path
    entry = packages.get(root_path)
    if not isinstance(entry, dict) or not entry.get("link"):
        return None
    location = entry.get("resolved")
    if not location:
        return None
    return WorkspaceResolution(
        root_package_path=root_path,
        workspace_location=location,
        workspace_path=location + identity.path[len(root_path):],
    )


def _flat_entry(scope: Scope, identity: PackageIdentity, workspace: Optional[WorkspaceResolution]):
    packages = scope.get("packages")
    if not isinstance(packages, dict):
        return None
    if identity.path in packages:
        return packages[identity.path]
    if workspace is not None and workspace.workspace_path in packages:
        return packages[workspace.workspace_path]
    return None


def _legacy_entry(scope: Scope, identity: PackageIdentity, workspace: Optional[WorkspaceResolution]):
    dependencies = scope.get("dependencies")
    if not isinstance(dependencies, dict):
        return None
    return dependencies.get(identity.name)


STRATEGIES: List[Strategy] = [_flat_entry, _legacy_entry]


def find_entry(
    scopes: List[Scope],
    identity: PackageIdentity,
    workspace: Optional[WorkspaceResolution],
) -> Any:
    """Return the entry from the nearest scope that lists identity.

    Raises:
        EntryNotFoundError: If no scope lists it.
    """
    for depth, scope in reversed(list(enumerate(scopes))):
        for strategy in STRATEGIES:
            entry = strategy(scope, identity, workspace)
            if entry is not None:
                logger.debug(
                    "Found %s at scope depth %d via %s",
                    identity.path_specifier,
                    depth,
                    strategy.__name__.strip("_"),
                )
                return entry
    raise EntryNotFoundError(
        f"Cannot find {identity.human_readable_path_specifier} in the dependencies "
        "or packages of the lockfile"
    )


def resolve_npm(identity: PackageIdentity, lockfile: LockFile) -> ResolutionResult:
    """Find the resolution of identity in a parsed npm lock file.

    Raises:
        EntryNotFoundError: If neither lock file view lists the package.
        IncompleteEntryError: If the entry has no resolved, version or from field.
    """
    data = lockfile.data
    scopes = legacy_scopes(data, identity)
    workspace = find_workspace(data, identity)
    if workspace is not None:
        logger.debug(
            "%s is a workspace package at %s",
            identity.package_names[0],
            workspace.workspace_location,
        )
    entry = find_entry(scopes, identity, workspace)
    if not isinstance(entry, dict):
        raise IncompleteEntryError(
            f"Lockfile entry for {identity.human_readable_path_specifier} is not an object"
        )

    for field_name, outcome in (
        ("resolved", ResolutionOutcome.LOCKED),
        ("version", ResolutionOutcome.VERSION),
        ("from", ResolutionOutcome.SPECIFIER),
    ):
        value = entry.get(field_name)
        if value:
            return ResolutionResult(
                value=str(value),
                outcome=outcome,
                lockfile_path=lockfile.path,
                workspace=workspace,
            )
    raise IncompleteEntryError(
        f"Lockfile entry for {identity.human_readable_path_specifier} has no "
        "resolved, version or from field"
    )
