"""Result types produced by the lock file resolver."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResolutionOutcome(Enum):
    """Which kind of answer a resolution produced."""
    LOCKED = "locked"
    AMBIGUOUS_FALLBACK = "ambiguous_fallback"
    RANGE_RECONSTRUCTED = "range_reconstructed"
    LOCAL_PATH = "local_path"
    VERSION = "version"
    SPECIFIER = "specifier"


@dataclass(frozen=True)
class WorkspaceResolution:
    """Where a workspace-linked root package lives inside the monorepo.

    ``workspace_path`` is the identity's node_modules path with the root
    package prefix replaced by the workspace folder, e.g.
    ``packages/foo/node_modules/b``.
    """
    root_package_path: str
    workspace_location: str
    workspace_path: str


@dataclass(frozen=True)
class ResolutionResult:
    """Resolution string plus how it was obtained."""
    value: str
    outcome: ResolutionOutcome
    lockfile_path: str
    workspace: Optional[WorkspaceResolution] = None

    @property
    def is_degraded(self) -> bool:
        return self.outcome is ResolutionOutcome.AMBIGUOUS_FALLBACK

    def __str__(self) -> str:
        return self.value
