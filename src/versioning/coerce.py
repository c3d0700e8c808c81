"""Loose semantic version coercion for comparing lock file and manifest versions."""

import re
from typing import Optional

import semantic_version

_LOOSE_VERSION = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_semver(text: Optional[str]) -> Optional[str]:
    """Coerce an arbitrary version-like string into ``major.minor.patch``.

    The first numeric run is used; missing minor/patch default to 0 and any
    prerelease or build suffix is dropped, e.g. ``v1.2`` -> ``1.2.0`` and
    ``1.2.3-beta.1`` -> ``1.2.3``.

    Returns:
        Normalized version string, or None when nothing version-like is found.
    """
    if not text:
        return None
    match = _LOOSE_VERSION.search(str(text))
    if match is None:
        return None
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return str(semantic_version.Version(major=major, minor=minor, patch=patch))
