"""Read the version of a package installed on disk."""

from __future__ import annotations

import json
import logging
import os

from constants import Constants
from identity.models import PackageIdentity
from resolution.errors import InstalledPackageError

logger = logging.getLogger(__name__)


def get_package_version(package_json_path: str) -> str:
    """Return the ``version`` field of a package.json.

    Raises:
        InstalledPackageError: If the manifest is missing, unreadable or has no version.
    """
    try:
        with open(package_json_path, "r", encoding="utf-8") as fh:
            manifest = json.load(fh)
    except FileNotFoundError as e:
        raise InstalledPackageError(
            f"Can't find installed package manifest at {package_json_path}"
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise InstalledPackageError(f"Could not read {package_json_path}: {e}") from e
    version = manifest.get("version") if isinstance(manifest, dict) else None
    if not version:
        raise InstalledPackageError(f"{package_json_path} has no version field")
    return str(version)


def installed_version(identity: PackageIdentity, app_path: str) -> str:
    """Default installed-version lookup: ``<app_path>/<identity.path>/package.json``."""
    manifest_path = os.path.join(
        os.path.abspath(app_path), identity.path, Constants.PACKAGE_JSON_FILE
    )
    logger.debug("Reading installed version of %s from %s", identity.path_specifier, manifest_path)
    return get_package_version(manifest_path)
