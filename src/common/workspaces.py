"""Monorepo workspace root discovery (yarn/npm workspaces, pnpm, lerna)."""

from __future__ import annotations

import fnmatch
import json
import logging
import os
from typing import List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def _read_json(path: str) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Skipping unreadable manifest %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def _workspace_globs(dir_path: str) -> Optional[List[str]]:
    """Return the workspace globs declared in dir_path, or None if it is not a workspace root."""
    manifest = _read_json(os.path.join(dir_path, Constants.PACKAGE_JSON_FILE))
    if manifest is not None and "workspaces" in manifest:
        workspaces = manifest["workspaces"]
        if isinstance(workspaces, dict):
            workspaces = workspaces.get("packages", [])
        if isinstance(workspaces, list):
            return [str(w) for w in workspaces]

    pnpm_path = os.path.join(dir_path, Constants.PNPM_WORKSPACE_FILE)
    if os.path.isfile(pnpm_path):
        try:
            with open(pnpm_path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.debug("Skipping unreadable %s: %s", pnpm_path, e)
            data = {}
        packages = data.get("packages") if isinstance(data, dict) else None
        if isinstance(packages, list):
            return [str(p) for p in packages]

    lerna = _read_json(os.path.join(dir_path, Constants.LERNA_FILE))
    if lerna is not None:
        return [str(p) for p in lerna.get("packages", ["packages/*"])]
    return None


def _matches_pattern(relative: str, pattern: str) -> bool:
    """Match path segments one by one so ``*`` never crosses a ``/``."""
    if "**" in pattern:
        return fnmatch.fnmatch(relative, pattern)
    path_parts = relative.split("/")
    pattern_parts = pattern.split("/")
    if len(path_parts) != len(pattern_parts):
        return False
    return all(fnmatch.fnmatch(p, g) for p, g in zip(path_parts, pattern_parts))


def _matches(relative: str, globs: List[str]) -> bool:
    for pattern in globs:
        pattern = pattern.strip()
        if pattern.startswith("!"):
            continue
        if pattern.startswith("./"):
            pattern = pattern[2:]
        pattern = pattern.rstrip("/")
        if _matches_pattern(relative, pattern):
            return True
    return False


def find_workspaces_root(app_path: str) -> Optional[str]:
    """Find the monorepo root whose workspace globs include app_path.

    Walks from app_path's parent up to the filesystem root.

    Returns:
        Absolute path of the workspace root, or None.
    """
    app_path = os.path.abspath(app_path)
    current = os.path.dirname(app_path)
    while True:
        globs = _workspace_globs(current)
        if globs is not None:
            relative = os.path.relpath(app_path, current).replace(os.sep, "/")
            if _matches(relative, globs):
                logger.debug("Workspace root for %s is %s", app_path, current)
                return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
