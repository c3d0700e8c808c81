"""Locate, read and parse the lock file of a given package manager dialect.

The parsed view is rebuilt from disk on every call; nothing is cached.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml
from yarnlock import yarnlock_parse

from common.logging_utils import extra_context, is_debug_enabled, Timer
from common.workspaces import find_workspaces_root
from constants import Constants, PackageManagers
from resolution.errors import LockFileNotFoundError, LockFileParseError

logger = logging.getLogger(__name__)

FORMAT_YARN_V1 = "yarn-v1"
FORMAT_YARN_BERRY = "yarn-berry"
FORMAT_NPM = "npm"


@dataclass
class LockFile:
    """Parsed, read-only lock file contents."""
    dialect: str
    path: str
    format: str
    data: Dict[str, Any]


def lockfile_name(dialect: str) -> str:
    """Return the conventional lock file name for a dialect."""
    try:
        return Constants.LOCKFILE_NAMES[dialect]
    except KeyError:
        raise ValueError(
            f"Unsupported package manager {dialect!r}; expected one of "
            f"{', '.join(Constants.SUPPORTED_PACKAGE_MANAGERS)}"
        ) from None


def locate_lockfile(dialect: str, app_path: str) -> str:
    """Find the dialect's lock file at the app root, else at the workspace root.

    Raises:
        LockFileNotFoundError: If neither location has the lock file.
    """
    name = lockfile_name(dialect)
    candidate = os.path.join(app_path, name)
    if os.path.isfile(candidate):
        return candidate

    workspace_root = find_workspaces_root(app_path)
    if workspace_root is None:
        raise LockFileNotFoundError(f"Can't find {name} file")
    candidate = os.path.join(workspace_root, name)
    if not os.path.isfile(candidate):
        raise LockFileNotFoundError(f"Can't find {name} file")
    logger.debug("Using workspace lock file %s", candidate)
    return candidate


def normalize_yarn_v1_entries(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Split merged classic yarn keys into one ``name@range`` key per specifier.

    yarnlock keeps keys as written, e.g.
    ``"@babel/code-frame@^7.0.0", "@babel/code-frame@^7.10.4"``, and adds
    bare package-name aliases. Each specifier becomes its own unquoted key
    sharing the entry; bare-name aliases are dropped.
    """
    entries: Dict[str, Any] = {}
    for raw_key, entry in parsed.items():
        if not isinstance(raw_key, str) or not isinstance(entry, dict):
            continue
        for spec in raw_key.split(","):
            spec = spec.strip().strip('"').strip()
            if "@" not in spec[1:]:
                continue
            entries[spec] = entry
    return entries


def parse_yarn_lockfile(content: str) -> tuple[str, Dict[str, Any]]:
    """Parse yarn.lock contents, classic (v1) or berry (YAML).

    Returns:
        (format, mapping of lock file key -> entry)
    """
    if Constants.YARN_V1_MARKER in content:
        try:
            parsed = yarnlock_parse(content)
        except Exception as e:  # pylint: disable=broad-except
            raise LockFileParseError(f"Could not parse yarn v1 lock file: {e}") from e
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise LockFileParseError("Could not parse yarn v1 lock file: expected a mapping of entries")
        parsed = normalize_yarn_v1_entries(parsed)
        fmt = FORMAT_YARN_V1
    else:
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LockFileParseError(f"Could not parse yarn v2 lock file: {e}") from e
        fmt = FORMAT_YARN_BERRY
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise LockFileParseError("Could not parse yarn lock file: expected a mapping of entries")
    return fmt, parsed


def parse_npm_lockfile(content: str) -> Dict[str, Any]:
    """Parse package-lock.json / npm-shrinkwrap.json contents."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise LockFileParseError(f"Could not parse npm lock file: {e}") from e
    if not isinstance(parsed, dict):
        raise LockFileParseError("Could not parse npm lock file: expected a JSON object")
    return parsed


def load_lockfile(dialect: str, app_path: str) -> LockFile:
    """Locate and parse the lock file for dialect."""
    path = locate_lockfile(dialect, app_path)
    with Timer() as t:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                content = fh.read()
        except UnicodeDecodeError as e:
            raise LockFileParseError(f"Could not read {path}: not valid UTF-8 ({e})") from e
        if dialect == PackageManagers.YARN.value:
            fmt, data = parse_yarn_lockfile(content)
        else:
            fmt, data = FORMAT_NPM, parse_npm_lockfile(content)
    if is_debug_enabled(logger):
        logger.debug(
            "Lock file loaded",
            extra=extra_context(
                event="lockfile_loaded",
                component="lockfile",
                action="load",
                target=path,
                lockfile_format=fmt,
                entry_count=len(data),
                duration_ms=t.duration_ms(),
            )
        )
    return LockFile(dialect=dialect, path=path, format=fmt, data=data)
