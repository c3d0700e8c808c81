"""Optional user configuration (YAML or JSON) for the patchres CLI.

Precedence used by the CLI: explicit flag > config file > built-in default.
Config files are looked up in this order:

1. the ``--config`` path,
2. the ``PATCHRES_CONFIG`` environment variable,
3. ``.patchres.yml`` / ``.patchres.yaml`` / ``.patchres.json`` in the app root.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

KNOWN_KEYS = ("package_manager", "log_level")


def _candidate_paths(config_path: Optional[str], app_path: str) -> list[str]:
    if config_path:
        return [config_path]
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        return [env_path]
    return [os.path.join(app_path, name) for name in Constants.DEFAULT_CONFIG_FILES]


def _read_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping", path)
        return {}
    return data


def load_config(config_path: Optional[str] = None, app_path: str = ".") -> Dict[str, Any]:
    """Load the first available config file and return its known keys.

    An explicitly requested file that does not exist is reported and ignored;
    a file that cannot be parsed is reported and ignored as well.
    """
    for path in _candidate_paths(config_path, app_path):
        if not os.path.isfile(path):
            if config_path:
                logger.warning("Config file not found: %s", path)
            continue
        try:
            data = _read_config_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error("Failed to load config %s: %s", path, e)
            return {}
        unknown = sorted(k for k in data if k not in KNOWN_KEYS)
        if unknown:
            logger.warning("Unknown config keys in %s: %s", path, ", ".join(unknown))
        logger.debug("Loaded config from %s", path)
        return {k: data[k] for k in KNOWN_KEYS if k in data}
    return {}
