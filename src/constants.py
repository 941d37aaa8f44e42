"""Constants used in the project."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
    ENV_LOG_LEVEL = "VERSIONSPEC_LOG_LEVEL"
    DEFAULT_LOG_LEVEL = "INFO"
    CONFIG_FILE_ENV = "VERSIONSPEC_CONFIG"

    # Characters that make a constraint compound (or a regex) and route it
    # through the tree builder before leaf classification.
    GROUPING_CHARS = "()|,"
    REGEX_ANCHORS = "^$"
    OPERATOR_START = frozenset("=<>!~")

    # Interning registry for parsed constraints
    INTERN_ENABLED = True


_CONFIG_KEYS = {
    "log_level": ("DEFAULT_LOG_LEVEL", str),
    "intern_enabled": ("INTERN_ENABLED", bool),
}


def _load_yaml_config(path: str) -> Dict[str, Any]:
    """Read a YAML mapping from ``path``.

    Returns an empty dict when the file does not exist.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    if not os.path.isfile(path):
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid YAML in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Apply overrides from a YAML config file onto ``Constants``.

    Args:
        path: Config file path. Falls back to the file named by the
            VERSIONSPEC_CONFIG environment variable.

    Returns:
        Dict of the applied overrides keyed by Constants attribute name.
    """
    path = path or os.environ.get(Constants.CONFIG_FILE_ENV)
    if not path:
        return {}
    data = _load_yaml_config(path)
    applied: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in _CONFIG_KEYS:
            logger.warning("Ignoring unknown config key '%s' in %s", key, path)
            continue
        attr, expected = _CONFIG_KEYS[key]
        if not isinstance(value, expected):
            raise ValueError(
                f"config key '{key}' must be of type {expected.__name__}, got {type(value).__name__}"
            )
        setattr(Constants, attr, value)
        applied[attr] = value
    return applied
