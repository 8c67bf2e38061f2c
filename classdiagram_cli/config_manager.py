"""Configuration manager for ClassDiagram using TOML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from . import config

logger = logging.getLogger(__name__)


def load_full_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    path = config_file or config.CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}


def load_diagram_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load the ``[diagram]`` section merged over the defaults.

    Returns:
        Dictionary with ``ignore``, ``show_fields``, ``show_methods`` and
        ``fully_qualified_names`` keys.
    """
    merged = dict(config.DEFAULT_DIAGRAM_CONFIG)
    merged["ignore"] = list(merged["ignore"])

    section = load_full_config(config_file).get("diagram", {})
    if not isinstance(section, dict):
        logger.warning("Config section [diagram] is not a table; using defaults")
        return merged

    ignore = section.get("ignore", [])
    if isinstance(ignore, str):
        ignore = [ignore]
    if isinstance(ignore, list) and all(isinstance(p, str) for p in ignore):
        merged["ignore"] = list(ignore)
    else:
        logger.warning("Config key diagram.ignore must be a string or list of strings; ignoring %r", ignore)

    for key in ("show_fields", "show_methods", "fully_qualified_names"):
        if key not in section:
            continue
        if isinstance(section[key], bool):
            merged[key] = section[key]
        else:
            logger.warning("Config key diagram.%s must be true or false; ignoring %r", key, section[key])
    return merged
