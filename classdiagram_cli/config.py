"""Configuration paths and constants for ClassDiagram."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("CLASSDIAGRAM_HOME", str(Path.home() / ".classdiagram"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Every class extends it; an EXTENDS edge to it carries no information.
ROOT_TYPE = "java.lang.Object"
CLASS_SUFFIX = ".class"
SKIP_ENTRIES = {"module-info.class", "package-info.class"}

DEFAULT_DIAGRAM_CONFIG = {
    "ignore": [],
    "show_fields": False,
    "show_methods": False,
    "fully_qualified_names": False,
}
