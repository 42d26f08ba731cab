"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any

from skelpose.constants import CONFIG_DIR, SKELETON_CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_config(name: str) -> Any:
    """Load a config file from assets/config/."""
    return load_json(CONFIG_DIR / name)


def load_skeleton_config(name: str) -> Any:
    """Load a rig definition from assets/config/skeleton/."""
    return load_json(SKELETON_CONFIG_DIR / name)
