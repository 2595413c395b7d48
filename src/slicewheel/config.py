"""
Global Configuration and Defaults.

This module centralizes the constants shared by the storage layer, the
layout engine and the CLI, and loads the optional per-project
`.slicewheel/config.yaml` file.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

# --- Medium Keys ---
# Same keys as the browser app, so its backups import cleanly
SLICES_KEY = "awr-slices"
TEMPLATES_KEY = "awr-templates"
USERS_KEY = "awr-users"

BACKUP_FILE_NAME = "autism-wheel-backup.json"

# --- Storage ---
CONFIG_DIR_NAME = ".slicewheel"
CONFIG_FILE_NAME = "config.yaml"
DEFAULT_DB_PATH = Path(CONFIG_DIR_NAME) / "slicewheel.db"

# Browsers cap local storage at roughly 5MB per origin
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

# --- Grades ---
MIN_GRADE = 0
MAX_GRADE = 10
DEFAULT_GRADE = 0

# A slice or template shown on its own is drawn fully graded
PREVIEW_GRADE = MAX_GRADE

# --- Rendering ---
AVATAR_SIZE = 50
EXPORT_IMAGE_SIZE = 1024

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0",
    "project_name": "my-wheels",
    "storage": {
        "db_path": str(DEFAULT_DB_PATH),
        "quota_bytes": DEFAULT_QUOTA_BYTES,
    },
    "render": {
        "size": EXPORT_IMAGE_SIZE,
        "size_kind": "view",
    },
    "defaults": {
        "grade": DEFAULT_GRADE,
    },
}


def config_path(root_dir: Path) -> Path:
    """Location of the project config file under a root directory."""
    return root_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(root_dir: Path) -> Dict[str, Any]:
    """
    Load the project configuration, merged over DEFAULT_CONFIG.

    A missing file yields the defaults. An unreadable or non-mapping file
    is logged and ignored.

    Args:
        root_dir: Directory containing the `.slicewheel/` folder.

    Returns:
        The effective configuration dictionary.
    """
    path = config_path(root_dir)
    if not path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: expected a mapping")
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, data)
