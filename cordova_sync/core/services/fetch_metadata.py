"""
Fetch metadata — the ``plugins/fetch.json`` ledger.

Records where each plugin was fetched from:

    {
        "cordova-plugin-camera": {
            "source": {"type": "registry", "id": "cordova-plugin-camera@~6.0.0"},
            "is_top_level": true,
            "variables": {}
        }
    }
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from cordova_sync.core.persistence.json_file import read_json, write_json_atomic

logger = logging.getLogger(__name__)

FETCH_FILE = "fetch.json"


def load_fetch_metadata(plugins_dir: Path) -> dict[str, Any]:
    data = read_json(plugins_dir / FETCH_FILE, default={})
    return data if isinstance(data, dict) else {}


def save_fetch_metadata(plugins_dir: Path, data: dict[str, Any]) -> None:
    write_json_atomic(plugins_dir / FETCH_FILE, data, indent=2)


def get_fetch_metadata(plugins_dir: Path, plugin_id: str) -> dict[str, Any]:
    return load_fetch_metadata(plugins_dir).get(plugin_id) or {}


def remove_fetch_metadata(plugins_dir: Path, plugin_id: str) -> bool:
    """Drop *plugin_id* from the ledger. Returns whether an entry was removed."""
    data = load_fetch_metadata(plugins_dir)
    if plugin_id not in data:
        return False
    del data[plugin_id]
    save_fetch_metadata(plugins_dir, data)
    logger.debug("Removed %s from %s", plugin_id, plugins_dir / FETCH_FILE)
    return True
