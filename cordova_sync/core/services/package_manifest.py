"""
Package manifest — staged read/update/save of ``package.json``.

Updates are buffered in an in-memory working copy and committed by a
single terminal ``save()``. The ``dirty`` flag tells whether the working
copy differs from what was loaded, which is how callers decide whether
a save is needed at all.

``update()`` overlays per top-level key. It is NOT an element-wise merge:
to change ``cordova.platforms`` the caller passes the complete
``cordova`` section with the complete list.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

from cordova_sync.core.config.loader import MANIFEST_FILE
from cordova_sync.core.errors import ConfigError
from cordova_sync.core.persistence.json_file import read_json, write_json_atomic

logger = logging.getLogger(__name__)

CORDOVA_KEY = "cordova"


class PackageManifest:
    """The JSON-backed config store."""

    def __init__(self, path: Path, content: dict[str, Any]):
        self._path = path
        self._content = content
        self._dirty = False
        self._ensure_cordova_section()

    # ── Loading ─────────────────────────────────────────────────

    @classmethod
    def load(cls, project_root: Path) -> PackageManifest:
        """Load ``<root>/package.json``; a missing file yields an empty document.

        Raises:
            ConfigError: If the file is not a JSON object.
        """
        path = project_root / MANIFEST_FILE
        data = read_json(path, default={})
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
        logger.debug("Loaded package manifest %s", path)
        return cls(path, data)

    def _ensure_cordova_section(self) -> None:
        # Defaults live in memory only; they alone never require a save.
        section = self._content.get(CORDOVA_KEY)
        if not isinstance(section, dict):
            section = {}
        section = dict(section)
        if not isinstance(section.get("platforms"), list):
            section["platforms"] = []
        if not isinstance(section.get("plugins"), dict):
            section["plugins"] = {}
        self._content[CORDOVA_KEY] = section

    # ── Views ───────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return self._path

    @property
    def dirty(self) -> bool:
        """Whether the working copy has updates not yet saved."""
        return self._dirty

    @property
    def content(self) -> dict[str, Any]:
        """A deep copy of the working copy. Mutate through ``update()``."""
        return copy.deepcopy(self._content)

    @property
    def platforms(self) -> list[str]:
        return list(self._content[CORDOVA_KEY]["platforms"])

    @property
    def plugins(self) -> dict[str, dict[str, str]]:
        return {
            plugin_id: dict(variables or {})
            for plugin_id, variables in self._content[CORDOVA_KEY]["plugins"].items()
        }

    @property
    def specs(self) -> dict[str, str]:
        """``dependencies`` overlaid by ``devDependencies``."""
        merged: dict[str, str] = {}
        merged.update(self._content.get("dependencies") or {})
        merged.update(self._content.get("devDependencies") or {})
        return merged

    # ── Staged mutation ─────────────────────────────────────────

    def update(self, partial: dict[str, Any]) -> bool:
        """Overlay *partial* onto the working copy, one top-level key at a time.

        Returns:
            True if any value actually changed.
        """
        changed = False
        for key, value in partial.items():
            if self._content.get(key) != value:
                self._content[key] = copy.deepcopy(value)
                changed = True
        if changed:
            self._dirty = True
            if CORDOVA_KEY in partial:
                self._ensure_cordova_section()
        return changed

    def add_platform(self, name: str) -> bool:
        if name in self.platforms:
            return False
        section = self.content[CORDOVA_KEY]
        section["platforms"] = [*section["platforms"], name]
        return self.update({CORDOVA_KEY: section})

    def remove_platforms(self, names: list[str]) -> bool:
        section = self.content[CORDOVA_KEY]
        section["platforms"] = [p for p in section["platforms"] if p not in names]
        return self.update({CORDOVA_KEY: section})

    def set_plugin(self, plugin_id: str, variables: dict[str, str] | None = None) -> bool:
        section = self.content[CORDOVA_KEY]
        section["plugins"] = {**section["plugins"], plugin_id: dict(variables or {})}
        return self.update({CORDOVA_KEY: section})

    def remove_plugin(self, plugin_id: str) -> bool:
        section = self.content[CORDOVA_KEY]
        if plugin_id not in section["plugins"]:
            return False
        section["plugins"] = {k: v for k, v in section["plugins"].items() if k != plugin_id}
        return self.update({CORDOVA_KEY: section})

    def add_dev_dependency(self, name: str, spec: str) -> bool:
        dev = dict(self._content.get("devDependencies") or {})
        dev[name] = spec
        return self.update({"devDependencies": dev})

    # ── Commit ──────────────────────────────────────────────────

    def save(self, force: bool = False) -> bool:
        """Write the working copy to disk.

        A clean working copy is not rewritten unless *force* is set.

        Returns:
            True if the file was written.

        Raises:
            PersistenceError: If the write fails.
        """
        if not self._dirty and not force:
            logger.debug("Package manifest %s unchanged — not rewriting", self._path)
            return False

        write_json_atomic(self._path, self._content, indent=2)
        self._dirty = False
        logger.debug("Saved package manifest %s", self._path)
        return True
