"""
Installed-state probing — what is already materialised on disk.

    <root>/platforms/<name>/        an installed platform
    <root>/plugins/<id>/plugin.xml  an installed plugin
    <root>/plugins/<platform>.json  a platform's plugin registrations
"""

from __future__ import annotations

import logging
from pathlib import Path

from cordova_sync.core.models.item import DeclaredItem, ItemKind

logger = logging.getLogger(__name__)

PLATFORMS_DIR = "platforms"
PLUGINS_DIR = "plugins"

_IGNORED_PLUGIN_DIRS = {".svn", "CVS"}


def platforms_root(project_root: Path) -> Path:
    return project_root / PLATFORMS_DIR


def plugins_root(project_root: Path) -> Path:
    return project_root / PLUGINS_DIR


def platform_module_name(name: str, prefix: str = "cordova-") -> str:
    """npm package behind a platform name (``ios`` → ``cordova-ios``)."""
    return name if name.startswith(prefix) else f"{prefix}{name}"


def list_platforms(project_root: Path) -> list[str]:
    """Names of the platforms installed under ``platforms/``, sorted."""
    root = platforms_root(project_root)
    if not root.is_dir():
        return []
    return sorted(
        p.name for p in root.iterdir()
        if p.is_dir() and not p.name.startswith(".") and p.name != "www"
    )


def find_plugins(plugins_dir: Path) -> list[str]:
    """Ids of the plugins installed in *plugins_dir*, sorted."""
    if not plugins_dir.is_dir():
        return []
    return sorted(
        p.name for p in plugins_dir.iterdir()
        if p.is_dir()
        and p.name not in _IGNORED_PLUGIN_DIRS
        and not p.name.startswith(".")
    )


def is_platform_installed(project_root: Path, name: str) -> bool:
    return (platforms_root(project_root) / name).exists()


def is_plugin_installed(project_root: Path, plugin_id: str) -> bool:
    return (plugins_root(project_root) / plugin_id).is_dir()


def is_installed(project_root: Path, item: DeclaredItem) -> bool:
    if item.kind is ItemKind.PLATFORM:
        return is_platform_installed(project_root, item.name)
    return is_plugin_installed(project_root, item.name)


def skip_reason(
    project_root: Path,
    item: DeclaredItem,
    targets: list[str] | None = None,
) -> str | None:
    """Why *item* should not be installed, or None if it must be.

    An item is skipped when it is already on disk, or when an explicit
    target list is given and does not name it.
    """
    if is_installed(project_root, item):
        return f"{item.kind.value} already installed"
    if targets and item.name not in targets:
        return "not targeted"
    return None


def pending_items(
    project_root: Path,
    items: list[DeclaredItem],
    targets: list[str] | None = None,
) -> list[DeclaredItem]:
    """Declared items that still need installing, in declaration order."""
    return [i for i in items if skip_reason(project_root, i, targets) is None]


def remove_platform_plugins_json(project_root: Path, platform: str) -> bool:
    """Delete ``plugins/<platform>.json``. Returns whether it existed."""
    path = plugins_root(project_root) / f"{platform}.json"
    if not path.is_file():
        return False
    path.unlink()
    logger.debug("Removed %s", path)
    return True
