"""
Configuration loader — project root discovery and tool settings.

A Cordova project root is the directory holding ``config.xml`` (or
``www/config.xml``). Tool settings live in an optional
``.cordova-sync.yml`` next to it; missing keys take the defaults below.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from cordova_sync.core.errors import ConfigError

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "config.xml"
MANIFEST_FILE = "package.json"
SETTINGS_FILE = ".cordova-sync.yml"


class Settings(BaseModel):
    """Tool settings (``.cordova-sync.yml``)."""

    plugin_prefix: str = "cordova-plugin-"
    platform_prefix: str = "cordova-"
    known_platforms: list[str] = Field(
        default_factory=lambda: ["android", "ios", "browser", "electron", "osx", "windows"],
    )
    searchpath: list[str] = Field(default_factory=list)
    save: bool = True              # default for `rm --save`
    sync_descriptor: bool = True   # back-fill config.xml from package.json
    audit: bool = True
    timeout: int = 600

    cordova_bin: str = "cordova"
    plugman_bin: str = "plugman"
    npm_bin: str = "npm"


def descriptor_path(project_root: Path) -> Path:
    """Path of the project descriptor, preferring ``<root>/config.xml``."""
    root_cfg = project_root / DESCRIPTOR_FILE
    www_cfg = project_root / "www" / DESCRIPTOR_FILE
    if not root_cfg.is_file() and www_cfg.is_file():
        return www_cfg
    return root_cfg


def is_project_root(path: Path) -> bool:
    return (path / DESCRIPTOR_FILE).is_file() or (path / "www" / DESCRIPTOR_FILE).is_file()


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Search for a Cordova project root starting from *start_dir*, walking up.

    Returns:
        The project root, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        if is_project_root(current):
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def require_project_root(start_dir: Path | None = None) -> Path:
    """Like find_project_root, but raise ConfigError when nothing is found."""
    root = find_project_root(start_dir)
    if root is None:
        raise ConfigError(
            f"No {DESCRIPTOR_FILE} found. Current working directory is not a Cordova-based project."
        )
    return root


def load_settings(project_root: Path, path: Path | None = None) -> Settings:
    """Load tool settings for a project.

    Args:
        project_root: Project root directory.
        path: Explicit settings file. Defaults to ``<root>/.cordova-sync.yml``.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    if path is None:
        path = project_root / SETTINGS_FILE

    if not path.is_file():
        logger.debug("No settings file at %s — using defaults", path)
        return Settings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
