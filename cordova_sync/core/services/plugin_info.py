"""
Plugin info — preferences declared by an installed plugin's ``plugin.xml``.

    <plugin id="cordova-plugin-x" xmlns="http://apache.org/cordova/ns/plugins/1.0">
        <preference name="API_KEY" />
        <platform name="android">
            <preference name="GRADLE_VERSION" default="8.0" />
        </platform>
    </plugin>

Used to build the variable set handed to a platform-level uninstall.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from cordova_sync.core.errors import ConfigError, MissingVariablesError
from cordova_sync.core.services.project_descriptor import ProjectDescriptor, local_name

logger = logging.getLogger(__name__)

PLUGIN_FILE = "plugin.xml"


def get_preferences(plugin_dir: Path, platform: str | None = None) -> dict[str, str | None]:
    """Preference name → default (None when required) for *platform*.

    Platform-specific preferences override global ones with the same name.
    A plugin without ``plugin.xml`` declares nothing.
    """
    path = plugin_dir / PLUGIN_FILE
    if not path.is_file():
        return {}

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ConfigError(f"Invalid XML in {path}: {e}") from e

    prefs: dict[str, str | None] = {}

    def collect(parent: ET.Element) -> None:
        for el in parent:
            if local_name(el.tag) == "preference" and el.get("name"):
                prefs[el.get("name").upper()] = el.get("default")

    collect(root)
    if platform:
        for el in root:
            if local_name(el.tag) == "platform" and el.get("name") == platform:
                collect(el)
    return prefs


def merge_variables(
    plugin_dir: Path,
    plugin_id: str,
    descriptor: ProjectDescriptor | None,
    platform: str,
    cli_variables: dict[str, Any] | None = None,
) -> dict[str, str]:
    """Variables for *plugin_id* on *platform*.

    Descriptor variables are overlaid by CLI variables; only names the
    plugin declares for this platform are kept, defaults fill the gaps.

    Raises:
        MissingVariablesError: A preference without default has no value.
    """
    declared = get_preferences(plugin_dir, platform)

    merged: dict[str, Any] = {}
    if descriptor is not None:
        entry = descriptor.get_plugin(plugin_id)
        if entry is not None:
            merged.update(entry.variables)
    merged.update(cli_variables or {})

    variables: dict[str, str] = {}
    missing = []
    for name, default in declared.items():
        if name in merged:
            variables[name] = str(merged[name])
        elif default is not None:
            variables[name] = default
        else:
            missing.append(name)

    if missing:
        raise MissingVariablesError(plugin_id, missing, step=f"variables:{platform}")

    dropped = sorted(set(merged) - set(variables))
    if dropped:
        logger.debug("Ignoring variables not declared by %s for %s: %s", plugin_id, platform, dropped)
    return variables
