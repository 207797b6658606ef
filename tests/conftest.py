"""
Shared test fixtures — throwaway Cordova projects and mock registries.
"""

import json
from pathlib import Path

import pytest

from cordova_sync.adapters.mock import MockAdapter
from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.config.loader import Settings

CONFIG_XML = """<?xml version='1.0' encoding='utf-8'?>
<widget id="{widget_id}" version="{version}" xmlns="http://www.w3.org/ns/widgets" xmlns:cdv="http://cordova.apache.org/ns/1.0">
    <name>{display_name}</name>
    <!-- app description -->
    {body}
</widget>
"""

PLUGIN_XML = """<?xml version='1.0' encoding='utf-8'?>
<plugin id="{plugin_id}" version="1.0.0" xmlns="http://apache.org/cordova/ns/plugins/1.0">
    <name>{plugin_id}</name>
    {body}
</plugin>
"""


@pytest.fixture
def write_config_xml():
    """Write ``config.xml`` into a directory."""

    def _write(
        root: Path,
        body: str = "",
        widget_id: str = "com.example.App",
        version: str = "1.2.3",
        display_name: str = "Example App",
    ) -> Path:
        path = root / "config.xml"
        path.write_text(
            CONFIG_XML.format(
                widget_id=widget_id, version=version, display_name=display_name, body=body,
            ),
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def install_plugin():
    """Materialise ``plugins/<id>/plugin.xml`` in a project."""

    def _install(root: Path, plugin_id: str, body: str = "") -> Path:
        plugin_dir = root / "plugins" / plugin_id
        plugin_dir.mkdir(parents=True, exist_ok=True)
        (plugin_dir / "plugin.xml").write_text(
            PLUGIN_XML.format(plugin_id=plugin_id, body=body), encoding="utf-8",
        )
        return plugin_dir

    return _install


@pytest.fixture
def make_project(tmp_path: Path, write_config_xml, install_plugin):
    """Build a Cordova project under tmp_path.

    Args (of the returned callable):
        config_body: XML placed inside <widget>.
        package: package.json content (None = no package.json).
        platforms: Platform names to materialise under platforms/.
        plugins: Plugin ids to materialise under plugins/.
    """

    def _make(
        config_body: str = "",
        package: dict | None = None,
        platforms: tuple[str, ...] = (),
        plugins: tuple[str, ...] = (),
    ) -> Path:
        write_config_xml(tmp_path, config_body)
        if package is not None:
            (tmp_path / "package.json").write_text(json.dumps(package, indent=2) + "\n", encoding="utf-8")
        for name in platforms:
            (tmp_path / "platforms" / name).mkdir(parents=True, exist_ok=True)
        for plugin_id in plugins:
            install_plugin(tmp_path, plugin_id)
        return tmp_path

    return _make


@pytest.fixture
def read_package():
    def _read(root: Path) -> dict:
        return json.loads((root / "package.json").read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter(adapter_name="mock")


@pytest.fixture
def mock_registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    """Registry where every action goes to ``mock_adapter``."""
    registry = AdapterRegistry()
    registry.set_mock_mode(True, mock_adapter)
    return registry


@pytest.fixture
def settings() -> Settings:
    return Settings(audit=False)
