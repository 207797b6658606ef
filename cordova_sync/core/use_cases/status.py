"""
Status use case — what each store declares and what is on disk.

Read-only: neither store is migrated or written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cordova_sync.core.config.loader import Settings, load_settings
from cordova_sync.core.models.item import ItemKind
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.probe import (
    find_plugins,
    is_platform_installed,
    is_plugin_installed,
    list_platforms,
    platform_module_name,
    plugins_root,
)
from cordova_sync.core.services.project_descriptor import ProjectDescriptor


@dataclass
class ItemStatus:
    kind: ItemKind
    name: str
    spec: str | None = None
    in_descriptor: bool = False
    in_manifest: bool = False
    installed: bool = False

    @property
    def in_sync(self) -> bool:
        return self.in_descriptor and self.in_manifest

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "spec": self.spec,
            "in_config_xml": self.in_descriptor,
            "in_package_json": self.in_manifest,
            "installed": self.installed,
        }


@dataclass
class StatusResult:
    """Declared and installed platforms/plugins of one project."""

    project_root: Path
    package_name: str | None = None
    version: str | None = None
    display_name: str | None = None
    platforms: list[ItemStatus] = field(default_factory=list)
    plugins: list[ItemStatus] = field(default_factory=list)
    undeclared_platforms: list[str] = field(default_factory=list)
    undeclared_plugins: list[str] = field(default_factory=list)

    @property
    def missing(self) -> list[ItemStatus]:
        """Declared items not installed yet."""
        return [i for i in self.platforms + self.plugins if not i.installed]

    @property
    def out_of_sync(self) -> list[ItemStatus]:
        """Items declared in only one of the two stores."""
        return [i for i in self.platforms + self.plugins if not i.in_sync]

    def to_dict(self) -> dict:
        return {
            "project_root": str(self.project_root),
            "package_name": self.package_name,
            "version": self.version,
            "display_name": self.display_name,
            "platforms": [p.to_dict() for p in self.platforms],
            "plugins": [p.to_dict() for p in self.plugins],
            "undeclared_platforms": self.undeclared_platforms,
            "undeclared_plugins": self.undeclared_plugins,
        }


def project_status(project_root: Path, settings: Settings | None = None) -> StatusResult:
    """Collect the declared and installed state of *project_root*.

    Items are listed manifest-first, then descriptor-only ones, each in
    declaration order.
    """
    settings = settings or load_settings(project_root)
    descriptor = ProjectDescriptor.for_project(project_root)
    manifest = PackageManifest.load(project_root)
    specs = manifest.specs

    result = StatusResult(
        project_root=project_root,
        package_name=descriptor.package_name(),
        version=descriptor.version(),
        display_name=descriptor.name(),
    )

    engines = {e.name: e.spec for e in descriptor.get_engines()}
    for name in list(dict.fromkeys([*manifest.platforms, *engines])):
        module = platform_module_name(name, settings.platform_prefix)
        result.platforms.append(ItemStatus(
            kind=ItemKind.PLATFORM,
            name=name,
            spec=specs.get(module) or specs.get(name) or engines.get(name),
            in_descriptor=name in engines,
            in_manifest=name in manifest.platforms,
            installed=is_platform_installed(project_root, name),
        ))

    descriptor_plugins = descriptor.get_plugin_id_list()
    for plugin_id in list(dict.fromkeys([*manifest.plugins, *descriptor_plugins])):
        spec = specs.get(plugin_id)
        if spec is None and plugin_id in descriptor_plugins:
            entry = descriptor.get_plugin(plugin_id)
            spec = entry.spec if entry else None
        result.plugins.append(ItemStatus(
            kind=ItemKind.PLUGIN,
            name=plugin_id,
            spec=spec,
            in_descriptor=plugin_id in descriptor_plugins,
            in_manifest=plugin_id in manifest.plugins,
            installed=is_plugin_installed(project_root, plugin_id),
        ))

    declared_platforms = {p.name for p in result.platforms}
    result.undeclared_platforms = [p for p in list_platforms(project_root) if p not in declared_platforms]
    declared_plugins = {p.name for p in result.plugins}
    result.undeclared_plugins = [
        p for p in find_plugins(plugins_root(project_root)) if p not in declared_plugins
    ]
    return result
