"""
Reconciler — merge platform/plugin declarations across both config stores.

Two-phase flow per item kind:

    read both stores → migrate missing entries → recompute from the manifest
    → write back only the stores that changed

Information only ever moves forward: an entry missing from one store is
added from the other, and nothing is deleted because a store lacks it.
Deletion is a separate, explicit operation (see the removal use cases).

After migration the manifest is the single source of the item list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cordova_sync.core.models.item import DeclaredItem, ItemKind
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.probe import platform_module_name
from cordova_sync.core.services.project_descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    kind: ItemKind
    items: list[DeclaredItem] = field(default_factory=list)
    migrated: list[str] = field(default_factory=list)    # descriptor → manifest
    backfilled: list[str] = field(default_factory=list)  # manifest → descriptor
    manifest_saved: bool = False
    descriptor_saved: bool = False

    @property
    def names(self) -> list[str]:
        return [i.name for i in self.items]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "items": [i.model_dump(mode="json") for i in self.items],
            "migrated": self.migrated,
            "backfilled": self.backfilled,
            "manifest_saved": self.manifest_saved,
            "descriptor_saved": self.descriptor_saved,
        }


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def apply_front_matter(descriptor: ProjectDescriptor, manifest: PackageManifest) -> bool:
    """Copy name/version/displayName from the descriptor where the manifest lacks them.

    Returns:
        True if the manifest changed.
    """
    content = manifest.content
    updates = {}

    package_name = descriptor.package_name()
    if package_name and _blank(content.get("name")):
        updates["name"] = package_name.lower()

    version = descriptor.version()
    if version and _blank(content.get("version")):
        updates["version"] = version

    display_name = descriptor.name()
    if display_name and _blank(content.get("displayName")):
        updates["displayName"] = display_name

    if not updates:
        return False
    return manifest.update(updates)


def _persist(
    result: ReconcileResult,
    descriptor: ProjectDescriptor,
    manifest: PackageManifest,
) -> None:
    if manifest.dirty:
        # We've modified package.json and need to save it
        result.manifest_saved = manifest.save()
    if descriptor.modified:
        descriptor.write()
        result.descriptor_saved = True


def reconcile_platforms(
    descriptor: ProjectDescriptor,
    manifest: PackageManifest,
    *,
    prefix: str = "cordova-",
    sync_descriptor: bool = True,
    persist: bool = True,
) -> ReconcileResult:
    """Merge ``<engine>`` declarations and ``cordova.platforms``.

    Args:
        descriptor: The config.xml store.
        manifest: The package.json store.
        prefix: npm package prefix for platform names.
        sync_descriptor: Also add manifest-only platforms to the descriptor.
        persist: Write back changed stores before returning.
    """
    logger.debug("Checking for saved platforms that haven't been added to the project")
    result = ReconcileResult(kind=ItemKind.PLATFORM)

    apply_front_matter(descriptor, manifest)

    pkg_specs = manifest.specs
    for engine in descriptor.get_engines():
        module = platform_module_name(engine.name, prefix)
        missing_name = engine.name not in manifest.platforms
        missing_spec = bool(engine.spec) and module not in pkg_specs
        if not (missing_name or missing_spec):
            continue

        logger.info("Platform '%s' found in config.xml... Migrating it to package.json", engine.name)
        if missing_spec:
            manifest.add_dev_dependency(module, engine.spec)
            pkg_specs = manifest.specs
        if missing_name:
            manifest.add_platform(engine.name)
        result.migrated.append(engine.name)

    # Re-read from the manifest: it is the single source from here on
    specs = manifest.specs
    result.items = [
        DeclaredItem(
            kind=ItemKind.PLATFORM,
            name=name,
            spec=specs.get(platform_module_name(name, prefix)) or specs.get(name),
        )
        for name in manifest.platforms
    ]

    if sync_descriptor:
        declared = {e.name for e in descriptor.get_engines()}
        for item in result.items:
            if item.name in declared:
                continue
            logger.info("Platform '%s' found in package.json... Adding it to config.xml", item.name)
            descriptor.add_engine(item.name, item.spec)
            result.backfilled.append(item.name)

    if persist:
        _persist(result, descriptor, manifest)
    return result


def reconcile_plugins(
    descriptor: ProjectDescriptor,
    manifest: PackageManifest,
    *,
    sync_descriptor: bool = True,
    persist: bool = True,
) -> ReconcileResult:
    """Merge ``<plugin>`` declarations and ``cordova.plugins``.

    Variables are copied verbatim from the descriptor's ``<variable>``
    children when a plugin is migrated.
    """
    logger.debug("Checking for saved plugins that haven't been added to the project")
    result = ReconcileResult(kind=ItemKind.PLUGIN)

    pkg_specs = manifest.specs
    for plugin_id in descriptor.get_plugin_id_list():
        if plugin_id in manifest.plugins:
            continue

        logger.info("Plugin '%s' found in config.xml... Migrating it to package.json", plugin_id)
        entry = descriptor.get_plugin(plugin_id)
        if entry is None:
            continue
        if entry.spec and plugin_id not in pkg_specs:
            manifest.add_dev_dependency(plugin_id, entry.spec)
            pkg_specs = manifest.specs
        manifest.set_plugin(plugin_id, entry.variables)
        result.migrated.append(plugin_id)

    specs = manifest.specs
    result.items = [
        DeclaredItem(
            kind=ItemKind.PLUGIN,
            name=plugin_id,
            spec=specs.get(plugin_id),
            variables=variables,
        )
        for plugin_id, variables in manifest.plugins.items()
    ]

    if sync_descriptor:
        declared = set(descriptor.get_plugin_id_list())
        for item in result.items:
            if item.name in declared:
                continue
            logger.info("Plugin '%s' found in package.json... Adding it to config.xml", item.name)
            descriptor.add_plugin(item.name, item.spec, item.variables)
            result.backfilled.append(item.name)

    if persist:
        _persist(result, descriptor, manifest)
    return result
