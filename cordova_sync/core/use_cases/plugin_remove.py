"""
Plugin removal — take plugins out of every installed platform and the project.

Per target, in order:

    validate id → uninstall from each platform → uninstall package
    → persist removal (--save) → drop fetch.json entry

A failure aborts only the current target; the step that failed is
recorded in its outcome. One prepare pass runs at the end if any
platform uninstall left native files unprepared.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.config.loader import Settings, load_settings
from cordova_sync.core.engine.executor import ItemOutcome, SerialReport, generate_operation_id, run_serial
from cordova_sync.core.errors import StepFailed, UsageError
from cordova_sync.core.models.action import Action, Receipt
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.services.fetch_metadata import remove_fetch_metadata
from cordova_sync.core.services.hooks import HookRunner
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.plugin_info import merge_variables
from cordova_sync.core.services.probe import find_plugins, list_platforms, plugins_root
from cordova_sync.core.services.project_descriptor import ProjectDescriptor
from cordova_sync.core.use_cases.common import CommandResult, create_registry, record_audit

logger = logging.getLogger(__name__)

NO_TARGETS = "No plugin specified. Please specify a plugin to remove. See: cordova-sync plugin list."
FAILURE_MESSAGE = 'Failed to remove plugin "{name}". Error: {error}'


def validate_plugin_id(
    plugin_id: str,
    installed: list[str],
    prefix: str = "cordova-plugin-",
) -> str | None:
    """Resolve *plugin_id* against the installed plugins.

    Tries the id as given, then with *prefix* prepended (only when the
    id does not already contain it).

    Returns:
        The installed id, or None if neither candidate is installed.
    """
    candidates = [plugin_id]
    if prefix not in plugin_id:
        candidates.append(prefix + plugin_id)

    for candidate in candidates:
        if candidate in installed:
            return candidate
    return None


def _persist_removal(
    project_root: Path,
    descriptor: ProjectDescriptor,
    plugin_id: str,
) -> None:
    if descriptor.get_plugin(plugin_id) is not None:
        logger.info("Removing plugin %s from config.xml file...", plugin_id)
        descriptor.remove_plugin(plugin_id)
        descriptor.write()

    manifest = PackageManifest.load(project_root)
    if manifest.remove_plugin(plugin_id):
        logger.info('Removing plugin "%s" from package.json', plugin_id)
        manifest.save()


def remove_plugins(
    project_root: Path,
    targets: list[str],
    *,
    options: CommandOptions | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
    hooks: HookRunner | None = None,
) -> CommandResult:
    """Remove *targets* from every installed platform and from the project.

    Raises:
        UsageError: No targets given (nothing has run yet).
        HookError: A before/after hook failed.
        PersistenceError: A config store write failed.
    """
    if not targets:
        raise UsageError(NO_TARGETS)

    options = options or CommandOptions()
    settings = settings or load_settings(project_root)
    if registry is None:
        registry = create_registry(settings, dry_run=options.dry_run)

    plugins_dir = plugins_root(project_root)
    installed = find_plugins(plugins_dir)
    platforms = list_platforms(project_root)
    descriptor = ProjectDescriptor.for_project(project_root)
    if hooks is None:
        hooks = HookRunner(project_root, registry, descriptor)

    report = SerialReport(operation_id=generate_operation_id(), operation="plugin_rm")
    needs_prepare = False

    def execute(action: Action) -> Receipt:
        return registry.execute_action(action, project_root=str(project_root), dry_run=options.dry_run)

    def remove_plugin(target: str) -> Receipt:
        nonlocal needs_prepare

        plugin_id = validate_plugin_id(target, installed, settings.plugin_prefix)
        if plugin_id is None:
            raise StepFailed(
                "validate",
                f'Plugin "{target}" is not present in the project. See `cordova-sync plugin list`.',
            )

        plugin_dir = plugins_dir / plugin_id
        for platform in platforms:
            logger.debug('Uninstalling plugin "%s" from platform "%s"', plugin_id, platform)
            # cli_variables stays untouched: values dropped for one platform
            # may still be declared by the next
            variables = merge_variables(plugin_dir, plugin_id, descriptor, platform, options.cli_variables)
            receipt = execute(Action.create(
                report.operation_id, "cordova", "plugin_uninstall_platform", f"{plugin_id}:{platform}",
                plugin_id=plugin_id,
                platform=platform,
                variables=variables,
                force=options.force,
            ))
            if receipt.failed:
                raise StepFailed(f"uninstall:{platform}", receipt.error or "unknown error")
            if not receipt.metadata.get("did_prepare"):
                needs_prepare = True

        receipt = execute(Action.create(
            report.operation_id, "cordova", "plugin_uninstall", plugin_id,
            plugin_id=plugin_id,
        ))
        if receipt.failed:
            raise StepFailed("uninstall", receipt.error or "unknown error")

        if not options.dry_run:
            if options.save:
                _persist_removal(project_root, descriptor, plugin_id)
            logger.debug("Removing plugin %s from fetch.json", plugin_id)
            remove_fetch_metadata(plugins_dir, plugin_id)
            installed.remove(plugin_id)
        return receipt

    hooks.fire(
        "before_plugin_rm",
        platforms=platforms,
        plugins=installed,
        operation_id=report.operation_id,
    )

    run_serial(
        targets,
        remove_plugin,
        operation="plugin_rm",
        name_of=str,
        failure_message=FAILURE_MESSAGE,
        report=report,
    )

    if needs_prepare:
        receipt = execute(Action.create(
            report.operation_id, "cordova", "prepare", ",".join(platforms),
            platforms=platforms,
        ))
        report.metadata["prepared"] = receipt.ok
        if receipt.failed:
            msg = f"Failed to prepare {', '.join(platforms)} after removing plugins. Error: {receipt.error}"
            logger.warning(msg)
            report.warnings.append(msg)
            report.outcomes.append(ItemOutcome(
                name="prepare", status="failed", step="prepare", error=receipt.error, receipt=receipt,
            ))

    hooks.fire(
        "after_plugin_rm",
        platforms=platforms,
        plugins=find_plugins(plugins_dir),
        operation_id=report.operation_id,
    )

    record_audit(project_root, settings, report, targets, dry_run=options.dry_run)
    return CommandResult(report=report)
