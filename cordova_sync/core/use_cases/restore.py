"""
Restore use case — install every declared platform/plugin missing on disk.

    reconcile stores → declared items → skip installed → add, one at a time

A failing install is logged and recorded; the rest still run. The
command's status comes back in the report.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.config.loader import Settings, load_settings
from cordova_sync.core.engine.executor import SerialReport, generate_operation_id, run_serial
from cordova_sync.core.models.action import Action, Receipt
from cordova_sync.core.models.item import DeclaredItem
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.probe import skip_reason
from cordova_sync.core.services.project_descriptor import ProjectDescriptor
from cordova_sync.core.services.reconcile import reconcile_platforms, reconcile_plugins
from cordova_sync.core.use_cases.common import CommandResult, create_registry, record_audit

logger = logging.getLogger(__name__)

PLATFORM_FAILURE = 'Failed to restore platform "{name}". You might need to try adding it again. Error: {error}'
PLUGIN_FAILURE = 'Failed to restore plugin "{name}". You might need to try adding it again. Error: {error}'


def _warn_unknown_targets(items: list[DeclaredItem], targets: list[str] | None, kind: str) -> None:
    declared = {i.name for i in items}
    for target in targets or []:
        if target not in declared:
            logger.warning("%s '%s' is not declared in config.xml or package.json", kind.capitalize(), target)


def _restore_platforms(
    project_root: Path,
    targets: list[str] | None,
    options: CommandOptions,
    settings: Settings,
    registry: AdapterRegistry,
    report: SerialReport,
    result: CommandResult,
) -> None:
    descriptor = ProjectDescriptor.for_project(project_root)
    manifest = PackageManifest.load(project_root)
    reconciled = reconcile_platforms(
        descriptor,
        manifest,
        prefix=settings.platform_prefix,
        sync_descriptor=settings.sync_descriptor,
        persist=not options.dry_run,
    )
    result.reconciled.append(reconciled)
    _warn_unknown_targets(reconciled.items, targets, "platform")

    def add_platform(item: DeclaredItem) -> Receipt:
        logger.info('Discovered platform "%s". Adding it to the project', item.name)
        action = Action.create(
            report.operation_id, "cordova", "platform_add", item.name,
            source=item.install_source,
            **options.primitive_params(),
        )
        return registry.execute_action(action, project_root=str(project_root), dry_run=options.dry_run)

    run_serial(
        reconciled.items,
        add_platform,
        operation="platform_restore",
        should_skip=lambda item: skip_reason(project_root, item, targets),
        failure_message=PLATFORM_FAILURE,
        report=report,
    )


def _restore_plugins(
    project_root: Path,
    targets: list[str] | None,
    options: CommandOptions,
    settings: Settings,
    registry: AdapterRegistry,
    report: SerialReport,
    result: CommandResult,
) -> None:
    descriptor = ProjectDescriptor.for_project(project_root)
    manifest = PackageManifest.load(project_root)
    reconciled = reconcile_plugins(
        descriptor,
        manifest,
        sync_descriptor=settings.sync_descriptor,
        persist=not options.dry_run,
    )
    result.reconciled.append(reconciled)
    _warn_unknown_targets(reconciled.items, targets, "plugin")

    def add_plugin(item: DeclaredItem) -> Receipt:
        logger.info('Discovered plugin "%s". Adding it to the project', item.name)
        action = Action.create(
            report.operation_id, "cordova", "plugin_add", item.name,
            source=item.install_source,
            variables={**item.variables, **options.cli_variables},
            **options.primitive_params(),
        )
        return registry.execute_action(action, project_root=str(project_root), dry_run=options.dry_run)

    run_serial(
        reconciled.items,
        add_plugin,
        operation="plugin_restore",
        should_skip=lambda item: skip_reason(project_root, item, targets),
        failure_message=PLUGIN_FAILURE,
        report=report,
    )


def _run(
    project_root: Path,
    operation: str,
    targets: list[str] | None,
    steps: list,
    options: CommandOptions | None,
    settings: Settings | None,
    registry: AdapterRegistry | None,
) -> CommandResult:
    options = options or CommandOptions()
    settings = settings or load_settings(project_root)
    if registry is None:
        registry = create_registry(settings, dry_run=options.dry_run)

    report = SerialReport(operation_id=generate_operation_id(), operation=operation)
    result = CommandResult(report=report)
    for step in steps:
        step(project_root, targets, options, settings, registry, report, result)

    logger.info(
        "%s finished: %d ok, %d skipped, %d failed",
        operation, report.succeeded, report.skipped, report.failed,
    )
    record_audit(project_root, settings, report, targets, dry_run=options.dry_run)
    return result


def restore_platforms(
    project_root: Path,
    targets: list[str] | None = None,
    *,
    options: CommandOptions | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> CommandResult:
    """Add every declared platform that is not installed yet.

    Args:
        project_root: Cordova project root.
        targets: Restrict to these platform names. None or empty = all.
        options: save/searchpath/force/dry-run options for the primitives.
        settings: Tool settings (loaded from the project if omitted).
        registry: Adapter registry (built from settings if omitted).
    """
    return _run(project_root, "platform_restore", targets, [_restore_platforms],
                options, settings, registry)


def restore_plugins(
    project_root: Path,
    targets: list[str] | None = None,
    *,
    options: CommandOptions | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> CommandResult:
    """Add every declared plugin that is not installed yet."""
    return _run(project_root, "plugin_restore", targets, [_restore_plugins],
                options, settings, registry)


def restore_all(
    project_root: Path,
    *,
    options: CommandOptions | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> CommandResult:
    """Restore platforms, then plugins, into one report."""
    return _run(project_root, "restore", None, [_restore_platforms, _restore_plugins],
                options, settings, registry)
