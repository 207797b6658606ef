"""
Platform removal — delete installed platforms and, with --save, their declarations.

Per target:

    rm platforms/<name> → rm plugins/<name>.json → persist removal (--save)
    → npm uninstall cordova-<name>
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.config.loader import Settings, load_settings
from cordova_sync.core.engine.executor import SerialReport, generate_operation_id, run_serial
from cordova_sync.core.errors import StepFailed, UsageError
from cordova_sync.core.models.action import Action, Receipt
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.services.hooks import HookRunner
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.probe import platform_module_name, platforms_root, remove_platform_plugins_json
from cordova_sync.core.services.project_descriptor import ProjectDescriptor
from cordova_sync.core.use_cases.common import CommandResult, create_registry, record_audit

logger = logging.getLogger(__name__)

NO_TARGETS = "No platform(s) specified. Please specify platform(s) to remove. See `cordova-sync platform list`."
FAILURE_MESSAGE = 'Failed to remove platform "{name}". Error: {error}'


def strip_version(target: str) -> str:
    """``ios@7.0.0`` → ``ios``; scoped names keep their leading ``@``."""
    head, sep, _ = target.rpartition("@")
    return head if sep and head else target


def uninstall_package_name(target: str, settings: Settings) -> str:
    """npm package to uninstall for a platform target."""
    name = strip_version(target)
    if name in settings.known_platforms:
        return platform_module_name(name, settings.platform_prefix)
    return name


def _persist_removal(project_root: Path, name: str) -> None:
    manifest = PackageManifest.load(project_root)
    if manifest.remove_platforms([name]):
        logger.info('Removing platform "%s" from cordova.platforms array in package.json', name)
        manifest.save()

    descriptor = ProjectDescriptor.for_project(project_root)
    if descriptor.remove_engine(name):
        logger.info('Removing platform "%s" from config.xml file...', name)
        descriptor.write()


def remove_platforms(
    project_root: Path,
    targets: list[str],
    *,
    options: CommandOptions | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
    hooks: HookRunner | None = None,
) -> CommandResult:
    """Remove *targets* from the project.

    Raises:
        UsageError: No targets given.
        HookError: A before/after hook failed.
        PersistenceError: A config store write failed.
    """
    if not targets:
        raise UsageError(NO_TARGETS)

    options = options or CommandOptions()
    settings = settings or load_settings(project_root)
    if registry is None:
        registry = create_registry(settings, dry_run=options.dry_run)
    if hooks is None:
        hooks = HookRunner(project_root, registry, ProjectDescriptor.for_project(project_root))

    names = [strip_version(t) for t in targets]
    report = SerialReport(operation_id=generate_operation_id(), operation="platform_rm")

    def remove_platform(target: str) -> Receipt:
        name = strip_version(target)
        platform_dir = platforms_root(project_root) / name

        if options.dry_run:
            logger.info("[dry-run] Would remove %s", platform_dir)
        else:
            if platform_dir.exists():
                shutil.rmtree(platform_dir)
                logger.debug("Removed %s", platform_dir)
            remove_platform_plugins_json(project_root, name)
            if options.save:
                _persist_removal(project_root, name)

        package = uninstall_package_name(target, settings)
        receipt = registry.execute_action(
            Action.create(
                report.operation_id, "npm", "uninstall", name,
                package=package,
                save=options.save,
            ),
            project_root=str(project_root),
            dry_run=options.dry_run,
        )
        if receipt.failed:
            raise StepFailed("npm_uninstall", receipt.error or "unknown error")
        return receipt

    hooks.fire("before_platform_rm", platforms=names, operation_id=report.operation_id)

    run_serial(
        targets,
        remove_platform,
        operation="platform_rm",
        name_of=str,
        failure_message=FAILURE_MESSAGE,
        report=report,
    )

    hooks.fire("after_platform_rm", platforms=names, operation_id=report.operation_id)

    record_audit(project_root, settings, report, targets, dry_run=options.dry_run)
    return CommandResult(report=report)
