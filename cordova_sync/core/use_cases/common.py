"""
Shared plumbing for the use cases — registry setup, result type, audit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.config.loader import Settings
from cordova_sync.core.engine.executor import SerialReport, write_audit_entry
from cordova_sync.core.persistence.audit import AuditWriter
from cordova_sync.core.services.reconcile import ReconcileResult

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a restore or remove command."""

    report: SerialReport
    reconciled: list[ReconcileResult] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return self.report.exit_code

    def to_dict(self) -> dict:
        data = self.report.to_dict()
        if self.reconciled:
            data["reconciled"] = [r.to_dict() for r in self.reconciled]
        return data


def create_registry(
    settings: Settings,
    mock_mode: bool = False,
    dry_run: bool = False,
) -> AdapterRegistry:
    """Registry with the cordova, npm and hook adapters registered."""
    from cordova_sync.adapters.cordova import CordovaAdapter
    from cordova_sync.adapters.languages.node import NodeAdapter
    from cordova_sync.adapters.shell.hook_script import HookScriptAdapter

    registry = AdapterRegistry(mock_mode=mock_mode, dry_run=dry_run)
    registry.register(CordovaAdapter(
        cordova_bin=settings.cordova_bin,
        plugman_bin=settings.plugman_bin,
        timeout=settings.timeout,
    ))
    registry.register(NodeAdapter(npm_bin=settings.npm_bin, timeout=settings.timeout))
    registry.register(HookScriptAdapter(timeout=settings.timeout))
    return registry


def record_audit(
    project_root: Path,
    settings: Settings,
    report: SerialReport,
    targets: list[str] | None = None,
    dry_run: bool = False,
) -> None:
    """Append the report to the project's audit ledger, if enabled."""
    if not settings.audit or dry_run:
        return
    write_audit_entry(report, AuditWriter(project_root=project_root), targets)
