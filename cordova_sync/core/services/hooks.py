"""
Hook runner — fire ``before_*`` / ``after_*`` project hooks.

Scripts for an event come from two places, run in this order:

    1. ``<hook type="<event>" src="..."/>`` elements in config.xml
    2. files under ``hooks/<event>/``, sorted by name

Each script runs through the ``hook`` adapter. The first failure aborts
the event (and the command that fired it).
"""

from __future__ import annotations

import logging
from pathlib import Path

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.core.errors import HookError
from cordova_sync.core.models.action import Action, Receipt
from cordova_sync.core.services.project_descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)

HOOKS_DIR = "hooks"


class HookRunner:
    """Runs hook scripts for one project."""

    def __init__(
        self,
        project_root: Path,
        registry: AdapterRegistry,
        descriptor: ProjectDescriptor | None = None,
        cmdline: str = "",
    ):
        self._root = project_root
        self._registry = registry
        self._descriptor = descriptor
        self._cmdline = cmdline

    def scripts_for(self, event: str) -> list[str]:
        """Script paths (relative to the project root) for *event*."""
        scripts: list[str] = []
        if self._descriptor is not None:
            scripts.extend(self._descriptor.get_hooks(event))

        event_dir = self._root / HOOKS_DIR / event
        if event_dir.is_dir():
            for path in sorted(event_dir.iterdir()):
                if path.is_file() and not path.name.startswith("."):
                    scripts.append(str(path.relative_to(self._root)))
        return scripts

    def fire(
        self,
        event: str,
        *,
        platforms: list[str] | None = None,
        plugins: list[str] | None = None,
        operation_id: str = "hook",
    ) -> list[Receipt]:
        """Run every script registered for *event*, in order.

        Raises:
            HookError: A script failed.
        """
        scripts = self.scripts_for(event)
        if not scripts:
            logger.debug("No scripts found for hook '%s'", event)
            return []

        env = {
            "CORDOVA_HOOK": event,
            "CORDOVA_CMDLINE": self._cmdline,
            "CORDOVA_PLATFORMS": ",".join(platforms or []),
            "CORDOVA_PLUGINS": ",".join(plugins or []),
        }

        receipts = []
        for script in scripts:
            logger.info("Executing script found in hook '%s': %s", event, script)
            action = Action.create(operation_id, "hook", "run", f"{event}:{script}", script=script)
            receipt = self._registry.execute_action(action, project_root=str(self._root), env=env)
            if receipt.failed:
                raise HookError(event, script, receipt.error or "unknown error")
            receipts.append(receipt)
        return receipts
