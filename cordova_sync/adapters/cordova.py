"""
Cordova adapter — platform/plugin install and uninstall primitives.

Wraps the ``cordova`` and ``plugman`` command-line tools. The core
never saves through these tools (``--nosave`` unless asked): config
stores are persisted by cordova-sync itself.

Action params per capability:
    platform_add               source, searchpath, save, force
    plugin_add                 source, variables, searchpath, save, force
    plugin_uninstall_platform  plugin_id, platform, variables
    plugin_uninstall           plugin_id
    prepare                    platforms
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from cordova_sync.adapters.base import ExecutionContext
from cordova_sync.adapters.shell.command import CommandAdapter
from cordova_sync.core.models.action import Receipt
from cordova_sync.core.services.probe import PLATFORMS_DIR, PLUGINS_DIR

logger = logging.getLogger(__name__)

_REQUIRED_PARAMS = {
    "platform_add": ("source",),
    "plugin_add": ("source",),
    "plugin_uninstall_platform": ("plugin_id", "platform"),
    "plugin_uninstall": ("plugin_id",),
    "prepare": (),
}


def _variable_flags(variables: dict | None) -> list[str]:
    flags: list[str] = []
    for name, value in (variables or {}).items():
        flags.extend(["--variable", f"{name}={value}"])
    return flags


def _searchpath_flags(searchpath: list[str] | None) -> list[str]:
    if not searchpath:
        return []
    return ["--searchpath", os.pathsep.join(searchpath)]


class CordovaAdapter(CommandAdapter):
    """Cordova CLI / plugman primitives."""

    def __init__(
        self,
        cordova_bin: str = "cordova",
        plugman_bin: str = "plugman",
        timeout: int = 600,
    ):
        super().__init__(timeout=timeout)
        self.binary = cordova_bin
        self._plugman = plugman_bin

    @property
    def name(self) -> str:
        return "cordova"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        capability = context.action.capability
        if capability not in _REQUIRED_PARAMS:
            valid = ", ".join(sorted(_REQUIRED_PARAMS))
            return False, f"Unknown operation '{capability}'. Valid: {valid}"

        for param in _REQUIRED_PARAMS[capability]:
            if not context.action.params.get(param):
                return False, f"Missing required param: '{param}'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        capability = context.action.capability
        try:
            if capability == "platform_add":
                return self._platform_add(context)
            elif capability == "plugin_add":
                return self._plugin_add(context)
            elif capability == "plugin_uninstall_platform":
                return self._plugin_uninstall_platform(context)
            elif capability == "plugin_uninstall":
                return self._plugin_uninstall(context)
            elif capability == "prepare":
                return self._prepare(context)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {capability}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Cordova error: {e}",
            )

    # ── Operations ──────────────────────────────────────────────

    def _platform_add(self, ctx: ExecutionContext) -> Receipt:
        p = ctx.action.params
        cmd = [self.binary, "platform", "add", p["source"]]
        if not p.get("save"):
            cmd.append("--nosave")
        if p.get("force"):
            cmd.append("--force")
        cmd.extend(_searchpath_flags(p.get("searchpath")))
        return self._exec(ctx, cmd)

    def _plugin_add(self, ctx: ExecutionContext) -> Receipt:
        p = ctx.action.params
        cmd = [self.binary, "plugin", "add", p["source"]]
        cmd.extend(_variable_flags(p.get("variables")))
        if not p.get("save"):
            cmd.append("--nosave")
        if p.get("force"):
            cmd.append("--force")
        cmd.extend(_searchpath_flags(p.get("searchpath")))
        return self._exec(ctx, cmd)

    def _plugin_uninstall_platform(self, ctx: ExecutionContext) -> Receipt:
        p = ctx.action.params
        platform = p["platform"]
        cmd = [
            self._plugman, "uninstall",
            "--platform", platform,
            "--project", str(Path(PLATFORMS_DIR) / platform),
            "--plugin", p["plugin_id"],
            "--plugins_dir", PLUGINS_DIR,
        ]
        cmd.extend(_variable_flags(p.get("variables")))
        # plugman only touches native files; a prepare pass is still needed
        return self._exec(ctx, cmd, metadata={"did_prepare": False})

    def _plugin_uninstall(self, ctx: ExecutionContext) -> Receipt:
        plugin_id = ctx.action.params["plugin_id"]
        plugin_dir = Path(ctx.project_root) / PLUGINS_DIR / plugin_id

        if not plugin_dir.exists():
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=f"{plugin_id} not present in {PLUGINS_DIR}/",
                metadata={"removed": False},
            )

        shutil.rmtree(plugin_dir)
        logger.debug("Removed %s", plugin_dir)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Removed {plugin_dir}",
            metadata={"removed": True},
        )

    def _prepare(self, ctx: ExecutionContext) -> Receipt:
        platforms = ctx.action.params.get("platforms") or []
        return self._exec(ctx, [self.binary, "prepare", *platforms])
