"""
Node.js adapter — npm/yarn/pnpm dependency primitives.

Handles the package-level side of platform removal: taking
``cordova-<platform>`` out of node_modules and, with ``save``, out of
package.json.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cordova_sync.adapters.base import ExecutionContext
from cordova_sync.adapters.shell.command import CommandAdapter
from cordova_sync.core.models.action import Receipt

logger = logging.getLogger(__name__)


class NodeAdapter(CommandAdapter):
    """Node.js package manager adapter.

    Action params (capability ``uninstall``):
        package (str): Package to uninstall.
        save (bool): Also drop it from package.json (default: False).
        package_manager (str): 'npm', 'yarn' or 'pnpm' (default: auto-detect).
    """

    _VALID_OPS = {"uninstall"}

    def __init__(self, npm_bin: str = "npm", timeout: int = 600):
        super().__init__(timeout=timeout)
        self.binary = npm_bin

    @property
    def name(self) -> str:
        return "npm"

    def _detect_package_manager(self, cwd: str) -> str:
        """Auto-detect the package manager from lock files."""
        cwd_path = Path(cwd)
        if (cwd_path / "pnpm-lock.yaml").exists():
            return "pnpm"
        if (cwd_path / "yarn.lock").exists():
            return "yarn"
        return self.binary

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.capability
        if operation not in self._VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self._VALID_OPS))}"
        if not context.action.params.get("package"):
            return False, "Missing required param: 'package'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        try:
            return self._uninstall(context)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Node error: {e}",
            )

    def _uninstall(self, ctx: ExecutionContext) -> Receipt:
        p = ctx.action.params
        package = p["package"]
        save = bool(p.get("save"))
        pm = p.get("package_manager") or self._detect_package_manager(ctx.working_dir)

        # yarn/pnpm remove always rewrites package.json
        if pm in ("yarn", "pnpm") and save:
            cmd = [pm, "remove", package]
        else:
            if pm in ("yarn", "pnpm"):
                logger.debug("%s cannot uninstall without saving; using %s --no-save", pm, self.binary)
                pm = self.binary
            cmd = [pm, "uninstall", package, "--save" if save else "--no-save"]
        return self._exec(ctx, cmd, metadata={"package": package})
