"""
Hook script adapter — run one hook script.

``.js`` hooks run under node; anything else is executed directly and
must be executable. The project root is passed as the only argument.

Action params:
    script (str): Script path, relative to the project root or absolute.
"""

from __future__ import annotations

from pathlib import Path

from cordova_sync.adapters.base import ExecutionContext
from cordova_sync.adapters.shell.command import CommandAdapter
from cordova_sync.core.models.action import Receipt


class HookScriptAdapter(CommandAdapter):
    """Runs hook scripts declared in config.xml or hooks/<event>/."""

    def __init__(self, node_bin: str = "node", timeout: int = 600):
        super().__init__(timeout=timeout)
        self.binary = node_bin

    @property
    def name(self) -> str:
        return "hook"

    def is_available(self) -> bool:
        return True

    def _script_path(self, context: ExecutionContext) -> Path:
        script = Path(context.action.params.get("script", ""))
        if not script.is_absolute():
            script = Path(context.project_root) / script
        return script

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.action.params.get("script"):
            return False, "Missing required param: 'script'"
        script = self._script_path(context)
        if not script.is_file():
            return False, f"Hook script not found: {script}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        script = self._script_path(context)
        if script.suffix == ".js":
            cmd = [self.binary, str(script), context.project_root]
        else:
            cmd = [str(script), context.project_root]
        return self._exec(context, cmd, metadata={"script": str(script)})
