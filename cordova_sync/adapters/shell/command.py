"""
Command adapter base — run a subprocess and turn the result into a Receipt.

The cordova, npm and hook adapters are all "run this argv in the project
root" at heart; this base holds the shared subprocess handling.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from cordova_sync.adapters.base import Adapter, ExecutionContext
from cordova_sync.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CommandAdapter(Adapter):
    """Base for adapters backed by a command-line tool.

    Subclasses set ``binary`` (checked by is_available) and build argv
    lists, then call ``_exec``.
    """

    binary: str = "sh"

    def __init__(self, timeout: int = 600):
        self._timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def _exec(
        self,
        ctx: ExecutionContext,
        cmd: list[str],
        timeout: int | None = None,
        metadata: dict | None = None,
    ) -> Receipt:
        timeout = ctx.action.params.get("timeout", timeout or self._timeout)
        command = " ".join(cmd)
        env = {**os.environ, **ctx.env} if ctx.env else None
        meta = {"command": command, **(metadata or {})}

        logger.debug("Executing: %s (cwd=%s)", command, ctx.working_dir)
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=ctx.working_dir,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={**meta, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Command execution error: {e}",
                metadata=meta,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=result.stdout.strip(),
                duration_ms=elapsed_ms,
                metadata={**meta, "return_code": 0},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.stderr.strip() or f"Exit code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={**meta, "return_code": result.returncode, "stdout": result.stdout.strip()},
        )
