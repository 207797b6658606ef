"""
Action and Receipt models — the execution contract.

Actions represent requested primitive invocations (add a platform,
uninstall a plugin from one platform, run a hook...). Receipts represent
results. Adapters receive Actions and return Receipts. Never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A requested operation to be executed by an adapter.

    ``name`` is the stable "<capability>:<target>" label; ``id`` also
    carries the operation id and is unique per invocation.
    """

    id: str                         # unique action identifier
    name: str = ""                  # "<capability>:<target>"
    adapter: str                    # which adapter handles this
    capability: str = ""            # platform_add, plugin_uninstall, ...
    params: dict[str, Any] = Field(default_factory=dict)
    target: str | None = None       # platform name or plugin id

    @classmethod
    def create(
        cls,
        operation_id: str,
        adapter: str,
        capability: str,
        target: str,
        **params: Any,
    ) -> Action:
        """Build an action for one primitive invocation on *target*."""
        return cls(
            id=f"{operation_id}:{target}:{capability}",
            name=f"{capability}:{target}",
            adapter=adapter,
            capability=capability,
            target=target,
            params=params,
        )


class Receipt(BaseModel):
    """Result of an adapter execution.

    The adapter NEVER raises — failures are captured here.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
