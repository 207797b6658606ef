"""
Adapter registry — routes every primitive invocation to its adapter.

Use cases build an Action and hand it to ``execute_action``; they never
hold an adapter themselves. In mock mode every action is routed to one
mock adapter (or answered with a canned success); in dry-run mode the
action is validated and then skipped.
"""

from __future__ import annotations

import logging
import time

from cordova_sync.adapters.base import Adapter, ExecutionContext
from cordova_sync.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def _failed(action: Action, error: str) -> Receipt:
    return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)


class AdapterRegistry:
    """Adapters by name, plus the mock/dry-run switches."""

    def __init__(self, mock_mode: bool = False, dry_run: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None
        self._dry_run = dry_run

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        """Route every action to *mock_adapter* (or a canned success when None)."""
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Registered adapter: %s", adapter.name)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def _resolve(self, action: Action) -> Adapter | None:
        if self._mock_mode:
            return self._mock_adapter
        return self._adapters.get(action.adapter)

    def execute_action(
        self,
        action: Action,
        project_root: str = ".",
        env: dict[str, str] | None = None,
        dry_run: bool | None = None,
    ) -> Receipt:
        """Run *action* and return its Receipt. Never raises.

        Args:
            action: The primitive invocation.
            project_root: Working directory handed to the adapter.
            env: Extra environment variables for subprocess adapters.
            dry_run: Overrides the registry-wide dry-run switch.
        """
        started = time.monotonic()
        dry_run = self._dry_run if dry_run is None else dry_run

        adapter = self._resolve(action)
        if adapter is None:
            if self._mock_mode:
                return Receipt.success(
                    adapter=action.adapter,
                    action_id=action.id,
                    output=f"[mock] {action.adapter}:{action.name} executed",
                    metadata={"mock": True, "dry_run": dry_run},
                )
            return _failed(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(
            action=action,
            project_root=project_root,
            dry_run=dry_run,
            env=env or {},
            params=action.params,
        )

        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            return _failed(action, f"Validation error: {e}")
        if not valid:
            return _failed(action, f"Validation failed: {reason}")

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.adapter}:{action.name}",
                metadata={"dry_run": True},
            )

        logger.debug("Executing %s:%s", action.adapter, action.name)
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised while running %s: %s", action.adapter, action.name, e)
            receipt = _failed(action, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt
