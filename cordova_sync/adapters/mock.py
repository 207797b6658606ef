"""
Mock adapter — universal test double for primitive invocations.

Used in mock mode to simulate adapter behavior without touching
external tools. Configurable to return success, failure, or custom
responses per action.
"""

from __future__ import annotations

from cordova_sync.adapters.base import Adapter, ExecutionContext
from cordova_sync.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns success for everything. Custom responses are
    keyed by action id, action name (``<capability>:<target>``) or bare
    capability, looked up in that order.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def called_names(self) -> list[str]:
        """Action names in call order."""
        return [ctx.action.name for ctx in self._call_log]

    def calls_for(self, capability: str) -> list[ExecutionContext]:
        return [ctx for ctx in self._call_log if ctx.action.capability == capability]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, key: str, receipt: Receipt) -> None:
        """Set a custom response for an action id, name or capability."""
        self._responses[key] = receipt

    def set_failure(self, key: str, error: str = "Mock failure") -> None:
        """Configure matching actions to fail."""
        self._responses[key] = Receipt.failure(
            adapter=self._name,
            action_id=key,
            error=error,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        action = context.action
        for key in (action.id, action.name, action.capability):
            if key and key in self._responses:
                return self._responses[key].model_copy(update={"action_id": action.id})

        return Receipt.success(
            adapter=self._name,
            action_id=action.id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
