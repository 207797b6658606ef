"""
Adapter base — the contract every primitive implements.

A primitive is one external side effect: ``cordova platform add``,
``plugman uninstall``, ``npm uninstall``, removing ``plugins/<id>``,
running a hook script. Use cases describe it as an Action; the adapter
turns it into a Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from cordova_sync.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """What an adapter gets for one action."""

    action: Action
    project_root: str = "."
    dry_run: bool = False
    env: dict[str, str] = Field(default_factory=dict)   # merged over os.environ
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        """``cwd`` param if the action sets one, else the project root."""
        return self.action.params.get("cwd") or self.project_root


class Adapter(ABC):
    """One family of primitives (cordova, npm, hook).

    ``execute`` returns a failed Receipt instead of raising; the registry
    still guards against adapters that break that rule.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key; matches ``Action.adapter``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing tool can be found. Must not raise."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check capability and params before anything runs.

        Returns:
            (ok, reason); reason is empty when ok.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the action."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
