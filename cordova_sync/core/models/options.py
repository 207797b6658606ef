"""
Command options — what the caller passes down to every primitive.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CommandOptions(BaseModel):
    """Options shared by restore and remove commands."""

    save: bool = False
    searchpath: list[str] = Field(default_factory=list)
    cli_variables: dict[str, str] = Field(default_factory=dict)
    force: bool = False
    dry_run: bool = False

    def primitive_params(self) -> dict[str, Any]:
        """Params forwarded to adapters alongside the action-specific ones."""
        return {
            "save": self.save,
            "searchpath": list(self.searchpath),
            "force": self.force,
        }
