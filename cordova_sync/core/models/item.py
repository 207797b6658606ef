"""
Declared items — the reconciled view of platforms and plugins.

A DeclaredItem is computed fresh on every run from the two config
stores. It is never persisted directly; its source fields are.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ItemKind(str, Enum):
    PLATFORM = "platform"
    PLUGIN = "plugin"


class SpecifierKind(str, Enum):
    """How a specifier string is interpreted when installing."""

    NONE = "none"            # no specifier: install by name
    RANGE = "range"          # valid semver range: install name@range
    LOCATION = "location"    # URL, path or anything else: install verbatim


class Engine(BaseModel):
    """An ``<engine>`` element of the project descriptor."""

    name: str
    spec: str | None = None


class PluginEntry(BaseModel):
    """A ``<plugin>`` element of the project descriptor."""

    name: str
    spec: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)


class DeclaredItem(BaseModel):
    """A platform or plugin that the project declares."""

    kind: ItemKind
    name: str
    spec: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)

    @property
    def specifier_kind(self) -> SpecifierKind:
        from cordova_sync.core.services.specifier import classify

        return classify(self.spec)

    @property
    def install_source(self) -> str:
        """What to hand the install primitive (``name``, ``name@range`` or a location)."""
        from cordova_sync.core.services.specifier import install_source

        return install_source(self.name, self.spec)
