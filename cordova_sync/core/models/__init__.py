"""
Domain models — Pydantic types for cordova-sync.

All models are re-exported here for convenient access:

    from cordova_sync.core.models import Action, Receipt, DeclaredItem
"""

from cordova_sync.core.models.action import Action, Receipt
from cordova_sync.core.models.item import (
    DeclaredItem,
    Engine,
    ItemKind,
    PluginEntry,
    SpecifierKind,
)
from cordova_sync.core.models.options import CommandOptions

__all__ = [
    # action.py
    "Action",
    "CommandOptions",
    # item.py
    "DeclaredItem",
    "Engine",
    "ItemKind",
    "PluginEntry",
    "Receipt",
    "SpecifierKind",
]
