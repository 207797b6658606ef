"""Adapters — bindings for the cordova, plugman, npm and hook primitives.

Public re-exports for convenient access.
"""

from cordova_sync.adapters.base import Adapter, ExecutionContext
from cordova_sync.adapters.cordova import CordovaAdapter
from cordova_sync.adapters.mock import MockAdapter
from cordova_sync.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "CordovaAdapter",
    "ExecutionContext",
    "MockAdapter",
]
