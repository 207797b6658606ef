"""Language adapters — node."""

from cordova_sync.adapters.languages.node import NodeAdapter

__all__ = ["NodeAdapter"]
