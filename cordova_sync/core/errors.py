"""
Error taxonomy for cordova-sync.

Three kinds of failure travel through the core:

    - usage errors      (UsageError, ConfigError)  → abort the command
    - per-item failures (StepFailed)               → isolated by the serial fold
    - persistence       (PersistenceError)         → abort the command

Hook failures (HookError) abort the command as well, since hooks run
outside any item's scope.
"""

from __future__ import annotations


class CordovaSyncError(Exception):
    """Base class for every error raised by cordova-sync."""


class UsageError(CordovaSyncError):
    """The command was invoked with nothing to act on, or a bad argument."""


class ConfigError(CordovaSyncError):
    """A config store or the settings file is missing, unreadable or invalid."""


class PersistenceError(CordovaSyncError):
    """Writing a config store failed.

    Never isolated: later steps assume the write succeeded.
    """


class HookError(CordovaSyncError):
    """A hook script failed."""

    def __init__(self, event: str, script: str, message: str):
        self.event = event
        self.script = script
        super().__init__(f"Hook '{event}' failed ({script}): {message}")


class StepFailed(CordovaSyncError):
    """One step of a per-target flow failed.

    Attributes:
        step: Name of the step that failed (e.g. 'validate', 'uninstall:android').
    """

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(message)


class MissingVariablesError(StepFailed):
    """A plugin preference without default has no value."""

    def __init__(self, plugin_id: str, names: list[str], step: str = "variables"):
        self.plugin_id = plugin_id
        self.names = names
        flags = " ".join(f"--variable {n}=value" for n in names)
        super().__init__(step, f"Variable(s) missing for {plugin_id} (use: {flags})")
