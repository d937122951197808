"""Exception classes for hbpatch."""

from typing import Optional

from hbpatch.types import ChangeType

__all__ = [
    "HbpatchError",
    "ChangeListLoadError",
    "ScriptGenerationError",
    "InvalidChangeError",
    "ConfigError",
]


class HbpatchError(Exception):
    """Base exception for hbpatch."""


class ChangeListLoadError(HbpatchError):
    """Error loading a change list file."""


class ScriptGenerationError(HbpatchError):
    """Error generating a patch script."""


class InvalidChangeError(ScriptGenerationError):
    """A schema change violates an input invariant."""

    def __init__(
        self,
        table_name: str,
        message: str,
        change_type: Optional[ChangeType] = None,
    ):
        self.table_name = table_name
        self.change_type = change_type
        super().__init__(message)


class ConfigError(HbpatchError):
    """Error in configuration."""
