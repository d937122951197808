"""Core type definitions for hbpatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypeAlias

from hbpatch.schema.models import TableDescriptor

TableName: TypeAlias = str
FamilyName: TypeAlias = str

__all__ = [
    "TableName",
    "FamilyName",
    "ChangeType",
    "Severity",
    "Phase",
    "PropertyChange",
    "SchemaChange",
    "group_by_type",
]


class ChangeType(Enum):
    """Kind of change applied to a single table."""

    CREATE = "create"
    ALTER = "alter"
    DROP = "drop"
    IGNORE = "ignore"


class Severity(Enum):
    """How a failed check is treated by the generated script."""

    FATAL = "fatal"
    ADVISORY = "advisory"


class Phase(Enum):
    """Sections of a generated script, in emission order."""

    HEADER = "HEADER"
    PRE_VALIDATION = "PRE_VALIDATION"
    MUTATION = "MUTATION"
    POST_VALIDATION = "POST_VALIDATION"
    FOOTER = "FOOTER"


@dataclass(frozen=True)
class PropertyChange:
    """A single changed property, used only for reporting.

    Either build it from structured fields (owner/key/old/new) or pass a
    ready-made ``description``; ``str()`` returns the text shown in the header.
    """

    description: Optional[str] = None
    owner: Optional[str] = None
    key: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    def __str__(self) -> str:
        if self.description is not None:
            return self.description
        target = f"{self.owner}.{self.key}" if self.owner else str(self.key)
        return f"{target}: {self.old_value!r} -> {self.new_value!r}"


@dataclass(frozen=True)
class SchemaChange:
    """The change to apply to one table, as produced by the schema differ."""

    table_name: TableName
    change_type: ChangeType
    old_table: Optional[TableDescriptor] = None
    new_table: Optional[TableDescriptor] = None
    property_changes: tuple[PropertyChange, ...] = field(default_factory=tuple)


def group_by_type(changes: list[SchemaChange]) -> dict[ChangeType, list[SchemaChange]]:
    """Group changes by type, keeping input order within each group.

    Every ChangeType is present in the result, possibly with an empty list.
    """
    grouped: dict[ChangeType, list[SchemaChange]] = {ct: [] for ct in ChangeType}
    for change in changes:
        grouped[change.change_type].append(change)
    return grouped
