"""Table and column family descriptors."""

from dataclasses import dataclass, field
from typing import Optional

# Table property holding the number of regions to pre-split a new table into.
NUMREGIONS = "NUMREGIONS"


@dataclass(frozen=True)
class ColumnFamilyDescriptor:
    """Column family definition: a name plus its property map."""

    name: str
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TableDescriptor:
    """Table definition.

    Column families keep the order they were given in; property maps are
    unordered and are always rendered sorted by key.
    """

    name: str
    properties: dict[str, str] = field(default_factory=dict)
    column_families: tuple[ColumnFamilyDescriptor, ...] = field(default_factory=tuple)

    @property
    def num_regions(self) -> Optional[str]:
        """Pre-split region count, if the table asks for one."""
        return self.properties.get(NUMREGIONS)

    def family_names(self) -> list[str]:
        """Column family names in descriptor order."""
        return [family.name for family in self.column_families]
