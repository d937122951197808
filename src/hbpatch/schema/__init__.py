"""Table descriptor model and change-list loading."""

from hbpatch.schema.models import (
    NUMREGIONS,
    ColumnFamilyDescriptor,
    TableDescriptor,
)

__all__ = [
    "NUMREGIONS",
    "ColumnFamilyDescriptor",
    "TableDescriptor",
]
