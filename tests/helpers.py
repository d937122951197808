"""Shared test helpers for hbpatch tests."""

from pathlib import Path

from hbpatch.schema.models import ColumnFamilyDescriptor, TableDescriptor
from hbpatch.types import ChangeType, PropertyChange, SchemaChange

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "changes"


def make_table(
    name: str,
    properties: dict[str, str] | None = None,
    families: dict[str, dict[str, str]] | None = None,
) -> TableDescriptor:
    """Create a TableDescriptor; families keep the dict's insertion order."""
    return TableDescriptor(
        name=name,
        properties=properties or {},
        column_families=tuple(
            ColumnFamilyDescriptor(name=cf, properties=props)
            for cf, props in (families or {}).items()
        ),
    )


def create_change(name: str, **table_kwargs) -> SchemaChange:
    return SchemaChange(
        table_name=name,
        change_type=ChangeType.CREATE,
        new_table=make_table(name, **table_kwargs),
    )


def alter_change(
    name: str,
    old: TableDescriptor | None = None,
    new: TableDescriptor | None = None,
    property_changes: tuple[PropertyChange, ...] = (),
) -> SchemaChange:
    return SchemaChange(
        table_name=name,
        change_type=ChangeType.ALTER,
        old_table=old or make_table(name, {"MAX_FILESIZE": "1"}, {"d": {"VERSIONS": "3"}}),
        new_table=new or make_table(name, {"MAX_FILESIZE": "2"}, {"d": {"VERSIONS": "1"}}),
        property_changes=property_changes,
    )


def drop_change(name: str, **table_kwargs) -> SchemaChange:
    return SchemaChange(
        table_name=name,
        change_type=ChangeType.DROP,
        old_table=make_table(name, **table_kwargs),
    )


def ignore_change(name: str) -> SchemaChange:
    return SchemaChange(table_name=name, change_type=ChangeType.IGNORE)


def section(script: str, start: str, end: str) -> str:
    """Text of the script between two section banners."""
    begin = script.index(start)
    return script[begin : script.index(end, begin)]
