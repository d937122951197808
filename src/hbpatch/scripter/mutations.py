"""Emit the statements that create, alter and drop tables."""

from hbpatch.schema.models import TableDescriptor
from hbpatch.scripter.formatter import escape_double_quotes, render_properties

__all__ = ["emit_create", "emit_alter", "emit_drop"]


def _set_value(obj: str):
    return lambda key, value: f'{obj}.setValue("{escape_double_quotes(key)}", "{value}")'


def _descriptor_body(table: TableDescriptor) -> list[str]:
    """Table properties, then each family with its properties, attached in order."""
    lines = ["# set table properties"]
    lines.extend(render_properties(table.properties, _set_value("table")))
    for family in table.column_families:
        lines.append(f'cf = HColumnDescriptor.new("{escape_double_quotes(family.name)}")')
        lines.extend(render_properties(family.properties, _set_value("cf")))
        lines.append("table.addFamily(cf)")
    return lines


def emit_create(new_table: TableDescriptor) -> list[str]:
    """Emit statements building and creating a new table.

    A table carrying a NUMREGIONS property is pre-split across the full key
    range into that many regions.
    """
    lines = [
        f"# Create table: {new_table.name}",
        f'tablename = "{escape_double_quotes(new_table.name)}"',
        "table = HTableDescriptor.new(tablename)",
    ]
    lines.extend(_descriptor_body(new_table))
    lines.append("puts \"Creating table '#{tablename}' ...\"")

    num_regions = new_table.num_regions
    if num_regions is not None:
        lines.append(
            'admin.createTable(table, Bytes.toBytes("\\x00"), Bytes.toBytes("\\xFF"), '
            f"{int(num_regions)})"
        )
    else:
        lines.append("admin.createTable(table)")

    lines.extend(["puts \"Created table '#{tablename}'\"", ""])
    return lines


def emit_alter(new_table: TableDescriptor) -> list[str]:
    """Emit statements rewriting a live table to match ``new_table``.

    The whole descriptor is re-applied, not a delta. Tables must be disabled
    while they are modified.
    """
    lines = [
        f"# Modify table: {new_table.name}",
        f'tablename = "{escape_double_quotes(new_table.name)}"',
        "table = admin.getTableDescriptor(tablename.bytes.to_a)",
    ]
    lines.extend(_descriptor_body(new_table))
    lines.extend(
        [
            "puts \"Disabling table '#{tablename}' prior to modification ...\"",
            "admin.disableTable(tablename)",
            "puts \"Modifying table '#{tablename}' ...\"",
            "admin.modifyTable(tablename.bytes.to_a, table)",
            "puts \"Enabling table '#{tablename}' after modification ...\"",
            "admin.enableTable(tablename)",
            "puts \"Modified table '#{tablename}'\"",
            "",
        ]
    )
    return lines


def emit_drop(old_table: TableDescriptor) -> list[str]:
    """Emit statements disabling (if needed) and deleting an existing table."""
    return [
        f"# Drop table: {old_table.name}",
        f'tablename = "{escape_double_quotes(old_table.name)}"',
        "if admin.tableExists(tablename)",
        "    if admin.isTableEnabled(tablename)",
        "        puts \"Disabling table '#{tablename}' prior to dropping it ...\"",
        "        admin.disableTable(tablename)",
        "    end",
        "    puts \"Dropping table '#{tablename}' ...\"",
        "    admin.deleteTable(tablename)",
        "    puts \"Dropped table '#{tablename}'\"",
        "end",
        "",
    ]
