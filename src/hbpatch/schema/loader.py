"""Load schema change lists from YAML files."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from hbpatch.exceptions import ChangeListLoadError
from hbpatch.schema.models import ColumnFamilyDescriptor, TableDescriptor
from hbpatch.types import ChangeType, PropertyChange, SchemaChange

logger = logging.getLogger(__name__)

VALID_CHANGE_FIELDS = {
    "table",
    "type",
    "old_table",
    "new_table",
    "property_changes",
}

VALID_TABLE_FIELDS = {
    "name",
    "properties",
    "column_families",
}

VALID_FAMILY_FIELDS = {
    "name",
    "properties",
}

VALID_PROPERTY_CHANGE_FIELDS = {
    "family",
    "key",
    "old",
    "new",
}


def load_changes(changes_path: Path) -> list[SchemaChange]:
    """Load a change list from a YAML file or a directory of YAML files."""
    if changes_path.is_file():
        changes = _load_single_file(changes_path)
    elif changes_path.is_dir():
        changes = _load_directory(changes_path)
    else:
        raise ChangeListLoadError(f"Change list path does not exist: {changes_path}")
    logger.debug(f"Loaded {len(changes)} change(s) from {changes_path}")
    return changes


def _load_directory(directory: Path) -> list[SchemaChange]:
    """Concatenate the change lists of every YAML file, by filename."""
    changes: list[SchemaChange] = []
    for yaml_file in sorted(directory.glob("*.yaml")):
        changes.extend(_load_single_file(yaml_file))
    return changes


def _load_single_file(file_path: Path) -> list[SchemaChange]:
    try:
        with open(file_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ChangeListLoadError(f"Invalid YAML in {file_path}: {e}") from e

    if data is None:
        raise ChangeListLoadError(f"Empty YAML file: {file_path}")
    if not isinstance(data, dict) or "changes" not in data:
        raise ChangeListLoadError(f"{file_path}: expected a top-level 'changes' list")

    entries = data["changes"] or []
    if not isinstance(entries, list):
        raise ChangeListLoadError(f"{file_path}: 'changes' must be a list")
    return [_parse_change(entry) for entry in entries]


def _check_fields(data: Any, valid: set[str], what: str) -> None:
    if not isinstance(data, dict):
        raise ChangeListLoadError(f"{what} must be a mapping, got {type(data).__name__}")
    unknown_fields = set(data.keys()) - valid
    if unknown_fields:
        raise ChangeListLoadError(
            f"Unknown field(s) in {what}: {', '.join(sorted(unknown_fields))}"
        )


def _parse_change(data: dict) -> SchemaChange:
    """Parse one table change from a dictionary."""
    _check_fields(data, VALID_CHANGE_FIELDS, "change definition")

    name = data.get("table")
    if not name:
        raise ChangeListLoadError("Change definition missing 'table' field")
    name = str(name)

    type_name = data.get("type")
    if not type_name:
        raise ChangeListLoadError(f"Change for table '{name}' missing 'type' field")
    try:
        change_type = ChangeType(str(type_name).lower())
    except ValueError:
        valid = ", ".join(ct.value for ct in ChangeType)
        raise ChangeListLoadError(
            f"Unknown change type '{type_name}' for table '{name}' (expected one of: {valid})"
        ) from None

    return SchemaChange(
        table_name=name,
        change_type=change_type,
        old_table=_parse_table(data.get("old_table"), name),
        new_table=_parse_table(data.get("new_table"), name),
        property_changes=tuple(
            _parse_property_change(pc) for pc in data.get("property_changes") or []
        ),
    )


def _parse_table(data: Optional[dict], default_name: str) -> Optional[TableDescriptor]:
    """Parse a table descriptor; the name defaults to the change's table."""
    if data is None:
        return None
    _check_fields(data, VALID_TABLE_FIELDS, f"table '{default_name}'")

    families = []
    for family_data in data.get("column_families") or []:
        _check_fields(family_data, VALID_FAMILY_FIELDS, f"column family of '{default_name}'")
        family_name = family_data.get("name")
        if not family_name:
            raise ChangeListLoadError(
                f"Column family definition in table '{default_name}' missing 'name' field"
            )
        families.append(
            ColumnFamilyDescriptor(
                name=str(family_name),
                properties=_parse_properties(
                    family_data.get("properties"), f"{default_name}:{family_name}"
                ),
            )
        )

    names = [f.name for f in families]
    for family_name in names:
        if names.count(family_name) > 1:
            raise ChangeListLoadError(
                f"Duplicate column family '{family_name}' in table '{default_name}'"
            )

    return TableDescriptor(
        name=str(data.get("name") or default_name),
        properties=_parse_properties(data.get("properties"), default_name),
        column_families=tuple(families),
    )


def _parse_properties(data: Any, owner: str) -> dict[str, str]:
    """Stringify a property mapping; YAML scalars may arrive as ints or bools."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ChangeListLoadError(f"Properties of '{owner}' must be a mapping")
    nulls = sorted(str(k) for k, v in data.items() if v is None)
    if nulls:
        raise ChangeListLoadError(
            f"Null property value(s) in '{owner}': {', '.join(nulls)}"
        )
    return {str(k): _scalar(v) for k, v in data.items()}


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_property_change(data: Any) -> PropertyChange:
    """Parse a property change: free text, or family/key/old/new fields."""
    if isinstance(data, str):
        return PropertyChange(description=data)
    _check_fields(data, VALID_PROPERTY_CHANGE_FIELDS, "property change")
    if not data.get("key"):
        raise ChangeListLoadError("Property change missing 'key' field")
    old, new = data.get("old"), data.get("new")
    return PropertyChange(
        owner=data.get("family"),
        key=str(data["key"]),
        old_value=None if old is None else _scalar(old),
        new_value=None if new is None else _scalar(new),
    )
