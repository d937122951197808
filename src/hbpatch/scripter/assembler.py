"""Assemble complete patch scripts from schema change lists."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from hbpatch.exceptions import InvalidChangeError
from hbpatch.schema.models import NUMREGIONS, TableDescriptor
from hbpatch.scripter.formatter import comment_lines, has_line_break
from hbpatch.scripter.mutations import emit_alter, emit_create, emit_drop
from hbpatch.scripter.validations import emit_validations
from hbpatch.types import ChangeType, Phase, SchemaChange, group_by_type

__all__ = ["PatchScriptGenerator", "check_changes", "generate_script"]

logger = logging.getLogger(__name__)

RULE = "#" * 79

_SUMMARY_LABELS = {
    ChangeType.CREATE: "Create",
    ChangeType.ALTER: "Alter",
    ChangeType.DROP: "Drop",
    ChangeType.IGNORE: "Ignore",
}

# Which descriptors each change type must and must not carry.
_REQUIRED_DESCRIPTORS = {
    ChangeType.CREATE: (("new_table",), ("old_table",)),
    ChangeType.ALTER: (("old_table", "new_table"), ()),
    ChangeType.DROP: (("old_table",), ("new_table",)),
    ChangeType.IGNORE: ((), ()),
}

PREAMBLE = [
    "include Java",
    "import org.apache.hadoop.hbase.HBaseConfiguration",
    "import org.apache.hadoop.hbase.HColumnDescriptor",
    "import org.apache.hadoop.hbase.HConstants",
    "import org.apache.hadoop.hbase.HTableDescriptor",
    "import org.apache.hadoop.hbase.client.HBaseAdmin",
    "import org.apache.hadoop.hbase.client.HTable",
    "import org.apache.hadoop.hbase.util.Bytes",
    "",
    "conf = HBaseConfiguration.new",
    "admin = HBaseAdmin.new(conf)",
    "preErrors = Array.new",
    "preWarnings = Array.new",
    "postErrors = Array.new",
    "postWarnings = Array.new",
    "",
]

COMPARE_HELPER = [
    "def compare(errs, obj, action, attr, val)",
    "    if (obj.getValue(attr).to_s != val)",
    "        errs << \"Object '#{obj.getNameAsString()}', which is targeted for #{action} "
    "by this script, should have had a value of \\\"#{val}\\\" for #{attr}, "
    "but it was \\\"#{obj.getValue(attr)}\\\" instead.\"",
    "    end",
    "end",
    "",
]


def _banner(phase: Phase, title: str, *description: str) -> list[str]:
    lines = [RULE, f"# {phase.value}: {title}"]
    if description:
        lines.append("#")
        lines.extend(f"# {line}".rstrip() for line in description)
    lines.append(RULE)
    return lines


def _report(prefix: str, phase_name: str) -> list[str]:
    """Ruby lines listing every recorded error and warning for a phase."""
    errs, warns = f"{prefix}Errors", f"{prefix}Warnings"
    return [
        f'    puts "There were #{{{errs}.length}} error(s) and #{{{warns}.length}} '
        f'warning(s) during table {phase_name}:"',
        f'    {errs}.each {{ |msg| puts "Error: #{{msg}}" }}',
        f'    {warns}.each {{ |msg| puts "Warning: #{{msg}}" }}',
    ]


def _check_num_regions(change: SchemaChange, table: TableDescriptor) -> None:
    value = table.properties[NUMREGIONS]
    try:
        count = int(value)
    except ValueError:
        count = 0
    # createTable with split keys needs at least three regions
    if count < 3:
        raise InvalidChangeError(
            change.table_name,
            f"Table '{change.table_name}': {NUMREGIONS} must be an integer of at least 3, "
            f"got {value!r}",
            change.change_type,
        )


def check_changes(changes: list[SchemaChange]) -> None:
    """Verify every change is well formed before any script text is produced.

    Raises:
        InvalidChangeError: naming the first offending table and the broken rule.
    """
    seen: set[str] = set()
    for change in changes:
        name = change.table_name
        if not isinstance(name, str) or not name:
            raise InvalidChangeError(
                str(name), "Schema change has an empty table name", change.change_type
            )
        if has_line_break(name):
            raise InvalidChangeError(
                name, f"Table {name!r}: table name contains a line break", change.change_type
            )
        if not isinstance(change.change_type, ChangeType):
            raise InvalidChangeError(
                name, f"Table '{name}': unknown change type {change.change_type!r}"
            )
        if name in seen:
            raise InvalidChangeError(
                name,
                f"Table '{name}' appears more than once in the change list",
                change.change_type,
            )
        seen.add(name)

        required, forbidden = _REQUIRED_DESCRIPTORS[change.change_type]
        kind = change.change_type.value.upper()
        for attr in required:
            table = getattr(change, attr)
            if table is None:
                raise InvalidChangeError(
                    name, f"Table '{name}': {kind} change requires {attr}", change.change_type
                )
            if table.name != name:
                raise InvalidChangeError(
                    name,
                    f"Table '{name}': {attr} describes table '{table.name}'",
                    change.change_type,
                )
            for family_name in table.family_names():
                if not family_name or has_line_break(family_name):
                    raise InvalidChangeError(
                        name,
                        f"Table '{name}': {attr} has invalid column family name {family_name!r}",
                        change.change_type,
                    )
        for attr in forbidden:
            if getattr(change, attr) is not None:
                raise InvalidChangeError(
                    name, f"Table '{name}': {kind} change must not carry {attr}", change.change_type
                )

        if change.change_type is ChangeType.CREATE and change.new_table.num_regions is not None:
            _check_num_regions(change, change.new_table)


class PatchScriptGenerator:
    """Generate a self-validating HBase shell script from schema changes.

    The script runs five sections in order: a header with a summary and the
    shared setup, pre-validation ending in an abort gate, the mutations,
    post-validation ending in a non-aborting report, and a footer. Tables are
    processed in the order given unless ``sort_tables`` is set.
    """

    def __init__(self, description: Optional[str] = None, sort_tables: bool = False):
        self.description = description
        self.sort_tables = sort_tables

    def generate(self, changes: list[SchemaChange]) -> str:
        """Generate the full script text."""
        changes = self._prepare(changes)
        logger.debug(f"Generating patch script for {len(changes)} table change(s)")

        lines: list[str] = []
        lines.extend(self.header(changes))
        lines.extend(self.pre_validation(changes))
        lines.extend(self.mutation(changes))
        lines.extend(self.post_validation(changes))
        lines.extend(self.footer())

        logger.info(f"Generated patch script covering {len(changes)} table(s)")
        return "\n".join(lines) + "\n"

    def summary(self, changes: list[SchemaChange]) -> list[str]:
        """Comment lines counting and naming the tables per change type."""
        return self._summary(self._prepare(changes))

    def _summary(self, changes: list[SchemaChange]) -> list[str]:
        grouped = group_by_type(changes)

        lines = [RULE, "# HBase Schema Update Script", f"# {Phase.HEADER.value}: Summary", "#"]
        if self.description:
            lines.extend(comment_lines(self.description, "# Description: "))
            lines.append("#")
        for change_type, label in _SUMMARY_LABELS.items():
            group = grouped[change_type]
            size = len(group)
            plural = "s" if size != 1 else ""
            lines.append(f"#  * {label} {size} table{plural}{':' if size else '.'}")
            for change in group:
                lines.append(f"#       {change.table_name}")
                if change_type is not ChangeType.ALTER:
                    continue
                descriptions = sorted(
                    f"property change: {pc}" for pc in change.property_changes
                )
                for description in descriptions:
                    lines.extend(comment_lines(description, "#       "))
            lines.append("#")
        lines[-1] = RULE
        return lines

    def header(self, changes: list[SchemaChange]) -> list[str]:
        lines = self._summary(changes)
        lines.append("")
        lines.extend(_banner(Phase.HEADER, "Initialization"))
        lines.extend(PREAMBLE)
        lines.extend(_banner(Phase.HEADER, "Utility methods"))
        lines.append("")
        lines.extend(COMPARE_HELPER)
        return lines

    def pre_validation(self, changes: list[SchemaChange]) -> list[str]:
        lines = _banner(
            Phase.PRE_VALIDATION,
            "Pre Validation",
            "This step makes sure that the existing schema on the cluster matches what you",
            "think should be there. It will emit warnings for problems that won't make the",
            "script fail; it will emit errors and exit if it encounters any problems that",
            "will make the script fail.",
        )
        lines.extend(self._validations(changes, Phase.PRE_VALIDATION))
        lines.extend(
            [
                "",
                "# If any pre-validations had errors, report them and exit the script.",
                "if preErrors.length > 0",
                *_report("pre", "pre-validation"),
                '    puts "Aborting: no changes were made."',
                "    exit 1",
                "elsif preWarnings.length > 0",
                '    puts "Pre-validation successful with #{preWarnings.length} warning(s):"',
                '    preWarnings.each { |msg| puts "Warning: #{msg}" }',
                "else",
                '    puts "Pre-validation successful."',
                "end",
                "",
            ]
        )
        return lines

    def mutation(self, changes: list[SchemaChange]) -> list[str]:
        lines = _banner(
            Phase.MUTATION,
            "Modifications",
            "This step actually modifies the schema on the cluster.",
        )
        lines.append("")
        emitters: dict[ChangeType, Callable[[SchemaChange], list[str]]] = {
            ChangeType.CREATE: lambda c: emit_create(c.new_table),
            ChangeType.ALTER: lambda c: emit_alter(c.new_table),
            ChangeType.DROP: lambda c: emit_drop(c.old_table),
        }
        for change in changes:
            emitter = emitters.get(change.change_type)
            if emitter is None:
                continue
            lines.extend(emitter(change))
        lines.extend(['puts "Table creations & modifications successful."', ""])
        return lines

    def post_validation(self, changes: list[SchemaChange]) -> list[str]:
        lines = _banner(
            Phase.POST_VALIDATION,
            "Post Validation",
            "This step ensures that changes were successful, and that the resulting schema",
            "on the cluster matches what you want to be there. Problems are reported but",
            "do not stop the script, since the changes have already been applied.",
        )
        lines.extend(self._validations(changes, Phase.POST_VALIDATION))
        lines.extend(
            [
                "",
                "# Report any post-validation problems.",
                "if postErrors.length > 0",
                *_report("post", "post-validation"),
                "elsif postWarnings.length > 0",
                '    puts "Post-validation successful with #{postWarnings.length} warning(s):"',
                '    postWarnings.each { |msg| puts "Warning: #{msg}" }',
                "else",
                '    puts "Post-validation successful."',
                "end",
                "",
            ]
        )
        return lines

    def footer(self) -> list[str]:
        lines = _banner(Phase.FOOTER, "Done")
        lines.extend(['puts "Script complete. Share and enjoy."', "exit"])
        return lines

    def _validations(self, changes: list[SchemaChange], phase: Phase) -> list[str]:
        lines: list[str] = []
        for change in changes:
            lines.extend(emit_validations(change, phase))
        return lines

    def _prepare(self, changes: list[SchemaChange]) -> list[SchemaChange]:
        check_changes(changes)
        if self.sort_tables:
            return sorted(changes, key=lambda c: c.table_name)
        return list(changes)


def generate_script(
    changes: list[SchemaChange],
    description: Optional[str] = None,
    sort_tables: bool = False,
) -> str:
    """Generate a patch script for ``changes``."""
    return PatchScriptGenerator(description=description, sort_tables=sort_tables).generate(
        changes
    )
