"""Emit checks that compare cluster state against expected table definitions.

Every check appends its failure message to one of four Ruby arrays declared in
the script preamble. Which array is used depends on the phase the check runs
in and on its severity: fatal failures go to ``*Errors``, advisory failures to
``*Warnings``. Only ``preErrors`` can abort a script run.
"""

from enum import Enum

from hbpatch.schema.models import TableDescriptor
from hbpatch.scripter.formatter import escape_double_quotes, render_properties
from hbpatch.types import ChangeType, Phase, SchemaChange, Severity

__all__ = [
    "Check",
    "VALIDATION_POLICY",
    "collection_name",
    "emit_absence_check",
    "emit_presence_check",
    "emit_state_match_check",
    "emit_validations",
]

INDENT = "    "


class Check(Enum):
    """Kinds of checks a validation phase can run for a table."""

    ABSENT = "absent"
    PRESENT = "present"
    STATE_MATCH = "state_match"


# Which checks run for each change type, per phase. Pre-phase state checks
# compare against the old descriptor, post-phase ones against the new one.
VALIDATION_POLICY: dict[tuple[Phase, ChangeType], tuple[tuple[Check, Severity], ...]] = {
    (Phase.PRE_VALIDATION, ChangeType.CREATE): (
        (Check.ABSENT, Severity.FATAL),
    ),
    (Phase.PRE_VALIDATION, ChangeType.ALTER): (
        (Check.PRESENT, Severity.FATAL),
        (Check.STATE_MATCH, Severity.FATAL),
    ),
    (Phase.PRE_VALIDATION, ChangeType.DROP): (
        (Check.PRESENT, Severity.FATAL),
        (Check.STATE_MATCH, Severity.ADVISORY),
    ),
    (Phase.PRE_VALIDATION, ChangeType.IGNORE): (),
    (Phase.POST_VALIDATION, ChangeType.CREATE): (
        (Check.PRESENT, Severity.FATAL),
        (Check.STATE_MATCH, Severity.FATAL),
    ),
    (Phase.POST_VALIDATION, ChangeType.ALTER): (
        (Check.PRESENT, Severity.FATAL),
        (Check.STATE_MATCH, Severity.FATAL),
    ),
    (Phase.POST_VALIDATION, ChangeType.DROP): (
        (Check.ABSENT, Severity.FATAL),
    ),
    (Phase.POST_VALIDATION, ChangeType.IGNORE): (),
}

_COLLECTIONS = {
    (Phase.PRE_VALIDATION, Severity.FATAL): "preErrors",
    (Phase.PRE_VALIDATION, Severity.ADVISORY): "preWarnings",
    (Phase.POST_VALIDATION, Severity.FATAL): "postErrors",
    (Phase.POST_VALIDATION, Severity.ADVISORY): "postWarnings",
}


def collection_name(phase: Phase, severity: Severity) -> str:
    """Name of the Ruby array a failed check is recorded into."""
    try:
        return _COLLECTIONS[(phase, severity)]
    except KeyError:
        raise ValueError(f"Phase {phase.value} does not run validations") from None


def emit_absence_check(table_name: str, severity: Severity, phase: Phase) -> list[str]:
    """Emit a check that fails if the table exists."""
    errs = collection_name(phase, severity)
    return [
        f"# Table '{table_name}' should not exist ({severity.value})",
        f'tablename = "{escape_double_quotes(table_name)}"',
        "if admin.tableExists(tablename)",
        f"{INDENT}{errs} << \"Table '#{{tablename}}' should not exist, but it does.\"",
        "end",
        "",
    ]


def emit_presence_check(table_name: str, severity: Severity, phase: Phase) -> list[str]:
    """Emit a check that fails if the table does not exist."""
    errs = collection_name(phase, severity)
    return [
        f"# Table '{table_name}' should exist ({severity.value})",
        f'tablename = "{escape_double_quotes(table_name)}"',
        "if !admin.tableExists(tablename)",
        f"{INDENT}{errs} << \"Table '#{{tablename}}' should exist, but it does not.\"",
        "end",
        "",
    ]


def emit_state_match_check(
    table: TableDescriptor, severity: Severity, phase: Phase, action: str
) -> list[str]:
    """Emit one comparison per declared table and family property.

    The comparisons are skipped at run time when the table does not exist;
    the presence check reports that case.
    """
    errs = collection_name(phase, severity)

    def compare(obj: str):
        return lambda key, value: (
            f'compare({errs}, {obj}, "{action}", '
            f'"{escape_double_quotes(key)}", "{value}")'
        )

    lines = [
        f"# Table '{table.name}' should match its expected definition ({severity.value})",
        f'tablename = "{escape_double_quotes(table.name)}"',
        "if admin.tableExists(tablename)",
        f"{INDENT}table = admin.getTableDescriptor(tablename.bytes.to_a)",
    ]
    lines.extend(INDENT + line for line in render_properties(table.properties, compare("table")))

    for family in table.column_families:
        lines.extend(
            [
                f"{INDENT}# Column family: {family.name}",
                f'{INDENT}cfname = "{escape_double_quotes(family.name)}"',
                f"{INDENT}cf = table.getFamily(cfname.bytes.to_a)",
                f"{INDENT}if cf.nil?",
                f"{INDENT * 2}{errs} << \"Column family '#{{cfname}}' of table "
                f"'#{{tablename}}' should exist, but it does not.\"",
                f"{INDENT}else",
            ]
        )
        lines.extend(
            INDENT * 2 + line
            for line in render_properties(family.properties, compare("cf"))
        )
        lines.append(f"{INDENT}end")

    lines.extend(["end", ""])
    return lines


def emit_validations(change: SchemaChange, phase: Phase) -> list[str]:
    """Emit every check the policy requires for one change in one phase."""
    lines: list[str] = []
    action = change.change_type.value
    expected = change.old_table if phase is Phase.PRE_VALIDATION else change.new_table

    for check, severity in VALIDATION_POLICY[(phase, change.change_type)]:
        if check is Check.ABSENT:
            lines.extend(emit_absence_check(change.table_name, severity, phase))
        elif check is Check.PRESENT:
            lines.extend(emit_presence_check(change.table_name, severity, phase))
        else:
            lines.extend(emit_state_match_check(expected, severity, phase, action))

    return lines
