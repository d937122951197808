"""Patch script generation."""

from hbpatch.scripter.assembler import (
    PatchScriptGenerator,
    check_changes,
    generate_script,
)
from hbpatch.scripter.formatter import (
    escape_double_quotes,
    render_properties,
    sorted_properties,
)
from hbpatch.scripter.validations import VALIDATION_POLICY, Check

__all__ = [
    "Check",
    "PatchScriptGenerator",
    "VALIDATION_POLICY",
    "check_changes",
    "escape_double_quotes",
    "generate_script",
    "render_properties",
    "sorted_properties",
]
