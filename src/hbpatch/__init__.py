"""Generate self-validating HBase schema patch scripts."""

from hbpatch.schema.models import ColumnFamilyDescriptor, TableDescriptor
from hbpatch.scripter import PatchScriptGenerator, generate_script
from hbpatch.types import ChangeType, PropertyChange, SchemaChange

__version__ = "0.1.0"

__all__ = [
    "ChangeType",
    "ColumnFamilyDescriptor",
    "PatchScriptGenerator",
    "PropertyChange",
    "SchemaChange",
    "TableDescriptor",
    "generate_script",
]
