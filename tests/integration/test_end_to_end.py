"""End-to-end: YAML change list -> patch script."""

from hbpatch.cli import main
from hbpatch.schema.loader import load_changes
from hbpatch.scripter.assembler import PatchScriptGenerator
from tests.helpers import FIXTURES_PATH, section

PATCH_YAML = FIXTURES_PATH / "patch.yaml"

EXPECTED_CREATE = """\
# Create table: users
tablename = "users"
table = HTableDescriptor.new(tablename)
# set table properties
table.setValue("MAX_FILESIZE", "1073741824")
table.setValue("NUMREGIONS", "16")
cf = HColumnDescriptor.new("d")
cf.setValue("COMPRESSION", "SNAPPY")
cf.setValue("VERSIONS", "1")
table.addFamily(cf)
cf = HColumnDescriptor.new("a")
cf.setValue("IN_MEMORY", "true")
table.addFamily(cf)
puts "Creating table '#{tablename}' ..."
admin.createTable(table, Bytes.toBytes("\\x00"), Bytes.toBytes("\\xFF"), 16)
puts "Created table '#{tablename}'"
"""

EXPECTED_DROP_PRE_CHECK = """\
# Table 'legacy' should match its expected definition (advisory)
tablename = "legacy"
if admin.tableExists(tablename)
    table = admin.getTableDescriptor(tablename.bytes.to_a)
    # Column family: x
    cfname = "x"
    cf = table.getFamily(cfname.bytes.to_a)
    if cf.nil?
        preWarnings << "Column family '#{cfname}' of table '#{tablename}' should exist, but it does not."
    else
        compare(preWarnings, cf, "drop", "TTL", "86400")
    end
end
"""


class TestEndToEnd:
    """Generate a script from the fixture change list."""

    def test_create_sequence_golden(self):
        script = PatchScriptGenerator().generate(load_changes(PATCH_YAML))
        assert EXPECTED_CREATE in script

    def test_drop_pre_check_golden(self):
        script = PatchScriptGenerator().generate(load_changes(PATCH_YAML))
        pre = section(script, "# PRE_VALIDATION:", "# MUTATION:")
        assert EXPECTED_DROP_PRE_CHECK in pre

    def test_summary_golden(self):
        lines = PatchScriptGenerator().summary(load_changes(PATCH_YAML))
        assert lines == [
            "#" * 79,
            "# HBase Schema Update Script",
            "# HEADER: Summary",
            "#",
            "#  * Create 1 table:",
            "#       users",
            "#",
            "#  * Alter 1 table:",
            "#       events",
            "#       property change: MAX_FILESIZE: 268435456 -> 1073741824",
            "#       property change: e.VERSIONS: '3' -> '1'",
            "#",
            "#  * Drop 1 table:",
            "#       legacy",
            "#",
            "#  * Ignore 1 table:",
            "#       audit",
            "#" * 79,
        ]

    def test_cli_output_matches_library(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HBPATCH_CONFIG", str(tmp_path / "missing.cfg"))
        monkeypatch.delenv("HBPATCH_SORT_TABLES", raising=False)
        output = tmp_path / "patch.rb"

        assert main(["generate", "--changes", str(PATCH_YAML), "--output", str(output)]) == 0
        assert output.read_text() == PatchScriptGenerator().generate(load_changes(PATCH_YAML))

    def test_generation_is_repeatable(self):
        first = PatchScriptGenerator().generate(load_changes(PATCH_YAML))
        second = PatchScriptGenerator().generate(load_changes(PATCH_YAML))
        assert first == second
