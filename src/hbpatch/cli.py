"""Command-line interface for hbpatch."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from hbpatch.config import Config
from hbpatch.exceptions import ConfigError
from hbpatch.schema.loader import load_changes
from hbpatch.scripter.assembler import PatchScriptGenerator, check_changes
from hbpatch.types import group_by_type

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="hbpatch",
        description="HBase schema patch script generator",
    )
    parser.add_argument("--profile", help="Config file profile to use")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate a patch script")
    generate_parser.add_argument("--changes", type=Path, help="Change list YAML file or directory")
    generate_parser.add_argument(
        "--output",
        type=Path,
        help="Output file path (default: stdout)",
    )
    generate_parser.add_argument("--description", help="Description shown in the script header")
    generate_parser.add_argument(
        "--sort-tables",
        action="store_true",
        default=None,
        help="Process tables sorted by name instead of change list order",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a change list")
    validate_parser.add_argument("--changes", type=Path, help="Change list YAML file or directory")

    summary_parser = subparsers.add_parser("summary", help="Show the script summary only")
    summary_parser.add_argument("--changes", type=Path, help="Change list YAML file or directory")

    args = parser.parse_args(argv)

    try:
        config = Config.from_env(
            changes_path=str(args.changes) if args.changes else None,
            output_path=str(args.output) if getattr(args, "output", None) else None,
            description=getattr(args, "description", None),
            sort_tables=getattr(args, "sort_tables", None),
            log_level="DEBUG" if args.verbose else None,
            profile=args.profile,
        )
        config.validate_for_generate()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, format="%(message)s")

    if args.command == "generate":
        return cmd_generate(config)
    elif args.command == "validate":
        return cmd_validate(config)
    elif args.command == "summary":
        return cmd_summary(config)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return 1


def cmd_generate(config: Config) -> int:
    """Generate a patch script from a change list."""
    try:
        changes = load_changes(Path(config.changes_path))
        generator = PatchScriptGenerator(
            description=config.description,
            sort_tables=config.sort_tables,
        )
        script = generator.generate(changes)

        if config.output_path:
            output = Path(config.output_path)
            output.write_text(script)
            logger.info(f"Wrote patch script to {output}")
        else:
            sys.stdout.write(script)
        return 0
    except Exception as e:
        print(f"Generation error: {e}", file=sys.stderr)
        return 1


def cmd_validate(config: Config) -> int:
    """Load and check a change list without generating anything."""
    try:
        changes = load_changes(Path(config.changes_path))
        check_changes(changes)
    except Exception as e:
        print(f"Validation error: {e}", file=sys.stderr)
        return 1

    grouped = group_by_type(changes)
    print(f"Validated {len(changes)} table changes:")
    for change_type, group in grouped.items():
        print(f"  - {change_type.value}: {len(group)}")
    return 0


def cmd_summary(config: Config) -> int:
    """Print the summary block of the script that would be generated."""
    try:
        changes = load_changes(Path(config.changes_path))
        generator = PatchScriptGenerator(
            description=config.description,
            sort_tables=config.sort_tables,
        )
        print("\n".join(generator.summary(changes)))
        return 0
    except Exception as e:
        print(f"Summary error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
