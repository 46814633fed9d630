"""Command-line entry point for ``crud-gen``.

Usage::

    crud-gen init
    crud-gen generate schemas/product.json --force
    crud-gen generate schemas/product.yaml --only api types
    crud-gen list
    crud-gen clean Product --yes
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

from rich.panel import Panel
from rich.prompt import Confirm

from crudgen import __version__
from crudgen.config import (
    CONFIG_FILENAME,
    config_exists,
    default_config,
    load_config,
    manifest_path,
    save_config,
)
from crudgen.errors import CrudGenError, GenerationError, SchemaValidationError
from crudgen.generators import ALL_PARTS, GenerateOptions, NullFormatter, PrettierFormatter
from crudgen.ledger import GenerationLedger
from crudgen.pipeline import GenerationPipeline
from crudgen.schema import load_entity
from crudgen.utils import (
    console,
    print_dim,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def init_command(project_root: Path, force: bool = False) -> int:
    """Write the default config and an empty manifest."""
    console.print(Panel("[bold]Initializing crud-gen...[/bold]", style="cyan"))

    if await config_exists(project_root) and not force:
        print_warning("Configuration already exists. Use --force to overwrite.")
        return 0

    if not (project_root / "package.json").exists():
        print_error("No package.json found. Please run this command in a Node.js project.")
        return 1

    config_file = await save_config(project_root, default_config())
    print_success(f"Created {config_file.relative_to(project_root)}")

    manifest_file = manifest_path(project_root)
    if force or not manifest_file.exists():
        await save_json({}, manifest_file)
        print_success(f"Created {manifest_file.relative_to(project_root)}")

    console.print()
    print_dim("Next steps:")
    print_dim("  1. Create an entity schema file (e.g., schemas/user.json)")
    print_dim("  2. Run: crud-gen generate schemas/user.json")
    return 0


async def generate_command(
    project_root: Path,
    entity_file: str,
    options: GenerateOptions,
    format_code: bool = True,
) -> int:
    """Validate the entity, then run the generation pipeline."""
    console.print(Panel("[bold]Starting code generation...[/bold]", style="cyan"))

    entity_path = (project_root / entity_file).resolve()
    try:
        schema = await load_entity(entity_path)
    except SchemaValidationError as e:
        print_error("Entity validation failed:")
        print_error(str(e))
        return 1
    print_success(f"Validated entity: {schema.entity}")

    try:
        config = await load_config(project_root)
    except CrudGenError as e:
        print_error(str(e))
        return 1
    print_success("Loaded configuration")

    formatter = PrettierFormatter(project_root) if format_code else NullFormatter()
    pipeline = GenerationPipeline(project_root, config, formatter=formatter)

    try:
        result = await pipeline.run(schema, options)
    except GenerationError as e:
        print_error(str(e))
        return 1

    console.print()
    print_success(f"Generated {len(pipeline.ledger.files)} file(s) for entity '{result.entity}'")
    if result.skipped:
        print_warning(f"Skipped {len(result.skipped)} existing file(s)")
    for path in pipeline.ledger.files:
        print_dim(f"  - {path}")
    return 0


async def list_command(project_root: Path) -> int:
    """Show every entity recorded in the manifest."""
    ledger = GenerationLedger(project_root)
    try:
        manifest = await ledger.load()
    except CrudGenError as e:
        print_error(str(e))
        return 1

    if not manifest:
        print_dim("No entities have been generated yet.")
        print_dim("Run: crud-gen generate <entity-file>")
        return 0

    rows = [
        (name, str(len(entry.files)), _format_timestamp(entry.last_modified))
        for name, entry in manifest.items()
    ]
    print_summary_table(rows, ("Entity", "Files", "Last Modified"), title="Generated Entities")
    print_dim(f"Total: {len(manifest)} entity(ies)")
    return 0


async def clean_command(project_root: Path, entity_name: str, assume_yes: bool = False) -> int:
    """Remove the generated files of *entity_name* and its manifest entry."""
    ledger = GenerationLedger(project_root)
    try:
        entry = await ledger.entry(entity_name)
    except CrudGenError as e:
        print_error(str(e))
        return 1

    if entry is None:
        print_warning(f"Entity '{entity_name}' not found in manifest.")
        print_dim("Run: crud-gen list to see available entities.")
        return 0

    console.print("Files to be removed:")
    for path in entry.files:
        print_dim(f"  - {path}")

    if not assume_yes and not Confirm.ask(
        f"Are you sure you want to delete {len(entry.files)} file(s)?", default=False
    ):
        print_warning("Aborted.")
        return 0

    removed = await ledger.remove_entity(entity_name)
    print_success(f"Removed {len(removed)} file(s) for entity '{entity_name}'")
    return 0


def _format_timestamp(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%b %d, %Y %H:%M")
    except ValueError:
        return value


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crud-gen",
        description="Generate CRUD code for multi-tenant SaaS applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  crud-gen init\n"
            "  crud-gen generate schemas/product.json --skip tests\n"
            "  crud-gen clean Product --yes\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project-root",
        default=".",
        help="Project directory containing " + CONFIG_FILENAME + " (default: .)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Initialize crud-gen configuration in the project")
    init.add_argument("--force", action="store_true", help="Overwrite existing configuration")

    generate = sub.add_parser("generate", help="Generate CRUD code for an entity")
    generate.add_argument("entity_file", help="Path to the entity JSON or YAML file")
    generate.add_argument(
        "--only", nargs="+", choices=ALL_PARTS, metavar="PART",
        help="Only generate these parts (" + ", ".join(ALL_PARTS) + ")",
    )
    generate.add_argument(
        "--skip", nargs="+", choices=ALL_PARTS, default=[], metavar="PART",
        help="Skip these parts",
    )
    generate.add_argument("--force", action="store_true", help="Overwrite existing files")
    generate.add_argument(
        "--no-format", dest="format", action="store_false", help="Skip Prettier formatting"
    )
    generate.add_argument(
        "--prune", action="store_true",
        help="Delete files from a previous run that this run no longer produces",
    )

    sub.add_parser("list", help="List all generated entities")

    clean = sub.add_parser("clean", help="Remove generated files for an entity")
    clean.add_argument("entity", help="Entity name to clean")
    clean.add_argument("--yes", action="store_true", help="Skip confirmation prompt")

    return parser


async def dispatch(args: argparse.Namespace) -> int:
    project_root = Path(args.project_root).resolve()

    if args.command == "init":
        return await init_command(project_root, force=args.force)
    if args.command == "generate":
        options = GenerateOptions(
            force=args.force, only=args.only, skip=list(args.skip), prune=args.prune
        )
        return await generate_command(
            project_root, args.entity_file, options, format_code=args.format
        )
    if args.command == "list":
        return await list_command(project_root)
    if args.command == "clean":
        return await clean_command(project_root, args.entity, assume_yes=args.yes)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``crud-gen`` and ``python -m crudgen``."""
    args = build_parser().parse_args(argv)
    exit_code = asyncio.run(dispatch(args))
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
