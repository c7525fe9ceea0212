"""
Module Finder - Fast file lookup using the STRUCTURE.json intentIndex.

Usage:
    find-module <keyword>      # Search by feature/concept
    find-module --list         # List all features

Examples:
    find-module github
    find-module terminal
    find-module tasks
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from ..config.loader import CompanionConfig, ConfigLoader
from ..logger import get_logger
from ..logging_config import configure_from_config, configure_from_environment
from .index import StructureError, load_structure
from .search import FeatureListing, MatchGroup, ModuleSearchEngine

PROG = "find-module"
FILE_COLUMN_WIDTH = 42
FEATURE_COLUMN_WIDTH = 20

USAGE = (
    f"Usage: {PROG} <keyword>\n"
    f"       {PROG} --list"
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Keyword words are not declared here: anything that is not one of the
    options below, including words that start with "-", is keyword text.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s [--structure PATH] [--project-root DIR] (--list | keyword ...)",
        description="Find source modules by feature keyword using STRUCTURE.json",
        epilog="Multiple keyword words are joined with spaces.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List every feature in the intent index",
    )
    parser.add_argument(
        "--structure",
        metavar="PATH",
        help="Path to the structural map (default: from config)",
    )
    parser.add_argument(
        "--project-root",
        metavar="DIR",
        help="Project root used to resolve config and the structural map",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse options and collect every other word, in order, as the keyword."""
    parser = create_parser()
    args, words = parser.parse_known_args(argv)
    if "--" in words:
        words.remove("--")
    args.keyword = words
    return args


def format_results(groups: List[MatchGroup], keyword: str) -> str:
    """Render match groups as printed by the CLI."""
    if not groups:
        return (
            f'No modules found for "{keyword}"\n'
            f"Try: {PROG} --list\n"
        )

    lines = []
    for group in groups:
        lines.append(f"Feature: {group.feature}")
        for mod in group.modules:
            desc = f" — {mod.description}" if mod.description else ""
            lines.append(f"  {mod.file.ljust(FILE_COLUMN_WIDTH)}{desc}")
        if group.channels:
            lines.append(f"  IPC: {', '.join(group.channels)}")
        lines.append("")
    return "\n".join(lines) + "\n"


def format_listing(listing: FeatureListing) -> str:
    """Render the --list output."""
    lines = ["Available features:", ""]
    for feature, files in listing.features:
        lines.append(f"  {feature.ljust(FEATURE_COLUMN_WIDTH)} → {', '.join(files)}")
    lines.append("")
    lines.append(
        f"Total: {listing.feature_count} features, {listing.module_count} modules"
    )
    return "\n".join(lines) + "\n"


def resolve_structure_path(
    args: argparse.Namespace,
    config: Optional[CompanionConfig] = None,
) -> Path:
    """Pick the structural map from --structure or the layered config."""
    if args.structure:
        return Path(args.structure)
    loader = ConfigLoader(project_root=args.project_root)
    return loader.get_structure_path(config)


def run(
    args: argparse.Namespace,
    out: Optional[TextIO] = None,
    config: Optional[CompanionConfig] = None,
) -> int:
    """Execute a parsed find-module invocation.

    Raises:
        StructureError: If the map is missing, unparseable or has no intentIndex
    """
    out = out or sys.stdout
    engine = ModuleSearchEngine(load_structure(resolve_structure_path(args, config)))

    if args.list:
        out.write(format_listing(engine.list_features()))
        return 0

    keyword = " ".join(args.keyword)
    out.write(format_results(engine.search(keyword), keyword))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 when the structural map is unusable).
    """
    configure_from_environment()
    args = parse_args(argv)

    if not args.list and not args.keyword:
        print(USAGE)
        return 0

    config = ConfigLoader(project_root=args.project_root).load()
    configure_from_config(config)

    try:
        return run(args, config=config)
    except StructureError as e:
        get_logger().error("cli", "structure_unusable", {"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
