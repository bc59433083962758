"""
CLI interface for program_docs.

Provides the command-line interface for generating, watching and cleaning
the program documentation.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from program_docs import __version__
from program_docs.builder import DocumentationBuilder, SourceNotFoundError
from program_docs.config import ConfigError, GeneratorConfig, get_config_template, load_config
from program_docs.renderers.templates import create_template_dir
from program_docs.watcher import watch

if TYPE_CHECKING:
    from typing import Sequence

logger = logging.getLogger(__name__)

BANNER = "📚 Applied QM Documentation Generator"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="program-docs",
        description="Generate documentation pages and a sidebar from an INBOX of program files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
QUICK START
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  program-docs                 # Process all files in INBOX once
  program-docs --watch         # Watch INBOX for changes and auto-regenerate
  program-docs --clean         # Remove all generated documentation

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
FILE NAMING
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  Chapt<N><Type><#>[variant].<ext>
    N       = Chapter number
    Type    = Exercise or Fig
    #       = Number
    variant = optional lowercase letter plus digits (a, b, a1, ...)

  Chapt1Exercise8.m     → Chapter 1, Exercise 8 (MATLAB)
  Chapt2Fig3a.pdf       → Chapter 2, Fig 3A (PDF)
  fermi.m               → Utilities (name outside the convention)

  Files sharing a name (Chapt1Exercise8.m/.pdf/.tex) become one program.

Supported types: .m .ipynb .tex .pdf .html .htm .txt (see --init-config)
        """,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-w", "--watch",
        action="store_true",
        help="Watch INBOX for changes and auto-regenerate",
    )
    mode.add_argument(
        "-c", "--clean",
        action="store_true",
        help="Remove all generated documentation",
    )
    mode.add_argument(
        "--init-config",
        action="store_true",
        help="Print a starter YAML config file",
    )
    mode.add_argument(
        "--export-templates",
        metavar="DIR",
        help="Write the built-in page templates to DIR for customization",
    )

    parser.add_argument(
        "-s", "--source",
        metavar="DIR",
        help="INBOX directory to read (overrides config)",
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Scan INBOX subdirectories too",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Load config from YAML file",
    )
    parser.add_argument(
        "--base-dir",
        metavar="DIR",
        help="Directory relative config paths resolve against "
             "(default: config file's directory, else current directory)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when the INBOX folder is missing",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"program-docs {__version__}",
    )

    return parser


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def build_settings(args: argparse.Namespace) -> GeneratorConfig:
    """
    Build generator settings from CLI arguments.

    Raises:
        FileNotFoundError: If --config names a missing file.
        ConfigError: If the config is invalid.
    """
    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file '{config_path}' does not exist")

    if args.base_dir:
        base_dir = Path(args.base_dir)
    elif config_path is not None:
        base_dir = config_path.resolve().parent
    else:
        base_dir = Path.cwd()

    settings = GeneratorConfig.from_dict(load_config(config_path), base_dir=base_dir)

    overrides = {}
    if args.source:
        overrides["inbox_dir"] = Path(args.source).resolve()
    if args.recursive:
        overrides["recursive"] = True
    if overrides:
        settings = settings.with_overrides(**overrides)
    return settings


def run_once(builder: DocumentationBuilder) -> bool:
    """
    Run one generation pass and print the summary.

    Returns:
        False if the INBOX folder is missing.
    """
    print(f"\n{BANNER} v{__version__}\n", flush=True)
    try:
        stats = builder.run()
    except SourceNotFoundError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        print("   Please create it and add your files there.\n", file=sys.stderr)
        return False

    settings = builder.settings
    print("─" * 60)
    print("✨ Generation Complete!\n")
    for line in stats.summary_lines(builder.type_labels()):
        print(line)
    if stats.sidebar_written:
        print(f"\n✅ Sidebar configuration updated: {settings.sidebar_path}")
    print("\n📂 Output Structure:")
    print(f"   docs:   {settings.docs_dir}/chapter<N>/<programId>/")
    print(f"   static: {settings.static_dir}/<type>/<programId>/\n", flush=True)
    return True


def run_clean(builder: DocumentationBuilder) -> None:
    """Remove generated output and report what was removed."""
    print("\n🧹 Cleaning generated documentation...\n")
    result = builder.clean()
    for path in result.removed:
        print(f"🗑️  Removed: {path}/")
    for error in result.errors:
        print(f"   ! {error}", file=sys.stderr)
    print(f"\n✨ Cleaned {len(result.removed)} folder(s)\n", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    # Handle --init-config: just output the template and exit
    if args.init_config:
        print(get_config_template())
        return 0

    if args.export_templates:
        for path in create_template_dir(Path(args.export_templates)):
            print(f"  + {path}")
        return 0

    try:
        settings = build_settings(args)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"INBOX: {settings.inbox_dir}", file=sys.stderr)
        print(f"  docs: {settings.docs_dir}", file=sys.stderr)
        print(f"  static: {settings.static_dir}", file=sys.stderr)
        print(f"  sidebar: {settings.sidebar_path}", file=sys.stderr)

    builder = DocumentationBuilder(settings)

    if args.clean:
        run_clean(builder)
        return 0

    if args.watch:
        print("\n👀 Watch Mode: Monitoring INBOX for changes...\n", flush=True)
        if not watch(builder, lambda: run_once(builder)):
            print(f"❌ Cannot watch: INBOX folder not found: {settings.inbox_dir}", file=sys.stderr)
            return 1 if args.strict else 0
        return 0

    ok = run_once(builder)
    return 1 if (args.strict and not ok) else 0


if __name__ == "__main__":
    sys.exit(main())
