"""Main CLI entry point for the markdown page generator."""

import argparse

from src.cli.commands.convert import convert_command
from src.cli.commands.list_pages import list_command
from src.cli.config import Config
from src.utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagegen",
        description="Markdown page generator - converts markdown resources into Python page modules",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Generate a page module for every markdown file")
    convert_parser.add_argument("--config", help="Path to .env configuration file", default=None)
    convert_parser.add_argument(
        "--resources",
        nargs="+",
        metavar="DIR",
        help="Markdown resource directories (default: MARKDOWN_RESOURCE_DIRS)",
    )
    convert_parser.add_argument(
        "--generated",
        nargs="+",
        metavar="DIR",
        help="Directories of markdown produced by other generators (default: GENERATED_MARKDOWN_DIRS)",
    )
    convert_parser.add_argument("--gen-root", help="Generated source root (default: GEN_SRC_ROOT)")
    convert_parser.add_argument("--package", help="Package for generated pages (default: PAGES_PACKAGE)")
    convert_parser.add_argument(
        "--clean", action="store_true", help="Remove previously generated pages before converting"
    )
    convert_parser.add_argument("--debug", action="store_true", help="Show debug output")

    # List command
    list_parser = subparsers.add_parser("list", help="Show the page generated for each markdown file")
    list_parser.add_argument("--config", help="Path to .env configuration file", default=None)
    list_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed processing information",
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    # Convert is a build step and reports progress by default
    if args.command == "convert":
        setup_logging(verbose=True, debug=args.debug)
    else:
        setup_logging(verbose=getattr(args, "verbose", False))

    # Load configuration
    config = Config(args.config)

    # Execute command
    if args.command == "convert":
        convert_command(
            config=config,
            resource_dirs=args.resources,
            generated_dirs=args.generated,
            gen_root=args.gen_root,
            package=args.package,
            clean=args.clean,
        )
    elif args.command == "list":
        list_command(config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
