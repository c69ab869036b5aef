"""Main CLI entry point for the markup-tree command-line tool.

Renders JSON node descriptions to markup and round-trips raw attribute
strings through the parser and escaper.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from markup_tree import __version__
from markup_tree.shared import (
    AttributeParseError,
    ConfigError,
    Language,
    MarkupConfig,
    MarkupError,
    configure_logging,
    get_logger,
)
from markup_tree.tree import Node
from markup_tree.writer import Writer

LANGUAGE_CHOICES = [language.value for language in Language]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-tree",
        description="Render markup trees described as JSON"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a JSON tree file")
    render_parser.add_argument(
        "path",
        type=Path,
        help="JSON file in the Node.to_dict format"
    )
    render_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file in the MarkupConfig.to_json format"
    )
    render_parser.add_argument(
        "--language", "-l",
        choices=LANGUAGE_CHOICES,
        help="Output language, overrides the configuration (default: html5)"
    )
    render_parser.add_argument(
        "--self-closing",
        nargs="+",
        default=[],
        metavar="TAG",
        help="Additional self-closing tags"
    )
    render_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    render_parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Print the render summary as JSON to stderr"
    )

    # Attributes command
    attributes_parser = subparsers.add_parser(
        "attributes", help="Parse and re-emit a raw attribute string"
    )
    attributes_parser.add_argument(
        "text",
        help='Attribute string, e.g. \'class="a b" id="x"\''
    )
    attributes_parser.add_argument(
        "--language", "-l",
        choices=LANGUAGE_CHOICES,
        default=Language.HTML5.value,
        help="Output language (default: html5)"
    )
    attributes_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed attributes as JSON instead"
    )

    return parser


def cmd_render(args: argparse.Namespace) -> int:
    """Handle render command."""
    logger = get_logger(__name__, None, "cli")

    if not args.path.exists():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    try:
        node = Node.from_json(args.path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, MarkupError) as e:
        print(f"Could not load tree from {args.path}: {e}", file=sys.stderr)
        return 1

    markup_config = MarkupConfig()
    if args.config:
        try:
            markup_config = MarkupConfig.from_json(args.config.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            print(f"Could not load config from {args.config}: {e}", file=sys.stderr)
            return 1

        if not (args.verbose or args.quiet):
            configure_logging(markup_config.global_.logging_level)

    writer_config = markup_config.writer
    if args.language:
        writer_config = writer_config.override(language=args.language)
    if args.self_closing:
        writer_config = writer_config.with_self_closing_tags(*args.self_closing)

    writer = Writer.from_config(markup_config.override(writer=writer_config))
    result = writer.render_safe(node)
    logger.info(
        "Rendered tree",
        extra={"file": str(args.path), "elements": result.metrics.elements_rendered}
    )

    if args.output:
        try:
            args.output.write_text(result.markup, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(result.markup)

    if args.diagnostics:
        print(json.dumps(result.summary(), indent=2), file=sys.stderr)

    return 0 if result.success else 1


def cmd_attributes(args: argparse.Namespace) -> int:
    """Handle attributes command."""
    writer = Writer(language=args.language)

    try:
        attributes = writer.parse_attribute_string(args.text)
    except AttributeParseError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(attributes, indent=2))
    else:
        print(writer.build_attribute_string(attributes).lstrip())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    if args.command == "render":
        return cmd_render(args)
    if args.command == "attributes":
        return cmd_attributes(args)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
