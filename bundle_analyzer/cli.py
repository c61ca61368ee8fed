"""Command-line interface for bundle_analyzer.

Reads the output of ``webpack --json`` from a file or standard input and
prints the size contributed by each package, or the trees as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from bundle_analyzer._version import __version__
from bundle_analyzer.analyzer import dependency_size_tree
from bundle_analyzer.exceptions import CircularDependencyError, MalformedReportError
from bundle_analyzer.printer import TreePrinter
from bundle_analyzer.stats import load_stats


logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Analyzes the JSON output from 'webpack --json' and displays the total "
    "size of JS modules contributed by each NPM package that has been "
    "included in the bundle. The JSON output can either be supplied as the "
    "first argument or passed via stdin."
)

NO_INPUT_HELP = "No Webpack JSON output file specified. Use `webpack --json` to generate it."

TOO_DEEP_FOR_JSON = (
    "Error: The package tree is nested too deeply to write as JSON. "
    "Run without --json for the text report."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bundle-size-analyzer", description=DESCRIPTION)
    parser.add_argument(
        "stats_file",
        nargs="?",
        help="Webpack JSON output file (read from stdin when omitted)",
    )
    parser.add_argument(
        "-j", "--json",
        dest="output_as_json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--no-share-stats",
        dest="share_stats",
        action="store_false",
        help="Do not output dependency sizes as a percentage",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log analysis details to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_input(stats_file: str | None) -> bytes | None:
    # Raw bytes; decoding happens in load_stats
    if stats_file:
        return Path(stats_file).read_bytes()
    if not sys.stdin.isatty():
        return sys.stdin.buffer.read()
    return None


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        text = _read_input(args.stats_file)
    except OSError as e:
        print(f"Error: Could not read {args.stats_file}: {e}", file=sys.stderr)
        return 1

    if text is None:
        print(NO_INPUT_HELP, file=sys.stderr)
        return 1

    try:
        trees = dependency_size_tree(load_stats(text))
    except MalformedReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except CircularDependencyError as e:
        logger.debug("Aborting analysis", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output_as_json:
        try:
            output = json.dumps([tree.to_dict() for tree in trees], indent=2)
        except RecursionError:
            print(TOO_DEEP_FOR_JSON, file=sys.stderr)
            return 1
        print(output)
    else:
        printer = TreePrinter(share_stats=args.share_stats)
        for tree in trees:
            printer.write(tree)
    return 0


if __name__ == "__main__":
    sys.exit(main())
