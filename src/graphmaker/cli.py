"""Command-line interface for laying out record files."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .generator import GraphMaker
from .parser import ParseError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphmaker",
        description="Lay out and route id,label,children[,x;y] record files.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    layout_parser = subparsers.add_parser(
        "layout", help="Print node positions and edge paths as JSON"
    )
    normalize_parser = subparsers.add_parser(
        "normalize", help="Print records with computed positions pinned"
    )
    for sub in (layout_parser, normalize_parser):
        sub.add_argument("input", help="Record file, or - for stdin")
        sub.add_argument(
            "--spread-ports",
            action="store_true",
            help="Spread edge starts along the bottom of each source box",
        )

    layout_parser.add_argument("--indent", type=int, default=2)
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        text = _read_input(args.input)
    except OSError as exc:
        print(f"error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 1

    maker = GraphMaker(spread_source_ports=args.spread_ports)
    try:
        diagram = maker.load(text)
    except ParseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.command == "layout":
        print(json.dumps(diagram.to_dict(), indent=args.indent))
    else:
        print(maker.save(diagram))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
