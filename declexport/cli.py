"""CLI entrypoints for declexport commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .assembler import DocumentAssembler
from .config import ConfigError, load_config
from .kb.snapshot import Snapshot, SnapshotDocStore, SnapshotError, SnapshotKnowledgeBase
from .logging import configure_logging
from .models import UnknownDeclarationKindError
from .printer import TermPrinter


def _add_verbosity_options(parser: argparse.ArgumentParser, *, top_level: bool = False) -> None:
    # Sub-command defaults are suppressed so flags given before the
    # sub-command survive when none are repeated after it.
    default_count: object = 0 if top_level else argparse.SUPPRESS
    default_quiet: object = False if top_level else argparse.SUPPRESS
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=default_count,
        help="Show per-batch progress; repeat (-vv) to log why declarations are skipped.",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default_quiet,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declexport",
        description="Export declaration documentation from a knowledge base snapshot as JSON.",
    )
    _add_verbosity_options(parser, top_level=True)
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export",
        help="Write the documentation export file.",
    )
    _add_verbosity_options(export_parser)
    export_parser.add_argument(
        "snapshot",
        help="Path to the knowledge base snapshot (JSON).",
    )
    export_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (defaults to the configured output, export.json).",
    )
    export_parser.add_argument(
        "--config",
        default=".",
        help="Path to .declexport.yml or the directory containing it.",
    )
    export_parser.add_argument(
        "--split-depth",
        type=int,
        default=None,
        help="Number of times the declaration list is halved before traversal.",
    )
    export_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declexport commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    configure_logging(verbosity=args.verbose, quiet=args.quiet, log_file=log_file)

    if args.command == "export":
        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        if args.split_depth is not None:
            if args.split_depth < 0:
                parser.exit(1, "--split-depth must be non-negative\n")
            config.split_depth = args.split_depth

        try:
            snapshot = Snapshot.load(Path(args.snapshot))
        except SnapshotError as exc:
            parser.exit(1, f"{exc}\n")

        assembler = DocumentAssembler(
            SnapshotKnowledgeBase(snapshot),
            TermPrinter(),
            SnapshotDocStore(snapshot),
            config,
        )
        output = Path(args.output) if args.output else None
        try:
            written = assembler.export(output)
        except UnknownDeclarationKindError as exc:
            parser.exit(1, f"declexport export failed: {exc}\nThe output file is incomplete.\n")
        except OSError as exc:
            parser.exit(1, f"declexport export failed: {exc}\n")
        print(f"Export written to {_relativize(written)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
