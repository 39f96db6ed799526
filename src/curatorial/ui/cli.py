# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from curatorial.adapters.geojson import (
    DirectoryFeatureSource,
    GeoJSONDirectoryReader,
    GeoJSONDirectoryWriter,
    format_feature,
)
from curatorial.app import (
    assign_exhibition_gallery,
    backfill_exhibition_galleries,
    build_lookup,
    compile_snapshot,
    resolve_parent_for_date,
    supersede_exhibition,
)
from curatorial.config import configure_logging
from curatorial.domain.errors import CuratorialError, UnsupportedLookupSource
from curatorial.domain.model import EdtfDate, EdtfParseError, RecordKindName

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

KIND_CHOICES = [str(kind) for kind in RecordKindName]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve SFO Museum curatorial records")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Look up records by alias code")
    lookup.add_argument("kind", choices=KIND_CHOICES, help="Record kind to search")
    lookup.add_argument("codes", nargs="+", help="One or more alias codes")
    lookup.add_argument(
        "--lookup-uri",
        type=str,
        help="Lookup source URI (defaults to CURATORIAL_LOOKUP_URI_<KIND> or <kind>://)",
    )
    lookup.add_argument(
        "--current",
        action="store_true",
        help="Only report the single current record for each code",
    )

    compile_cmd = subparsers.add_parser("compile", help="Compile a snapshot from GeoJSON data")
    compile_cmd.add_argument("kind", choices=KIND_CHOICES, help="Record kind to compile")
    compile_cmd.add_argument(
        "--source",
        dest="sources",
        action="append",
        required=True,
        help="GeoJSON corpus directory (repeatable)",
    )
    compile_cmd.add_argument(
        "--target",
        type=Path,
        help="Where to write the snapshot; printed to stdout when omitted",
    )

    resolve = subparsers.add_parser(
        "resolve-gallery",
        help="Resolve gallery codes to the galleries valid on a date",
    )
    resolve.add_argument("codes", nargs="+", help="One or more gallery codes")
    resolve.add_argument("--date", required=True, help="EDTF date to resolve against")
    resolve.add_argument("--lookup-uri", type=str, help="Gallery lookup source URI")
    resolve.add_argument(
        "--architecture",
        type=Path,
        help="Architecture corpus; when given, print the merged parent assignment",
    )

    assign = subparsers.add_parser(
        "assign-parent",
        help="Parent an exhibition on one or more gallery features",
    )
    assign.add_argument("--exhibition-id", type=int, required=True)
    assign.add_argument(
        "--gallery-id",
        dest="gallery_ids",
        type=int,
        action="append",
        default=[],
        help="Gallery wof:id (repeatable; none clears the parent)",
    )
    assign.add_argument("--exhibitions", type=Path, required=True, help="Exhibition corpus")
    assign.add_argument("--architecture", type=Path, required=True, help="Architecture corpus")
    assign.add_argument(
        "--writer",
        type=Path,
        help="Directory to write updates to (defaults to the exhibition corpus)",
    )
    assign.add_argument("--dry-run", action="store_true", help="Print instead of writing")

    backfill = subparsers.add_parser(
        "backfill-exhibitions",
        help="Re-derive exhibition parents from gallery codes and inception dates",
    )
    backfill.add_argument("--exhibitions", type=Path, required=True, help="Exhibition corpus")
    backfill.add_argument("--architecture", type=Path, required=True, help="Architecture corpus")
    backfill.add_argument("--writer", type=Path, help="Directory to write updates to")
    backfill.add_argument("--lookup-uri", type=str, help="Gallery lookup source URI")

    supersede = subparsers.add_parser(
        "supersede-exhibition",
        help="Replace an exhibition with a successor under a new parent",
    )
    supersede.add_argument("--exhibition-id", type=int, required=True)
    supersede.add_argument("--parent-id", type=int, required=True)
    supersede.add_argument("--new-id", type=int, required=True)
    supersede.add_argument("--exhibitions", type=Path, required=True, help="Exhibition corpus")
    supersede.add_argument("--architecture", type=Path, required=True, help="Architecture corpus")
    supersede.add_argument("--writer", type=Path, help="Directory to write updates to")

    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if args.command == "resolve-gallery":
        try:
            query = EdtfDate.parse(args.date)
        except EdtfParseError as exc:
            raise ValueError(f"Invalid --date: {exc}") from exc
        if query.lower is None or query.upper is None:
            raise ValueError(f"Invalid --date: {args.date!r} is open-ended")
    if args.command == "supersede-exhibition" and args.new_id <= 0:
        raise ValueError("--new-id must be a positive wof:id")


def _run_lookup(args: argparse.Namespace) -> None:
    lookup = build_lookup(args.kind, args.lookup_uri)
    for code in args.codes:
        if args.current:
            print(lookup.find_current(code))
            continue
        for record in lookup.find(code):
            print(record)


def _run_compile(args: argparse.Namespace) -> None:
    sources = [DirectoryFeatureSource(path) for path in args.sources]
    snapshot = compile_snapshot(args.kind, sources)
    if args.target is None:
        sys.stdout.write(snapshot)
        return
    args.target.parent.mkdir(parents=True, exist_ok=True)
    args.target.write_text(snapshot, encoding="utf-8")
    log.info("Wrote %s", args.target)


def _run_resolve_gallery(args: argparse.Namespace) -> None:
    galleries = build_lookup(RecordKindName.GALLERIES, args.lookup_uri)
    if args.architecture is None:
        for code in args.codes:
            print(galleries.find_for_date(code, args.date))
        return

    assignment = resolve_parent_for_date(
        galleries,
        args.codes,
        args.date,
        reader=GeoJSONDirectoryReader([args.architecture]),
    )
    print(json.dumps(assignment.as_updates(), indent=2))


def _run_assign_parent(args: argparse.Namespace) -> None:
    exhibitions = GeoJSONDirectoryReader([args.exhibitions])
    architecture = GeoJSONDirectoryReader([args.architecture])
    exhibition = exhibitions.load(args.exhibition_id)

    changed, updated, assignment = assign_exhibition_gallery(
        exhibition, args.gallery_ids, reader=architecture
    )
    if not changed:
        log.info("No changes for exhibition %s", args.exhibition_id)
        return
    if args.dry_run:
        sys.stdout.write(format_feature(updated))
        return

    writer = GeoJSONDirectoryWriter(args.writer or args.exhibitions)
    target = writer.write(updated)
    log.info("Updated %s: parent_id=%s", target, assignment.parent_id)


def _run_backfill(args: argparse.Namespace) -> None:
    galleries = build_lookup(RecordKindName.GALLERIES, args.lookup_uri)
    result = backfill_exhibition_galleries(
        exhibitions=DirectoryFeatureSource(args.exhibitions),
        galleries=galleries,
        reader=GeoJSONDirectoryReader([args.architecture]),
        writer=GeoJSONDirectoryWriter(args.writer or args.exhibitions),
    )
    summary = {
        "examined": result.examined,
        "updated": result.updated,
        "unchanged": result.unchanged,
        "skipped": result.skipped,
    }
    print(json.dumps(summary))


def _run_supersede(args: argparse.Namespace) -> None:
    exhibition = GeoJSONDirectoryReader([args.exhibitions]).load(args.exhibition_id)
    successor, predecessor = supersede_exhibition(
        exhibition,
        args.parent_id,
        new_id=args.new_id,
        reader=GeoJSONDirectoryReader([args.architecture]),
    )
    writer = GeoJSONDirectoryWriter(args.writer or args.exhibitions)
    log.info("Wrote successor %s", writer.write(successor))
    log.info("Wrote predecessor %s", writer.write(predecessor))


_COMMANDS = {
    "lookup": _run_lookup,
    "compile": _run_compile,
    "resolve-gallery": _run_resolve_gallery,
    "assign-parent": _run_assign_parent,
    "backfill-exhibitions": _run_backfill,
    "supersede-exhibition": _run_supersede,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate_args(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        _COMMANDS[parsed_args.command](parsed_args)
    except UnsupportedLookupSource:
        log.exception("Invalid lookup source")
        sys.exit(2)
    except CuratorialError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
