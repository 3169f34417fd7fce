"""Print every unit decoded from a MIDI file, one block per parser status."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from app.config import DumpOptions, ParserOptions, load_app_config
from app.version import get_app_version
from shared.logging_config import LogVerbosity, ensure_app_logging, set_file_log_verbosity

from .models import ChannelEvent, MetaEvent, MidiHeader, MidiTrack, ParseResult, ParserStatus, SysexEvent
from .names import file_format_name, meta_name, status_name
from .parser import MidiParser
from .reader import open_midi

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_PARSE_ERROR = 3


def format_payload(data: memoryview, limit: int) -> str:
    shown = " ".join(f"{byte:02x}" for byte in data[:limit])
    if len(data) > limit:
        shown += " ..."
    return shown


def format_unit(
    status: ParserStatus,
    result: ParseResult,
    *,
    show_payload: bool = False,
    preview_bytes: int = 16,
) -> List[str]:
    """Render one parser outcome as the lines ``midi-dump`` prints."""

    if status is ParserStatus.END_OF_BUFFER:
        return ["eob"]
    if status is ParserStatus.ERROR:
        return ["error"]

    if isinstance(result, MidiHeader):
        return [
            "header",
            f"  size: {result.size}",
            f"  format: {result.format} [{file_format_name(result.format)}]",
            f"  tracks count: {result.tracks_count}",
            f"  time division: {result.time_division}",
        ]
    if isinstance(result, MidiTrack):
        return ["track", f"  length: {result.size}"]
    if isinstance(result, ChannelEvent):
        return [
            "track-midi",
            f"  time: {result.delta_time}",
            f"  status: {result.status} [{status_name(result.status)}]",
            f"  channel: {result.channel}",
            f"  param1: {result.param1}",
            f"  param2: {result.param2}",
        ]
    if isinstance(result, MetaEvent):
        lines = [
            "track-meta",
            f"  time: {result.delta_time}",
            f"  type: {result.type} [{meta_name(result.type)}]",
            f"  length: {result.length}",
        ]
        if show_payload:
            lines.append(f"  data: {format_payload(result.data, preview_bytes)}")
        return lines
    if isinstance(result, SysexEvent):
        lines = [
            "track-sysex",
            f"  time: {result.delta_time}",
            f"  length: {result.length}",
        ]
        if show_payload:
            lines.append(f"  data: {format_payload(result.data, preview_bytes)}")
        return lines
    return [f"unhandled state: {int(status)}"]


def dump_buffer(
    data,
    out: TextIO,
    *,
    dump_options: DumpOptions,
    parser_options: ParserOptions,
) -> ParserStatus:
    """Parse ``data`` to completion, writing each unit to ``out``."""

    parser = MidiParser(data, **parser_options.as_kwargs())
    status = ParserStatus.INIT
    for status, result in parser:
        for line in format_unit(
            status,
            result,
            show_payload=dump_options.show_payload,
            preview_bytes=dump_options.payload_preview_bytes,
        ):
            print(line, file=out)
    if status is ParserStatus.ERROR:
        logger.warning("Parsing stopped with an error at offset %s", parser.offset)
    return status


def dump_file(
    path: Path,
    out: TextIO,
    *,
    dump_options: DumpOptions,
    parser_options: ParserOptions,
) -> ParserStatus:
    with open_midi(path) as data:
        return dump_buffer(data, out, dump_options=dump_options, parser_options=parser_options)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="midi-dump", description=__doc__)
    parser.add_argument("path", type=Path, help="MIDI file to decode.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON configuration overriding the bundled defaults.",
    )
    parser.add_argument(
        "--show-payload",
        action="store_true",
        default=None,
        help="Print a hex preview of meta and sysex payloads.",
    )
    parser.add_argument(
        "--preview-bytes",
        type=int,
        default=None,
        help="Maximum number of payload bytes shown with --show-payload.",
    )
    parser.add_argument(
        "--strict-track-ids",
        action="store_true",
        default=None,
        help="Treat track chunks not labelled 'MTrk' as errors.",
    )
    parser.add_argument(
        "--strict-exit",
        action="store_true",
        help=f"Exit with status {EXIT_PARSE_ERROR} when the file is malformed.",
    )
    parser.add_argument(
        "--log-level",
        choices=[verbosity.value for verbosity in LogVerbosity],
        default=None,
        help="Minimum severity written to the log file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    return parser.parse_args(argv)


def _resolve_options(args: argparse.Namespace) -> tuple[DumpOptions, ParserOptions]:
    config = load_app_config(args.config)
    dump_options = config.dump
    parser_options = config.parser
    if args.show_payload is not None or args.preview_bytes is not None or args.log_level is not None:
        preview = dump_options.payload_preview_bytes
        if args.preview_bytes is not None and args.preview_bytes > 0:
            preview = args.preview_bytes
        dump_options = DumpOptions(
            payload_preview_bytes=preview,
            show_payload=dump_options.show_payload if args.show_payload is None else args.show_payload,
            log_verbosity=args.log_level or dump_options.log_verbosity,
        )
    if args.strict_track_ids is not None:
        parser_options = ParserOptions(strict_track_ids=args.strict_track_ids)
    return dump_options, parser_options


def main(argv: list[str] | None = None, out: Optional[TextIO] = None) -> int:
    args = parse_args(argv)
    out = out if out is not None else sys.stdout
    dump_options, parser_options = _resolve_options(args)

    ensure_app_logging()
    set_file_log_verbosity(dump_options.log_verbosity)

    try:
        status = dump_file(args.path, out, dump_options=dump_options, parser_options=parser_options)
    except OSError as exc:
        operation = "open" if exc.filename is not None else "mmap"
        print(f"{operation}({args.path}): {exc.strerror or exc}", file=out)
        logger.error("Could not read %s: %s", args.path, exc)
        return EXIT_IO_ERROR

    if status is ParserStatus.ERROR and args.strict_exit:
        return EXIT_PARSE_ERROR
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
