"""Output of the ``midi-dump`` command line tool."""
from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from app.config import DumpOptions, ParserOptions
from midi_parser import ParserStatus
from midi_parser.dump import (
    EXIT_IO_ERROR,
    EXIT_OK,
    EXIT_PARSE_ERROR,
    dump_buffer,
    format_payload,
    format_unit,
    main,
)

from tests.helpers import end_of_track, header_chunk, midi_file, sample_file

pytestmark = pytest.mark.integration


def _write(tmp_path: Path, data: bytes, name: str = "song.mid") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def _run(argv: list[str]) -> tuple[int, list[str]]:
    out = io.StringIO()
    code = main(argv, out=out)
    return code, out.getvalue().splitlines()


def test_dump_prints_reference_layout(tmp_path: Path) -> None:
    path = _write(tmp_path, midi_file(b"\x00\x90\x40\x7f" + end_of_track()))

    code, lines = _run([str(path)])

    assert code == EXIT_OK
    assert lines == [
        "header",
        "  size: 6",
        "  format: 0 [single track]",
        "  tracks count: 1",
        "  time division: 96",
        "track",
        "  length: 8",
        "track-midi",
        "  time: 0",
        "  status: 9 [Note On]",
        "  channel: 0",
        "  param1: 64",
        "  param2: 127",
        "track-meta",
        "  time: 0",
        "  type: 47 [End of Track]",
        "  length: 0",
        "eob",
    ]


def test_dump_reports_sysex_and_payload_previews(tmp_path: Path) -> None:
    path = _write(tmp_path, sample_file())

    code, lines = _run([str(path), "--show-payload", "--preview-bytes", "2"])

    assert code == EXIT_OK
    assert "  data: 54 65 ..." in lines
    sysex_at = lines.index("track-sysex")
    assert lines[sysex_at + 1 : sysex_at + 4] == ["  time: 0", "  length: 4", "  data: 7e 7f ..."]


def test_dump_prints_error_for_malformed_files(tmp_path: Path) -> None:
    path = _write(tmp_path, b"RIFF" + header_chunk()[4:])

    assert _run([str(path)]) == (EXIT_OK, ["error"])
    assert _run([str(path), "--strict-exit"]) == (EXIT_PARSE_ERROR, ["error"])


def test_dump_reports_missing_files(tmp_path: Path) -> None:
    missing = tmp_path / "missing.mid"

    code, lines = _run([str(missing)])

    assert code == EXIT_IO_ERROR
    assert lines[0].startswith(f"open({missing}):")


def test_dump_reads_parser_options_from_config(tmp_path: Path) -> None:
    path = _write(tmp_path, header_chunk() + b"XTrk\x00\x00\x00\x04" + end_of_track())
    config = tmp_path / "app.json"
    config.write_text(json.dumps({"parser": {"strict_track_ids": True}}), encoding="utf-8")

    code, lines = _run([str(path), "--config", str(config)])

    assert code == EXIT_OK
    assert lines[-1] == "error"
    assert "track" not in lines


def test_dump_writes_log_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log_file = tmp_path / "dump.log"
    monkeypatch.setenv("MIDI_PARSER_LOG_FILE", str(log_file))
    path = _write(tmp_path, b"RIFF" + header_chunk()[4:])

    _run([str(path), "--log-level", "warning"])

    assert "Invalid MIDI header magic" in log_file.read_text(encoding="utf-8")


def test_dump_buffer_returns_final_status() -> None:
    out = io.StringIO()

    status = dump_buffer(
        midi_file(end_of_track()),
        out,
        dump_options=DumpOptions(payload_preview_bytes=4, show_payload=False, log_verbosity="warning"),
        parser_options=ParserOptions(strict_track_ids=False),
    )

    assert status is ParserStatus.END_OF_BUFFER
    assert out.getvalue().endswith("eob\n")


def test_format_unit_for_terminal_statuses() -> None:
    assert format_unit(ParserStatus.END_OF_BUFFER, None) == ["eob"]
    assert format_unit(ParserStatus.ERROR, None) == ["error"]


def test_format_payload_only_marks_truncation() -> None:
    assert format_payload(memoryview(b"\x01\x02"), 2) == "01 02"
    assert format_payload(memoryview(b"\x01\x02\x03"), 2) == "01 02 ..."
