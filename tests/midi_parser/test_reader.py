"""File loading helpers used by the dump tool."""
from __future__ import annotations

from pathlib import Path

import pytest

from midi_parser import MidiParser, ParserStatus, iter_events, open_midi, parse_buffer, read_midi_events

from tests.helpers import sample_file

pytestmark = pytest.mark.integration


def test_open_midi_maps_file_contents(tmp_path: Path) -> None:
    path = tmp_path / "song.mid"
    path.write_bytes(sample_file())

    with open_midi(path) as data:
        assert data.readonly
        statuses = [status for status, _ in iter_events(data)]

    assert statuses[0] is ParserStatus.HEADER
    assert statuses[-1] is ParserStatus.END_OF_BUFFER
    assert statuses.count(ParserStatus.TRACK) == 2


def test_open_midi_handles_empty_files(tmp_path: Path) -> None:
    path = tmp_path / "empty.mid"
    path.write_bytes(b"")

    with open_midi(path) as data:
        assert MidiParser(data).parse() is ParserStatus.END_OF_BUFFER


def test_open_midi_refuses_to_close_while_payloads_are_held(tmp_path: Path) -> None:
    path = tmp_path / "song.mid"
    path.write_bytes(sample_file())

    with pytest.raises(BufferError):
        with open_midi(path) as data:
            kept = parse_buffer(data)

    assert kept


def test_open_midi_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        with open_midi(tmp_path / "missing.mid"):
            pass


def test_read_midi_events_keeps_payloads_alive(tmp_path: Path) -> None:
    path = tmp_path / "song.mid"
    path.write_bytes(sample_file())

    pairs = read_midi_events(path)

    meta = pairs[2][1]
    assert bytes(meta.data) == b"Test"
    assert pairs[-1] == (ParserStatus.END_OF_BUFFER, None)
