"""Status codes, enumerations and decoded units produced by the MIDI parser."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union

RunningStatus = Tuple[int, int]

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"


class ParserStatus(IntEnum):
    """Outcome of a single :meth:`MidiParser.parse` call.

    ``INIT`` is only ever the state before the first call. ``END_OF_BUFFER``
    and ``ERROR`` are terminal.
    """

    END_OF_BUFFER = -2
    ERROR = -1
    INIT = 0
    HEADER = 1
    TRACK = 2
    CHANNEL_EVENT = 3
    META_EVENT = 4
    SYSEX_EVENT = 5

    @property
    def is_terminal(self) -> bool:
        return self in (ParserStatus.END_OF_BUFFER, ParserStatus.ERROR)


class FileFormat(IntEnum):
    SINGLE_TRACK = 0
    MULTIPLE_TRACKS = 1
    MULTIPLE_SONGS = 2


class ChannelStatus(IntEnum):
    """High nibble of a channel voice status byte."""

    NOTE_OFF = 0x8
    NOTE_ON = 0x9
    NOTE_AFTERTOUCH = 0xA
    CONTROL_CHANGE = 0xB
    PROGRAM_CHANGE = 0xC
    CHANNEL_AFTERTOUCH = 0xD
    PITCH_BEND = 0xE


class MetaType(IntEnum):
    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRICS = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


def channel_data_length(status: int) -> int:
    """Number of data bytes following a channel status with nibble ``status``."""

    if status in (ChannelStatus.PROGRAM_CHANGE, ChannelStatus.CHANNEL_AFTERTOUCH):
        return 1
    return 2


@dataclass(frozen=True)
class MidiHeader:
    """Decoded ``MThd`` chunk."""

    size: int
    format: int
    tracks_count: int
    time_division: int

    @property
    def file_format(self) -> Optional[FileFormat]:
        try:
            return FileFormat(self.format)
        except ValueError:
            return None


@dataclass(frozen=True)
class MidiTrack:
    """Track chunk prologue; ``size`` is the declared byte length."""

    size: int
    chunk_id: bytes = TRACK_MAGIC


@dataclass(frozen=True)
class ChannelEvent:
    """Channel voice event. ``param2`` is 0 for one-byte events."""

    delta_time: int
    status: int
    channel: int
    param1: int
    param2: int = 0

    @property
    def status_type(self) -> ChannelStatus:
        return ChannelStatus(self.status)


@dataclass(frozen=True)
class MetaEvent:
    """Meta event whose ``data`` is a view into the caller's buffer."""

    delta_time: int
    type: int
    length: int
    data: memoryview

    @property
    def meta_type(self) -> Optional[MetaType]:
        try:
            return MetaType(self.type)
        except ValueError:
            return None


@dataclass(frozen=True)
class SysexEvent:
    """System exclusive event.

    ``length`` and ``data`` exclude a trailing ``0xF7`` end-of-exclusive
    marker when the on-wire payload ends with one.
    """

    delta_time: int
    length: int
    data: memoryview
    sysex: int = 0xF0


MidiEvent = Union[ChannelEvent, MetaEvent, SysexEvent]
ParseResult = Union[MidiHeader, MidiTrack, ChannelEvent, MetaEvent, SysexEvent, None]


__all__ = [
    "ChannelEvent",
    "ChannelStatus",
    "FileFormat",
    "HEADER_MAGIC",
    "MetaEvent",
    "MetaType",
    "MidiEvent",
    "MidiHeader",
    "MidiTrack",
    "ParseResult",
    "ParserStatus",
    "RunningStatus",
    "SysexEvent",
    "TRACK_MAGIC",
    "channel_data_length",
]
