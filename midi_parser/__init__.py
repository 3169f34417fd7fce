"""Public facade for the zero-copy Standard MIDI File parser."""

from .cursor import ByteCursor
from .errors import InsufficientData, MalformedData, MidiDecodeError
from .models import (
    ChannelEvent,
    ChannelStatus,
    FileFormat,
    MetaEvent,
    MetaType,
    MidiEvent,
    MidiHeader,
    MidiTrack,
    ParseResult,
    ParserStatus,
    SysexEvent,
)
from .names import file_format_name, meta_name, status_name
from .parser import MidiParser, iter_events, parse_buffer
from .reader import open_midi, read_midi_events

__all__ = [
    "ByteCursor",
    "ChannelEvent",
    "ChannelStatus",
    "FileFormat",
    "InsufficientData",
    "MalformedData",
    "MetaEvent",
    "MetaType",
    "MidiDecodeError",
    "MidiEvent",
    "MidiHeader",
    "MidiParser",
    "MidiTrack",
    "ParseResult",
    "ParserStatus",
    "SysexEvent",
    "file_format_name",
    "iter_events",
    "meta_name",
    "open_midi",
    "parse_buffer",
    "read_midi_events",
    "status_name",
]
