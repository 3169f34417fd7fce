"""Human readable names for header formats, channel statuses and meta types."""
from __future__ import annotations

from typing import Dict

from .models import ChannelStatus, FileFormat, MetaType

UNKNOWN_NAME = "(unknown)"

_FILE_FORMAT_NAMES: Dict[int, str] = {
    FileFormat.SINGLE_TRACK: "single track",
    FileFormat.MULTIPLE_TRACKS: "multiple tracks",
    FileFormat.MULTIPLE_SONGS: "multiple songs",
}

_STATUS_NAMES: Dict[int, str] = {
    ChannelStatus.NOTE_OFF: "Note Off",
    ChannelStatus.NOTE_ON: "Note On",
    ChannelStatus.NOTE_AFTERTOUCH: "Note Aftertouch",
    ChannelStatus.CONTROL_CHANGE: "CC",
    ChannelStatus.PROGRAM_CHANGE: "Program Change",
    ChannelStatus.CHANNEL_AFTERTOUCH: "Channel Aftertouch",
    ChannelStatus.PITCH_BEND: "Pitch Bend",
}

_META_NAMES: Dict[int, str] = {
    MetaType.SEQUENCE_NUMBER: "Sequence Number",
    MetaType.TEXT: "Text",
    MetaType.COPYRIGHT: "Copyright",
    MetaType.TRACK_NAME: "Track Name",
    MetaType.INSTRUMENT_NAME: "Instrument Name",
    MetaType.LYRICS: "Lyrics",
    MetaType.MARKER: "Marker",
    MetaType.CUE_POINT: "Cue Point",
    MetaType.CHANNEL_PREFIX: "Channel Prefix",
    MetaType.END_OF_TRACK: "End of Track",
    MetaType.SET_TEMPO: "Set Tempo",
    MetaType.SMPTE_OFFSET: "SMPTE Offset",
    MetaType.TIME_SIGNATURE: "Time Signature",
    MetaType.KEY_SIGNATURE: "Key Signature",
    MetaType.SEQUENCER_SPECIFIC: "Sequencer Specific",
}


def file_format_name(file_format: int) -> str:
    return _FILE_FORMAT_NAMES.get(file_format, UNKNOWN_NAME)


def status_name(status: int) -> str:
    return _STATUS_NAMES.get(status, UNKNOWN_NAME)


def meta_name(meta_type: int) -> str:
    return _META_NAMES.get(meta_type, UNKNOWN_NAME)


__all__ = ["UNKNOWN_NAME", "file_format_name", "meta_name", "status_name"]
