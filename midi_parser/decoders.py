"""Leaf decoding routines dispatched to by :class:`~midi_parser.parser.MidiParser`.

Each event decoder takes the cursor and the relative offset where its record
starts, and returns the decoded unit together with the offset just past it.
Nothing here moves the cursor except the chunk decoders, which consume fixed
size prologues.
"""
from __future__ import annotations

import struct
from typing import Optional, Tuple

from .cursor import ByteCursor
from .errors import InsufficientData, MalformedData
from .models import (
    HEADER_MAGIC,
    TRACK_MAGIC,
    ChannelEvent,
    MetaEvent,
    MidiHeader,
    MidiTrack,
    RunningStatus,
    SysexEvent,
    channel_data_length,
)

HEADER_SIZE = 14
TRACK_PROLOGUE_SIZE = 8

MAX_DELTA_TIME = 0x0FFFFFFF
MAX_DELTA_TIME_BYTES = 5

META_PREFIX = 0xFF
SYSEX_PREFIX = 0xF0
END_OF_EXCLUSIVE = 0xF7

_HEADER_FIELDS = struct.Struct(">IHHH")
_TRACK_LENGTH = struct.Struct(">I")


def decode_header(cursor: ByteCursor) -> MidiHeader:
    """Consume the 14-byte ``MThd`` chunk."""

    chunk = cursor.view(0, HEADER_SIZE, in_track=False)
    if chunk[:4] != HEADER_MAGIC:
        raise MalformedData(f"Invalid MIDI header magic {bytes(chunk[:4])!r}.", offset=cursor.tell())
    size, file_format, tracks_count, time_division = _HEADER_FIELDS.unpack_from(chunk, 4)
    cursor.advance(HEADER_SIZE, in_track=False)
    return MidiHeader(
        size=size,
        format=file_format,
        tracks_count=tracks_count,
        time_division=time_division,
    )


def decode_track_header(cursor: ByteCursor, *, strict_ids: bool = False) -> MidiTrack:
    """Consume an 8-byte track prologue and open the per-track counter.

    The chunk identifier is only checked when ``strict_ids`` is set.
    """

    prologue = cursor.view(0, TRACK_PROLOGUE_SIZE, in_track=False)
    chunk_id = bytes(prologue[:4])
    if strict_ids and chunk_id != TRACK_MAGIC:
        raise MalformedData(f"Expected track chunk, found {chunk_id!r}.", offset=cursor.tell())
    (length,) = _TRACK_LENGTH.unpack_from(prologue, 4)
    cursor.advance(TRACK_PROLOGUE_SIZE, in_track=False)
    cursor.start_track(length)
    return MidiTrack(size=length, chunk_id=chunk_id)


def read_delta_time(cursor: ByteCursor, offset: int = 0) -> Tuple[int, int]:
    """Decode a bounded variable-length quantity inside the current track."""

    value = 0
    for index in range(MAX_DELTA_TIME_BYTES):
        byte = cursor.byte_at(offset + index)
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            if value > MAX_DELTA_TIME:
                raise InsufficientData(
                    f"Delta-time 0x{value:X} exceeds 0x{MAX_DELTA_TIME:X}.", offset=cursor.tell() + offset
                )
            return value, offset + index + 1
    raise InsufficientData(
        f"Delta-time is longer than {MAX_DELTA_TIME_BYTES} bytes.", offset=cursor.tell() + offset
    )


def read_length_prefix(cursor: ByteCursor, offset: int) -> Tuple[int, int]:
    """Decode a variable-length quantity limited only by the buffer end.

    Callers must check the returned length against the remaining size.
    """

    value = 0
    position = offset
    while True:
        byte = cursor.byte_at(position, in_track=False)
        value = (value << 7) | (byte & 0x7F)
        position += 1
        if not byte & 0x80:
            return value, position


def decode_channel_event(
    cursor: ByteCursor,
    offset: int,
    delta_time: int,
    running_status: Optional[RunningStatus],
) -> Tuple[ChannelEvent, int]:
    """Decode a channel voice event, reusing ``running_status`` when shortened."""

    lead = cursor.byte_at(offset)
    if lead & 0x80:
        status, channel = lead >> 4, lead & 0x0F
        data_length = channel_data_length(status)
        cursor.require(offset + 1 + data_length)
        data_offset = offset + 1
    else:
        if running_status is None:
            raise InsufficientData(
                "Running status byte encountered before any status byte.", offset=cursor.tell() + offset
            )
        status, channel = running_status
        data_length = channel_data_length(status)
        cursor.require(offset + data_length)
        data_offset = offset

    param1 = cursor.byte_at(data_offset)
    param2 = cursor.byte_at(data_offset + 1) if data_length == 2 else 0
    event = ChannelEvent(
        delta_time=delta_time,
        status=status,
        channel=channel,
        param1=param1,
        param2=param2,
    )
    return event, data_offset + data_length


def decode_meta_event(cursor: ByteCursor, offset: int, delta_time: int) -> Tuple[MetaEvent, int]:
    """Decode an ``0xFF`` meta record: type byte, length prefix, payload."""

    cursor.require(offset + 2)
    meta_type = cursor.byte_at(offset + 1)
    length, payload_offset = read_length_prefix(cursor, offset + 2)
    end = payload_offset + length
    if end > cursor.available():
        raise MalformedData(
            f"Meta event 0x{meta_type:02X} declares {length} bytes but only "
            f"{max(0, cursor.available() - payload_offset)} remain.",
            offset=cursor.tell() + offset,
        )
    event = MetaEvent(
        delta_time=delta_time,
        type=meta_type,
        length=length,
        data=cursor.view(payload_offset, length),
    )
    return event, end


def decode_sysex_event(cursor: ByteCursor, offset: int, delta_time: int) -> Tuple[SysexEvent, int]:
    """Decode an ``0xF0`` record: length prefix then payload.

    A trailing end-of-exclusive marker is hidden from the reported payload but
    still consumed.
    """

    cursor.require(offset + 2)
    length, payload_offset = read_length_prefix(cursor, offset + 1)
    end = payload_offset + length
    if length == 0:
        raise MalformedData("Sysex event declares an empty payload.", offset=cursor.tell() + offset)
    if end > cursor.available():
        raise MalformedData(
            f"Sysex event declares {length} bytes but only "
            f"{max(0, cursor.available() - payload_offset)} remain.",
            offset=cursor.tell() + offset,
        )
    reported = length
    if cursor.byte_at(end - 1) == END_OF_EXCLUSIVE:
        reported -= 1
    event = SysexEvent(
        delta_time=delta_time,
        length=reported,
        data=cursor.view(payload_offset, reported),
        sysex=SYSEX_PREFIX,
    )
    return event, end


__all__ = [
    "END_OF_EXCLUSIVE",
    "HEADER_SIZE",
    "MAX_DELTA_TIME",
    "MAX_DELTA_TIME_BYTES",
    "META_PREFIX",
    "SYSEX_PREFIX",
    "TRACK_PROLOGUE_SIZE",
    "decode_channel_event",
    "decode_header",
    "decode_meta_event",
    "decode_sysex_event",
    "decode_track_header",
    "read_delta_time",
    "read_length_prefix",
]
