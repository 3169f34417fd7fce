"""Incremental state machine that walks a Standard MIDI File buffer."""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from .cursor import ByteCursor
from .decoders import (
    META_PREFIX,
    SYSEX_PREFIX,
    decode_channel_event,
    decode_header,
    decode_meta_event,
    decode_sysex_event,
    decode_track_header,
    read_delta_time,
)
from .errors import InsufficientData, MalformedData
from .models import (
    ChannelEvent,
    MetaEvent,
    MidiHeader,
    MidiTrack,
    ParseResult,
    ParserStatus,
    RunningStatus,
    SysexEvent,
)

logger = logging.getLogger(__name__)


class MidiParser:
    """Pull parser over a caller-owned, contiguous MIDI buffer.

    Call :meth:`parse` until it returns ``END_OF_BUFFER`` or ``ERROR``. After
    each call the decoded unit is available through :attr:`result` (and the
    matching ``header``/``track``/``midi``/``meta``/``sysex`` attribute).
    Payload views borrow the buffer, which must outlive them.
    """

    def __init__(self, data, *, strict_track_ids: bool = False):
        self._cursor = ByteCursor(data)
        self._strict_track_ids = strict_track_ids
        self._state = ParserStatus.INIT
        self._last_status = ParserStatus.INIT
        self.running_status: Optional[RunningStatus] = None
        self.vtime = 0
        self.header: Optional[MidiHeader] = None
        self.track: Optional[MidiTrack] = None
        self.midi: Optional[ChannelEvent] = None
        self.meta: Optional[MetaEvent] = None
        self.sysex: Optional[SysexEvent] = None

    @property
    def state(self) -> ParserStatus:
        return self._state

    @property
    def remaining_total(self) -> int:
        return self._cursor.remaining_total

    @property
    def remaining_in_track(self) -> int:
        return self._cursor.remaining_in_track

    @property
    def offset(self) -> int:
        return self._cursor.tell()

    @property
    def result(self) -> ParseResult:
        """Decoded unit belonging to the status returned by the last call."""

        status = self._last_status
        if status is ParserStatus.HEADER:
            return self.header
        if status is ParserStatus.TRACK:
            return self.track
        if status is ParserStatus.CHANNEL_EVENT:
            return self.midi
        if status is ParserStatus.META_EVENT:
            return self.meta
        if status is ParserStatus.SYSEX_EVENT:
            return self.sysex
        return None

    def parse(self) -> ParserStatus:
        """Decode the next unit and return its status."""

        state = self._state
        if state.is_terminal:
            logger.warning("parse() called after terminal status %s", state.name)
            self._last_status = ParserStatus.ERROR
            return ParserStatus.ERROR

        cursor = self._cursor
        if cursor.remaining_total < 1:
            return self._finish(ParserStatus.END_OF_BUFFER)

        if state is ParserStatus.TRACK and cursor.remaining_in_track == 0:
            state = self._state = ParserStatus.HEADER

        try:
            if state is ParserStatus.INIT:
                status = self._parse_header()
            elif state is ParserStatus.HEADER:
                status = self._parse_track()
            elif state is ParserStatus.TRACK:
                status = self._parse_event()
            else:
                status = ParserStatus.ERROR
        except InsufficientData as exc:
            logger.debug("End of buffer at offset %s: %s", exc.offset, exc.detail)
            status = ParserStatus.END_OF_BUFFER
        except MalformedData as exc:
            logger.warning("Malformed MIDI data at offset %s: %s", exc.offset, exc.detail)
            status = ParserStatus.ERROR
        return self._finish(status)

    def __iter__(self) -> Iterator[Tuple[ParserStatus, ParseResult]]:
        """Yield ``(status, result)`` pairs up to and including the terminal one."""

        while not self._state.is_terminal:
            status = self.parse()
            yield status, self.result

    def _finish(self, status: ParserStatus) -> ParserStatus:
        self._last_status = status
        if status.is_terminal:
            self._state = status
        return status

    def _parse_header(self) -> ParserStatus:
        header = decode_header(self._cursor)
        self.header = header
        self._state = ParserStatus.HEADER
        logger.debug(
            "Header: format=%s tracks=%s division=%s",
            header.format,
            header.tracks_count,
            header.time_division,
        )
        return ParserStatus.HEADER

    def _parse_track(self) -> ParserStatus:
        track = decode_track_header(self._cursor, strict_ids=self._strict_track_ids)
        self.track = track
        self.running_status = None
        self._state = ParserStatus.TRACK
        logger.debug("Track chunk %r of %s bytes at offset %s", track.chunk_id, track.size, self.offset)
        return ParserStatus.TRACK

    def _parse_event(self) -> ParserStatus:
        cursor = self._cursor
        delta_time, offset = read_delta_time(cursor)
        lead = cursor.byte_at(offset)

        if lead < 0xF0:
            event, end = decode_channel_event(cursor, offset, delta_time, self.running_status)
            self.running_status = (event.status, event.channel)
            self.midi = event
            status = ParserStatus.CHANNEL_EVENT
        elif lead == META_PREFIX:
            self.running_status = None
            self.meta, end = decode_meta_event(cursor, offset, delta_time)
            status = ParserStatus.META_EVENT
        elif lead == SYSEX_PREFIX:
            self.running_status = None
            self.sysex, end = decode_sysex_event(cursor, offset, delta_time)
            status = ParserStatus.SYSEX_EVENT
        else:
            raise MalformedData(f"Unrecognised event byte 0x{lead:02X}.", offset=cursor.tell() + offset)

        cursor.advance(end)
        self.vtime = delta_time
        return status


def iter_events(data, **options) -> Iterator[Tuple[ParserStatus, ParseResult]]:
    """Parse ``data`` and yield every status, ending with the terminal one."""

    yield from MidiParser(data, **options)


def parse_buffer(data, **options) -> List[Tuple[ParserStatus, ParseResult]]:
    return list(iter_events(data, **options))


__all__ = ["MidiParser", "iter_events", "parse_buffer"]
