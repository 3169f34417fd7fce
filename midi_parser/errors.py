"""Exceptions raised by the leaf decoders and translated by the parser."""
from __future__ import annotations


class MidiDecodeError(ValueError):
    """Base class for problems detected while decoding MIDI bytes."""

    def __init__(self, detail: str, *, offset: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.offset = offset


class InsufficientData(MidiDecodeError):
    """The buffer or the current track ends before the decode step completes."""


class MalformedData(MidiDecodeError):
    """The bytes contradict the lengths or markers the file itself declares."""


__all__ = ["InsufficientData", "MalformedData", "MidiDecodeError"]
