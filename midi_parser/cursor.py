"""Bounds-checked, zero-copy view over the caller's MIDI buffer."""
from __future__ import annotations

from .errors import InsufficientData


class ByteCursor:
    """Read position plus the global and per-track remaining byte counts.

    Offsets passed to the accessors are relative to the current position, so a
    decoder can inspect a whole event before committing it with
    :meth:`advance`. Every accessor checks the counters before indexing.
    """

    __slots__ = ("_data", "_position", "_remaining_total", "_remaining_in_track")

    def __init__(self, data) -> None:
        try:
            view = memoryview(data)
        except TypeError as exc:
            raise TypeError(
                f"MIDI data must support the buffer protocol, not {type(data).__name__}"
            ) from exc
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._data = view.toreadonly()
        self._position = 0
        self._remaining_total = len(self._data)
        self._remaining_in_track = 0

    @property
    def remaining_total(self) -> int:
        return self._remaining_total

    @property
    def remaining_in_track(self) -> int:
        return self._remaining_in_track

    def available(self, *, in_track: bool = True) -> int:
        if in_track:
            return min(self._remaining_total, self._remaining_in_track)
        return self._remaining_total

    def tell(self) -> int:
        return self._position

    def require(self, size: int, *, in_track: bool = True) -> None:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if self.available(in_track=in_track) < size:
            scope = "track" if in_track and self._remaining_in_track < self._remaining_total else "buffer"
            raise InsufficientData(
                f"Need {size} bytes but the {scope} has {self.available(in_track=in_track)} left.",
                offset=self._position,
            )

    def byte_at(self, offset: int, *, in_track: bool = True) -> int:
        self.require(offset + 1, in_track=in_track)
        return self._data[self._position + offset]

    def view(self, offset: int, size: int, *, in_track: bool = True) -> memoryview:
        self.require(offset + size, in_track=in_track)
        start = self._position + offset
        return self._data[start : start + size]

    def advance(self, size: int, *, in_track: bool = True) -> None:
        self.require(size, in_track=in_track)
        self._position += size
        self._remaining_total -= size
        if in_track:
            self._remaining_in_track -= size

    def start_track(self, length: int) -> None:
        self._remaining_in_track = min(length, self._remaining_total)


__all__ = ["ByteCursor"]
