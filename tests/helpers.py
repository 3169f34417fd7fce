"""Byte builders shared by the parser tests."""
from __future__ import annotations

import struct


def vlq(value: int) -> bytes:
    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def header_chunk(*, fmt: int = 1, tracks: int = 1, division: int = 96, size: int = 6) -> bytes:
    return b"MThd" + struct.pack(">IHHH", size, fmt, tracks, division)


def track_chunk(body: bytes, *, chunk_id: bytes = b"MTrk", length: int | None = None) -> bytes:
    declared = len(body) if length is None else length
    return chunk_id + struct.pack(">I", declared) + body


def end_of_track(delta: int = 0) -> bytes:
    return vlq(delta) + b"\xff\x2f\x00"


def midi_file(*bodies: bytes, fmt: int | None = None, division: int = 96) -> bytes:
    if fmt is None:
        fmt = 0 if len(bodies) == 1 else 1
    data = header_chunk(fmt=fmt, tracks=len(bodies), division=division)
    return data + b"".join(track_chunk(body) for body in bodies)


def hex_bytes(text: str) -> bytes:
    return bytes.fromhex(text)


SAMPLE_TRACK = (
    b"\x00\xff\x03\x04Test"  # track name
    b"\x00\x90\x40\x7f"  # note on, channel 0
    b"\x60\x50\x00"  # running status note on
    b"\x00\xc1\x05"  # program change, channel 1
    b"\x00\xf0\x05\x7e\x7f\x09\x01\xf7"  # sysex with end-of-exclusive
    + end_of_track()
)


def sample_file() -> bytes:
    return midi_file(SAMPLE_TRACK, end_of_track())
