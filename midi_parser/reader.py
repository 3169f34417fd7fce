"""Helpers that load MIDI files for the parser."""
from __future__ import annotations

import logging
import mmap
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from .models import ParseResult, ParserStatus
from .parser import parse_buffer

logger = logging.getLogger(__name__)


@contextmanager
def open_midi(path: str | os.PathLike[str]) -> Iterator[memoryview]:
    """Map ``path`` read-only and yield a view of its bytes.

    Every view derived from the yielded one (including event payloads) must
    be released before the block exits, otherwise closing the mapping raises
    :class:`BufferError`.
    """

    with open(path, "rb") as handle:
        size = os.fstat(handle.fileno()).st_size
        if size == 0:
            logger.debug("%s is empty; nothing to map", path)
            yield memoryview(b"")
            return
        mapped = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
        logger.debug("Mapped %s (%s bytes)", path, size)
        view = memoryview(mapped)
        try:
            yield view
        finally:
            view.release()
            mapped.close()


def read_midi_events(
    path: str | os.PathLike[str], **options
) -> List[Tuple[ParserStatus, ParseResult]]:
    """Decode a whole file into ``(status, result)`` pairs.

    The file is read into memory so the returned payload views stay valid.
    """

    data = Path(path).read_bytes()
    return parse_buffer(data, **options)


__all__ = ["open_midi", "read_midi_events"]
