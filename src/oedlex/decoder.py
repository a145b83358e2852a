"""
decoder.py - Read a bounded window of the data file and reduce it to text.

Record layout in the data file:
  - records are concatenated, each terminated by a 0x00 byte
  - 0x01 / 0x02 bytes open and close suppressed regions (toggle semantics)
  - other control bytes below 0x20 are noise; line breaks escape that rule
    but, like any non-printable byte, are still never emitted
  - everything else is legacy markup text (<hw>, <etym>, <s4 num=1>, ...)

The decoder reads a fixed 32 KiB window starting at the record offset.
Records longer than the window are truncated silently; a window that ends
before a terminator is returned as-is.
"""

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from oedlex.errors import IoFailure, ResourceUnavailable


logger = logging.getLogger(__name__)


READ_WINDOW = 32768

RECORD_TERMINATOR = 0x00
SUPPRESS_MARKERS = (0x01, 0x02)
LINE_BREAKS = (0x0A, 0x0D)

# Printability of each byte value, read as Latin-1.
_PRINTABLE = bytes(
    1 if chr(b).isprintable() else 0
    for b in range(256)
)


def decode_record(data: bytes) -> Tuple[str, int]:
    """
    Run the control-byte state machine over one window.

    Returns:
        (text, length) where text is the emitted bytes as Latin-1, stripped
        of surrounding whitespace, and length is the number of bytes that
        belong to the record (position of the terminator, or len(data)).
    """
    out = bytearray()
    suppressed = False
    length = len(data)

    for i, b in enumerate(data):
        if b == RECORD_TERMINATOR:
            length = i
            break
        if b in SUPPRESS_MARKERS:
            suppressed = not suppressed
            continue
        if b < 0x20 and b not in LINE_BREAKS:
            continue
        if not suppressed and _PRINTABLE[b]:
            out.append(b)

    return out.decode('latin-1').strip(), length


class DataSource:
    """
    Owned handle on the data file that only offers positioned reads.

    The seek and the read of one call happen under a lock, so concurrent
    callers never observe each other's cursor.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self._file = open(self.path, 'rb')
        except OSError as e:
            raise ResourceUnavailable(f"failed to open data file {self.path}: {e}") from e
        self._lock = threading.Lock()

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to `size` bytes at `offset`. Short reads at EOF are fine."""
        if offset < 0:
            raise IoFailure(f"negative offset {offset}")
        if size <= 0:
            return b''
        with self._lock:
            try:
                self._file.seek(offset, os.SEEK_SET)
                return self._file.read(size)
            except (OSError, ValueError) as e:
                raise IoFailure(f"failed to read {size} bytes at offset {offset}: {e}") from e

    def close(self):
        with self._lock:
            self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed


@dataclass(frozen=True)
class DecodedRecord:
    text: str
    length: int


class EntryDecoder:
    """Decode the record starting at a byte offset of a DataSource."""

    def __init__(self, source: DataSource, window: int = READ_WINDOW):
        self.source = source
        self.window = window

    def decode(self, offset: int) -> DecodedRecord:
        data = self.source.read_at(offset, self.window)
        text, length = decode_record(data)
        if length == len(data) and len(data) == self.window:
            logger.debug(f"Record at {offset} has no terminator within {self.window} bytes; truncated")
        return DecodedRecord(text=text, length=length)
