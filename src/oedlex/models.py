"""
models.py - Value types shared by the locator, decoder and renderer.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class IndexRecord:
    """One well-formed line of the index file."""
    word: str
    offset: int
    line_number: int = 0


@dataclass(frozen=True)
class Entry:
    """
    A decoded dictionary record.

    `definition` is decoded but not rendered, so it still carries the legacy
    markup tags. `word` and `etymology` are extracted from it. `length` is
    the number of record bytes consumed from the data file.
    """
    word: str
    definition: str
    etymology: str
    offset: int
    length: int


class RenderFormat(Enum):
    FULL = 'full'
    CLEAN = 'clean'
    BRIEF = 'brief'
    RAW = 'raw'

    @classmethod
    def parse(cls, value) -> 'RenderFormat':
        """Convert a user-supplied format name; unknown names mean CLEAN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CLEAN
