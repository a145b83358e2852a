"""
index.py - Resolve words to data-file offsets by scanning the index file.

Index format (UTF-8, one record per line):
  word<TAB>offset[<TAB>ignored...]

No ordering or uniqueness is assumed. Lookups scan in file order and the
first matching record wins; malformed lines are skipped and never stop a
scan. Every query is O(n); see trie_index for an optional accelerated
index with identical results.
"""

import logging
import os
import re
import threading
from pathlib import Path
from typing import Iterator, List, Optional, Union

from oedlex.errors import EntryNotFound, IoFailure, ResourceUnavailable
from oedlex.models import IndexRecord


logger = logging.getLogger(__name__)


OFFSET_PATTERN = re.compile(r'[0-9]+')


def normalize_word(word: str) -> str:
    """Trim surrounding whitespace and case-fold for comparison."""
    return word.strip().lower()


def parse_index_line(line: str, line_number: int = 0) -> Optional[IndexRecord]:
    """
    Parse one index line.

    Returns None for malformed lines: fewer than two fields, an empty word,
    or an offset that is not a plain decimal number.
    """
    parts = line.rstrip('\r\n').split('\t')
    if len(parts) < 2:
        return None
    word = parts[0].strip()
    if not word or not OFFSET_PATTERN.fullmatch(parts[1]):
        return None
    return IndexRecord(word=word, offset=int(parts[1]), line_number=line_number)


class IndexLocator:
    """Linear-scan locator over an open index file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self._file = open(self.path, 'rb')
        except OSError as e:
            raise ResourceUnavailable(f"failed to open index file {self.path}: {e}") from e
        self._lock = threading.Lock()

    def close(self):
        with self._lock:
            self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _scan(self) -> Iterator[IndexRecord]:
        # Caller must hold self._lock for the whole iteration.
        try:
            self._file.seek(0, os.SEEK_SET)
            for line_number, raw in enumerate(self._file):
                record = parse_index_line(raw.decode('utf-8', errors='replace'), line_number)
                if record is None:
                    logger.debug(f"Skipping malformed index line {line_number + 1}")
                    continue
                yield record
        except (OSError, ValueError) as e:
            raise IoFailure(f"error reading index {self.path}: {e}") from e

    def records(self) -> List[IndexRecord]:
        """All well-formed records in file order."""
        with self._lock:
            return list(self._scan())

    def find_offset(self, word: str) -> int:
        """Offset of the first record whose normalized word matches."""
        target = normalize_word(word)
        with self._lock:
            for record in self._scan():
                if normalize_word(record.word) == target:
                    return record.offset
        raise EntryNotFound(f"word not found in index: {word!r}")

    def find_prefix(self, prefix: str, cap: int) -> List[str]:
        """Words (original spelling, file order) starting with prefix, at most cap."""
        if cap <= 0:
            return []
        target = normalize_word(prefix)
        results = []
        with self._lock:
            for record in self._scan():
                if normalize_word(record.word).startswith(target):
                    results.append(record.word)
                    if len(results) >= cap:
                        break
        return results

    def midpoint_record(self) -> Optional[IndexRecord]:
        """
        Record on the first complete line after the middle of the file.

        The line containing the midpoint byte is discarded even when the
        midpoint lands on a line start. Deterministic for a given file.
        """
        with self._lock:
            try:
                size = os.fstat(self._file.fileno()).st_size
                self._file.seek(size // 2, os.SEEK_SET)
                if not self._file.readline():
                    return None
                raw = self._file.readline()
            except (OSError, ValueError) as e:
                raise IoFailure(f"error reading index {self.path}: {e}") from e
        if not raw:
            return None
        return parse_index_line(raw.decode('utf-8', errors='replace'))
