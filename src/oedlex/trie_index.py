"""
trie_index.py - Optional MARISA trie over the index file.

The linear locator in index.py is the reference behaviour. This trie gives
the same answers without scanning:
  - keys are normalized words (trimmed, lowercased)
  - each value packs (line_number, offset) plus the original spelling
  - duplicate words keep one value per index line

Exact lookups take the value with the smallest line number (first match in
file order). Prefix searches sort all matches by line number before capping.

Build once, then point OED_TRIE_PATH (or --trie) at the saved file:
    oedlex build-trie data/oed2index.trie

Saving also writes <trie>.meta.json with the size and mtime of the index it
was built from. The engine ignores a trie whose sidecar no longer matches.
"""

import logging
import struct
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

import marisa_trie
import orjson

from oedlex.errors import EntryNotFound, ResourceUnavailable
from oedlex.index import normalize_word, parse_index_line
from oedlex.models import IndexRecord
from oedlex.progress_display import ProgressDisplay


logger = logging.getLogger(__name__)


VALUE_HEADER = struct.Struct('<QQ')


def pack_record(record: IndexRecord) -> bytes:
    return VALUE_HEADER.pack(record.line_number, record.offset) + record.word.encode('utf-8')


def unpack_record(value: bytes) -> IndexRecord:
    line_number, offset = VALUE_HEADER.unpack_from(value)
    word = value[VALUE_HEADER.size:].decode('utf-8')
    return IndexRecord(word=word, offset=offset, line_number=line_number)


def index_fingerprint(index_path: Union[str, Path]) -> Dict[str, int]:
    """Size and mtime of an index file, used to detect a stale trie."""
    stat = Path(index_path).stat()
    return {'index_size': stat.st_size, 'index_mtime_ns': stat.st_mtime_ns}


def meta_path(trie_path: Union[str, Path]) -> Path:
    trie_path = Path(trie_path)
    return trie_path.with_name(trie_path.name + '.meta.json')


def iter_index_file(index_path: Path, show_progress: bool = True) -> Iterator[IndexRecord]:
    """Well-formed records of an index file, with a live progress panel."""
    skipped = 0
    count = 0
    with ProgressDisplay(f"Indexing {index_path.name}", enabled=show_progress) as progress:
        with open(index_path, 'rb') as f:
            for line_number, raw in enumerate(f):
                record = parse_index_line(raw.decode('utf-8', errors='replace'), line_number)
                if record is None:
                    skipped += 1
                else:
                    count += 1
                    yield record
                progress.update(Lines=line_number + 1, Records=count, Skipped=skipped)

    logger.info(f"  -> {count:,} records, {skipped:,} malformed lines skipped")


def _load_fingerprint(path: Path) -> Optional[Dict[str, int]]:
    if not path.is_file():
        logger.warning(f"No metadata next to trie ({path}); it cannot be checked against the index")
        return None
    try:
        with open(path, 'rb') as f:
            data = orjson.loads(f.read())
        return {'index_size': int(data['index_size']), 'index_mtime_ns': int(data['index_mtime_ns'])}
    except (OSError, ValueError, TypeError, KeyError) as e:
        logger.warning(f"Ignoring unreadable trie metadata {path}: {e}")
        return None


class IndexTrie:
    """Read-only trie answering the same queries as IndexLocator."""

    def __init__(self, trie: marisa_trie.BytesTrie, fingerprint: Optional[Dict[str, int]] = None):
        self.trie = trie
        self.fingerprint = fingerprint

    def __len__(self) -> int:
        return len(self.trie)

    @classmethod
    def from_records(cls, records, fingerprint: Optional[Dict[str, int]] = None) -> 'IndexTrie':
        items = [(normalize_word(r.word), pack_record(r)) for r in records]
        return cls(marisa_trie.BytesTrie(items), fingerprint)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'IndexTrie':
        if not Path(path).is_file():
            raise ResourceUnavailable(f"trie file not found: {path}")
        trie = marisa_trie.BytesTrie()
        try:
            trie.load(str(path))
        except (OSError, RuntimeError, ValueError) as e:
            raise ResourceUnavailable(f"failed to load trie {path}: {e}") from e
        return cls(trie, _load_fingerprint(meta_path(path)))

    def save(self, path: Union[str, Path]):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.trie.save(str(path))
        if self.fingerprint is not None:
            with open(meta_path(path), 'wb') as f:
                f.write(orjson.dumps(self.fingerprint, option=orjson.OPT_INDENT_2))

    def matches_index(self, index_path: Union[str, Path]) -> bool:
        """True when the trie was built from index_path as it is now."""
        if self.fingerprint is None:
            return False
        try:
            return index_fingerprint(index_path) == self.fingerprint
        except OSError:
            return False

    def _matches(self, key: str) -> List[IndexRecord]:
        return [unpack_record(v) for v in self.trie.get(key, [])]

    def find_offset(self, word: str) -> int:
        matches = self._matches(normalize_word(word))
        if not matches:
            raise EntryNotFound(f"word not found in index: {word!r}")
        return min(matches, key=lambda r: r.line_number).offset

    def find_prefix(self, prefix: str, cap: int) -> List[str]:
        if cap <= 0:
            return []
        records: List[Tuple[int, str]] = []
        for _, value in self.trie.items(normalize_word(prefix)):
            record = unpack_record(value)
            records.append((record.line_number, record.word))
        records.sort()
        return [word for _, word in records[:cap]]


def build_index_trie(
    index_path: Union[str, Path],
    trie_path: Optional[Union[str, Path]] = None,
    show_progress: bool = True
) -> IndexTrie:
    """Scan an index file into an IndexTrie, saving it when trie_path is given."""
    index_path = Path(index_path)
    logger.info(f"Building trie from {index_path}")
    try:
        fingerprint = index_fingerprint(index_path)
        index_trie = IndexTrie.from_records(iter_index_file(index_path, show_progress), fingerprint)
    except OSError as e:
        raise ResourceUnavailable(f"failed to read index file {index_path}: {e}") from e

    if trie_path is not None:
        trie_path = Path(trie_path)
        index_trie.save(trie_path)
        size_kb = trie_path.stat().st_size / 1024
        logger.info(f"  Trie saved: {trie_path} ({size_kb:.1f} KB)")
    logger.info(f"  Key count: {len(index_trie):,}")
    return index_trie
