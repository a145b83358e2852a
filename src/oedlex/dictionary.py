"""
dictionary.py - The dictionary engine: locate, decode, extract.

Usage:
    with OEDDictionary(data_path, index_path) as oed:
        entry = oed.lookup("test")
        print(render(entry, RenderFormat.FULL))

The data and index files are opened once and closed together. Each file is
guarded by its own lock, so the engine can be shared across threads.
Entries are built fresh for every call; nothing is cached.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from oedlex.config import Config
from oedlex.decoder import DataSource, EntryDecoder
from oedlex.errors import EntryNotFound
from oedlex.extract import extract
from oedlex.index import IndexLocator
from oedlex.models import Entry
from oedlex.trie_index import IndexTrie


logger = logging.getLogger(__name__)


DEFAULT_PREFIX_LIMIT = 20


class OEDDictionary:
    """Read-only access to a legacy dictionary archive."""

    def __init__(
        self,
        data_path: Union[str, Path],
        index_path: Union[str, Path],
        trie: Optional[IndexTrie] = None
    ):
        """
        Open both archive files.

        Args:
            data_path: Record blob (0x00-terminated records)
            index_path: Tab-separated word/offset index
            trie: Optional prebuilt trie over the same index file; ignored
                (with a warning) when it no longer matches that file

        Raises:
            ResourceUnavailable: if either file cannot be opened
        """
        self.data = DataSource(data_path)
        try:
            self.index = IndexLocator(index_path)
        except Exception:
            self.data.close()
            raise
        self.decoder = EntryDecoder(self.data)
        if trie is not None and not trie.matches_index(index_path):
            logger.warning(f"Trie does not match {index_path} (rebuild with `oedlex build-trie`); using linear scan")
            trie = None
        self.trie = trie
        logger.debug(f"Opened archive data={data_path} index={index_path} trie={'yes' if trie is not None else 'no'}")

    @classmethod
    def from_config(cls, config: Config) -> 'OEDDictionary':
        trie = IndexTrie.load(config.trie_path) if config.trie_path else None
        return cls(config.data_path, config.index_path, trie=trie)

    def close(self):
        self.data.close()
        self.index.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def find_offset(self, word: str) -> int:
        if self.trie is not None:
            return self.trie.find_offset(word)
        return self.index.find_offset(word)

    def read_entry(self, offset: int) -> Entry:
        """Decode the record at offset into an Entry."""
        record = self.decoder.decode(offset)
        headword, etymology = extract(record.text)
        return Entry(
            word=headword,
            definition=record.text,
            etymology=etymology,
            offset=offset,
            length=record.length,
        )

    def lookup(self, word: str) -> Entry:
        """
        Look up a word, case-insensitively and ignoring surrounding spaces.

        Raises:
            EntryNotFound: no index record matches
            IoFailure: the data file could not be read
        """
        offset = self.find_offset(word)
        return self.read_entry(offset)

    def search_prefix(self, prefix: str, limit: int = DEFAULT_PREFIX_LIMIT) -> List[str]:
        """Index words starting with prefix, in file order, at most limit."""
        if self.trie is not None:
            return self.trie.find_prefix(prefix, limit)
        return self.index.find_prefix(prefix, limit)

    def random_entry(self) -> Entry:
        """
        Entry on the first complete index line after the file midpoint.

        Not random: the same index file always yields the same entry.
        """
        record = self.index.midpoint_record()
        if record is None:
            raise EntryNotFound("failed to get random entry")
        return self.read_entry(record.offset)

    def read_raw(self, offset: int, length: int) -> bytes:
        """Undecoded bytes of the data file, for debugging."""
        return self.data.read_at(offset, length)
