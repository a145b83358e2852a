"""Integration tests for the OEDDictionary engine."""

import threading

import pytest

from oedlex.dictionary import OEDDictionary
from oedlex.errors import EntryNotFound, IoFailure, ResourceUnavailable
from oedlex.models import RenderFormat
from oedlex.render import render

from conftest import EXAMPLE_RECORD, TEST_RECORD, build_archive


class TestLookup:

    def test_scenario(self, oed):
        entry = oed.lookup('test')
        assert entry.word == 'test'
        assert 'Latin testum earthen pot' in entry.etymology
        assert 'A procedure' in entry.definition
        assert entry.offset == 0
        assert entry.length == len(TEST_RECORD)

    def test_case_insensitive(self, oed):
        assert oed.lookup('TEST') == oed.lookup('test') == oed.lookup('  test  ')

    def test_second_record(self, oed, archive):
        _, _, offsets = archive
        entry = oed.lookup('example')
        assert entry.word == 'example'
        assert entry.offset == offsets['example']
        assert entry.definition == EXAMPLE_RECORD
        assert entry.etymology == 'f. Latin exemplum'

    def test_definition_stays_within_record(self, oed):
        entry = oed.lookup('test')
        assert 'example' not in entry.definition

    def test_graceful_miss(self, oed):
        with pytest.raises(EntryNotFound):
            oed.lookup('zzz_not_a_real_word')
        assert oed.lookup('test').word == 'test'

    def test_fresh_entry_per_lookup(self, oed):
        assert oed.lookup('test') is not oed.lookup('test')

    def test_raw_render_contains_definition(self, oed):
        entry = oed.lookup('test')
        assert entry.definition in render(entry, RenderFormat.RAW, True)


class TestSearchPrefix:

    def test_file_order_original_spelling(self, oed):
        assert oed.search_prefix('te') == ['test', 'Tessellate']

    def test_case_insensitive_prefix(self, oed):
        assert oed.search_prefix('TE') == oed.search_prefix('te')

    def test_limit(self, oed):
        assert oed.search_prefix('', 2) == ['test', 'example']

    def test_no_match(self, oed):
        assert oed.search_prefix('xyz') == []


class TestRandomEntry:

    def test_matches_midpoint_line(self, oed, archive):
        _, index_path, _ = archive
        raw = index_path.read_bytes()
        line_start = raw.index(b'\n', len(raw) // 2) + 1
        expected_word = raw[line_start:].split(b'\n')[0].split(b'\t')[0].decode()

        entry = oed.random_entry()
        assert entry == oed.lookup(expected_word)

    def test_deterministic(self, oed):
        assert oed.random_entry() == oed.random_entry()

    def test_no_usable_line(self, tmp_path):
        data_path, index_path, _ = build_archive(tmp_path, [('only', '<hw>only</hw>')])
        with OEDDictionary(data_path, index_path) as oed:
            with pytest.raises(EntryNotFound):
                oed.random_entry()


class TestReadRaw:

    def test_bytes_verbatim(self, oed):
        assert oed.read_raw(0, 8) == b'<e><hg><'

    def test_includes_terminator(self, oed):
        raw = oed.read_raw(0, len(TEST_RECORD) + 1)
        assert raw.endswith(b'\x00')

    def test_past_end(self, oed):
        assert oed.read_raw(10_000_000, 4) == b''

    def test_negative_offset_keeps_engine_usable(self, oed):
        with pytest.raises(IoFailure):
            oed.read_raw(-1, 4)
        assert oed.lookup('test').word == 'test'


class TestLifecycle:

    def test_missing_data_file(self, archive, tmp_path):
        _, index_path, _ = archive
        with pytest.raises(ResourceUnavailable):
            OEDDictionary(tmp_path / 'missing', index_path)

    def test_missing_index_file(self, archive, tmp_path):
        data_path, _, _ = archive
        with pytest.raises(ResourceUnavailable):
            OEDDictionary(data_path, tmp_path / 'missing')

    def test_close_releases_both(self, archive):
        data_path, index_path, _ = archive
        oed = OEDDictionary(data_path, index_path)
        oed.close()
        assert oed.data.closed
        assert oed.index.closed
        with pytest.raises(IoFailure):
            oed.lookup('test')

    def test_offset_beyond_data(self, tmp_path):
        data_path, index_path, _ = build_archive(
            tmp_path, [('a', '<hw>a</hw>')], extra_index_lines=('ghost\t999999',)
        )
        with OEDDictionary(data_path, index_path) as oed:
            entry = oed.lookup('ghost')
            assert entry.definition == ''
            assert entry.word == ''


def test_oversized_record_truncated(tmp_path):
    big = '<hw>big</hw>' + 'a' * 40000
    data_path, index_path, _ = build_archive(tmp_path, [('big', big)])
    with OEDDictionary(data_path, index_path) as oed:
        entry = oed.lookup('big')
        assert entry.word == 'big'
        assert len(entry.definition) == 32768
        assert entry.length == 32768


def test_concurrent_lookups(oed):
    expected = {word: oed.lookup(word) for word in ('test', 'example', 'run', 'tessellate')}
    failures = []

    def worker(word):
        for _ in range(50):
            try:
                if oed.lookup(word) != expected[word]:
                    failures.append(word)
                oed.search_prefix('te')
            except Exception as e:
                failures.append(repr(e))

    threads = [threading.Thread(target=worker, args=(w,)) for w in expected for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
