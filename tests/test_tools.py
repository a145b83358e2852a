"""Tests for the tool handlers shared by the server and the CLI."""

import pytest

from oedlex import tools
from oedlex.errors import ToolError


class TestLookupTool:

    def test_clean_by_default(self, oed):
        result = tools.oed_lookup(oed, 'test')
        assert result.startswith('OED Entry: test\n')
        assert 'Etymology: f. Latin testum earthen pot' in result

    def test_format_and_etymology_flags(self, oed):
        result = tools.oed_lookup(oed, 'Test', include_etymology=False, format='full')
        assert result.startswith('# Complete OED Entry: test')
        assert '## Etymology' not in result

    def test_unknown_format_falls_back_to_clean(self, oed):
        assert tools.oed_lookup(oed, 'test', format='weird') == tools.oed_lookup(oed, 'test')

    def test_not_found(self, oed):
        assert tools.oed_lookup(oed, 'nonexistent') == "Word 'nonexistent' not found in the OED."

    @pytest.mark.parametrize("word", ['', '   '])
    def test_word_required(self, oed, word):
        with pytest.raises(ToolError, match='word parameter is required'):
            tools.oed_lookup(oed, word)


class TestSearchTool:

    def test_numbered_list(self, oed):
        assert tools.oed_search(oed, 'te') == (
            "OED entries starting with 'te':\n"
            "1. test\n"
            "2. Tessellate\n"
        )

    def test_limit_clamped_low(self, oed):
        assert tools.oed_search(oed, 'te', limit=0) == "OED entries starting with 'te':\n1. test\n"

    def test_no_results(self, oed):
        assert tools.oed_search(oed, 'xyz') == "No words found starting with 'xyz'"

    def test_prefix_required(self, oed):
        with pytest.raises(ToolError, match='prefix parameter is required'):
            tools.oed_search(oed, '')

    @pytest.mark.parametrize("limit,expected", [
        (0, 1), (-5, 1), (1, 1), (10, 10), (50, 50), (51, 50), (1000, 50),
        (7.9, 7), ('12', 12), (None, 10), ('many', 10),
    ])
    def test_clamp_limit(self, limit, expected):
        assert tools.clamp_limit(limit) == expected


class TestEtymologyTool:

    def test_clean(self, oed):
        assert tools.oed_etymology(oed, 'test') == "Etymology of 'test':\nf. Latin testum earthen pot"

    def test_unclean_keeps_stored_text(self, oed):
        entry = oed.lookup('tessellate')
        assert tools.oed_etymology(oed, 'tessellate', clean=False) == (
            f"Etymology of 'tessellate':\n{entry.etymology}"
        )

    def test_no_etymology(self, oed):
        assert tools.oed_etymology(oed, 'run') == "No etymology information found for 'run'"

    def test_not_found(self, oed):
        assert tools.oed_etymology(oed, 'nope') == "Word 'nope' not found in the OED."


class TestRandomTool:

    def test_renders_midpoint_entry(self, oed):
        entry = oed.random_entry()
        assert tools.oed_random(oed, format='brief', include_etymology=False).startswith(f"{entry.word}: ")

    def test_failure_is_tool_error(self, tmp_path):
        from conftest import build_archive
        from oedlex.dictionary import OEDDictionary

        data_path, index_path, _ = build_archive(tmp_path, [('only', '<hw>only</hw>')])
        with OEDDictionary(data_path, index_path) as oed:
            with pytest.raises(ToolError, match='failed to get random entry'):
                tools.oed_random(oed)


class TestMultiLookupTool:

    def test_mixed_hits_and_misses(self, oed):
        result = tools.oed_multi_lookup(oed, 'test, nope ,example')
        parts = result.split('\n\n')
        assert parts[0].startswith('test: A procedure')
        assert parts[1] == 'nope: Not found'
        assert parts[2].startswith('example: A thing characteristic')
        assert 'Etymology' not in result

    def test_words_required(self, oed):
        with pytest.raises(ToolError):
            tools.oed_multi_lookup(oed, '')


def test_split_words():
    assert tools.split_words(' a, b ,c ') == ['a', 'b', 'c']
