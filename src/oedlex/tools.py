"""
tools.py - Tool handlers exposed by the server and the CLI.

Each handler takes the engine plus the tool's arguments and returns the
text shown to the caller. A word that is not in the index is a normal
answer ("not found" text), not an error. Bad arguments and I/O failures
raise ToolError.
"""

import logging
from typing import List

from oedlex.dictionary import OEDDictionary
from oedlex.errors import EntryNotFound, IoFailure, ToolError
from oedlex.models import RenderFormat
from oedlex.normalize import strip_all_tags
from oedlex.render import render


logger = logging.getLogger(__name__)


DEFAULT_SEARCH_LIMIT = 10
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 50


def clamp_limit(limit) -> int:
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = DEFAULT_SEARCH_LIMIT
    return max(MIN_SEARCH_LIMIT, min(MAX_SEARCH_LIMIT, limit))


def _require(value: str, name: str) -> str:
    if not value or not value.strip():
        raise ToolError(f"{name} parameter is required")
    return value


def not_found_message(word: str) -> str:
    return f"Word '{word}' not found in the OED."


def oed_lookup(
    oed: OEDDictionary,
    word: str,
    include_etymology: bool = True,
    format: str = 'clean'
) -> str:
    _require(word, 'word')
    try:
        entry = oed.lookup(word)
    except EntryNotFound:
        return not_found_message(word)
    except IoFailure as e:
        logger.error(f"Lookup of {word!r} failed: {e}")
        raise ToolError(f"lookup failed: {e}") from e
    return render(entry, RenderFormat.parse(format), include_etymology)


def oed_search(oed: OEDDictionary, prefix: str, limit: int = DEFAULT_SEARCH_LIMIT) -> str:
    _require(prefix, 'prefix')
    limit = clamp_limit(limit)
    try:
        words = oed.search_prefix(prefix, limit)
    except IoFailure as e:
        logger.error(f"Prefix search for {prefix!r} failed: {e}")
        raise ToolError(f"search failed: {e}") from e

    if not words:
        return f"No words found starting with '{prefix}'"

    lines = [f"OED entries starting with '{prefix}':"]
    lines += [f"{i}. {word}" for i, word in enumerate(words, 1)]
    return '\n'.join(lines) + '\n'


def oed_etymology(oed: OEDDictionary, word: str, clean: bool = True) -> str:
    _require(word, 'word')
    try:
        entry = oed.lookup(word)
    except EntryNotFound:
        return not_found_message(word)
    except IoFailure as e:
        logger.error(f"Lookup of {word!r} failed: {e}")
        raise ToolError(f"lookup failed: {e}") from e

    if not entry.etymology:
        return f"No etymology information found for '{word}'"

    etymology = strip_all_tags(entry.etymology) if clean else entry.etymology
    return f"Etymology of '{word}':\n{etymology}"


def oed_random(oed: OEDDictionary, format: str = 'clean', include_etymology: bool = True) -> str:
    try:
        entry = oed.random_entry()
    except (EntryNotFound, IoFailure) as e:
        raise ToolError(f"failed to get random entry: {e}") from e
    return render(entry, RenderFormat.parse(format), include_etymology)


def split_words(words: str) -> List[str]:
    return [w.strip() for w in words.split(',')]


def oed_multi_lookup(oed: OEDDictionary, words: str) -> str:
    """Brief entries for a comma-separated list of words."""
    _require(words, 'words')
    results = []
    for word in split_words(words):
        try:
            entry = oed.lookup(word)
        except (EntryNotFound, IoFailure):
            results.append(f"{word}: Not found")
            continue
        results.append(render(entry, RenderFormat.BRIEF, include_etymology=False))
    return '\n\n'.join(results)
