"""
render.py - Turn a decoded Entry into one of four text presentations.

Formats:
  - RAW:   definition and etymology verbatim, tags intact (debugging)
  - BRIEF: headword plus the first sense, at most ~200 characters
  - CLEAN: plain text with sense numbers, quotation dates and quotations
  - FULL:  Markdown, adds work titles, authors and cross-references

All formats are pure functions of the entry.
"""

import re

from oedlex.models import Entry, RenderFormat
from oedlex.normalize import strip_all_tags


BRIEF_LIMIT = 200
ELLIPSIS = '...'

SENSE_NUMBER = re.compile(r'<s4 num=(\d+)>')
FIRST_SENSE = re.compile(r'<s4[^>]*>([^<]+)')
QUOTE_DATE = re.compile(r'<qd>([^<]+)</qd>')
QUOTE_TEXT = re.compile(r'<qt>([^<]+)</qt>')
WORK_TITLE = re.compile(r'<w>([^<]+)</w>')
AUTHOR = re.compile(r'<a>([^<]+)</a>')
CROSS_REFERENCE = re.compile(r'<xr>([^<]+)</xr>')
PRONUNCIATION = re.compile(r'<ph>([^<]+)</ph>')
ETYMOLOGY_BLOCK = re.compile(r'<etym>.*?</etym>', re.DOTALL)
PRONUNCIATION_BLOCK = re.compile(r'<pr>.*?</pr>', re.DOTALL)
BLANK_LINE_RUN = re.compile(r'\n\s*\n\s*\n+')
SPACE_RUN = re.compile(r'  +')


def extract_pronunciation(definition: str) -> str:
    match = PRONUNCIATION.search(definition)
    return match.group(1) if match else ''


def truncate_brief(text: str, limit: int = BRIEF_LIMIT) -> str:
    """
    Cut text to at most `limit` characters.

    Prefers ending right after the first ". " inside the limit; otherwise
    hard-cuts and appends an ellipsis.
    """
    if len(text) <= limit:
        return text
    idx = text[:limit].find('. ')
    if idx > 0:
        return text[:idx + 1]
    return text[:limit] + ELLIPSIS


def brief_definition(definition: str) -> str:
    """First sense of a definition as plain text, truncated."""
    match = FIRST_SENSE.search(definition)
    if match:
        text = match.group(1)
    else:
        text = ETYMOLOGY_BLOCK.sub('', definition)
        text = PRONUNCIATION_BLOCK.sub('', text)
    return truncate_brief(strip_all_tags(text))


def clean_definition(definition: str) -> str:
    text = SENSE_NUMBER.sub(r'\n\1. ', definition)
    text = QUOTE_DATE.sub(r'[\1] ', text)
    text = QUOTE_TEXT.sub(r'"\1" ', text)
    text = strip_all_tags(text, keep_newlines=True)
    text = BLANK_LINE_RUN.sub('\n\n', text)
    return text.strip()


def detailed_definition(definition: str) -> str:
    text = SENSE_NUMBER.sub(r'\n\n### \1. ', definition)
    text = QUOTE_DATE.sub(r'\n**[\1]** ', text)
    text = QUOTE_TEXT.sub(r'"\1" ', text)
    text = WORK_TITLE.sub(r'*\1* ', text)
    text = AUTHOR.sub(r'\1 ', text)
    text = CROSS_REFERENCE.sub(r'[See: \1] ', text)
    text = strip_all_tags(text, keep_newlines=True)
    text = BLANK_LINE_RUN.sub('\n\n', text)
    text = SPACE_RUN.sub(' ', text)
    return text.strip()


def render_raw(entry: Entry, include_etymology: bool) -> str:
    result = f"OED Entry for '{entry.word}':\n\nDefinition:\n{entry.definition}\n"
    if include_etymology and entry.etymology:
        result += f"\nEtymology:\n{entry.etymology}\n"
    return result


def render_brief(entry: Entry, include_etymology: bool) -> str:
    result = f"{entry.word}: {brief_definition(entry.definition)}"
    if include_etymology and entry.etymology:
        result += f"\nEtymology: {strip_all_tags(entry.etymology)}"
    return result


def render_clean(entry: Entry, include_etymology: bool) -> str:
    parts = [f"OED Entry: {entry.word}\n", '-' * 40 + '\n\n']

    pronunciation = extract_pronunciation(entry.definition)
    if pronunciation:
        parts.append(f"Pronunciation: {pronunciation}\n\n")

    if include_etymology and entry.etymology:
        parts.append(f"Etymology: {strip_all_tags(entry.etymology)}\n\n")

    parts.append('Definition:\n')
    parts.append(clean_definition(entry.definition))
    parts.append('\n')
    return ''.join(parts)


def render_full(entry: Entry, include_etymology: bool) -> str:
    parts = [f"# Complete OED Entry: {entry.word}\n\n"]

    pronunciation = extract_pronunciation(entry.definition)
    if pronunciation:
        parts.append(f"**Pronunciation:** {pronunciation}\n\n")

    if include_etymology and entry.etymology:
        parts.append('## Etymology\n')
        parts.append(f"{strip_all_tags(entry.etymology)}\n\n")

    parts.append('## Definition\n\n')
    parts.append(detailed_definition(entry.definition))
    parts.append('\n')
    return ''.join(parts)


RENDERERS = {
    RenderFormat.RAW: render_raw,
    RenderFormat.BRIEF: render_brief,
    RenderFormat.CLEAN: render_clean,
    RenderFormat.FULL: render_full,
}


def render(entry: Entry, fmt: RenderFormat = RenderFormat.CLEAN, include_etymology: bool = True) -> str:
    return RENDERERS[RenderFormat.parse(fmt)](entry, include_etymology)
