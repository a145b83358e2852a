"""
normalize.py - Entity and tag normalization for legacy archive markup.

The archive encodes quotation marks and accented vowels as `&name.` escapes
and wraps cross-references, emphasis and notes in short inline tags. This
module rewrites a closed table of those into readable text.

Two entry points:
  - normalize(): the escape table plus removal of purely structural tags,
    used on extracted etymologies. Idempotent.
  - strip_all_tags(): drops every `<...>` tag and decodes escapes, used by
    the renderers.
"""

import re
from typing import List, Tuple


# Structural tags removed while their content is kept. <n> becomes a space
# so the surrounding words do not fuse.
STRUCTURAL_TAGS: List[Tuple[str, str]] = [
    ('<cf>', ''),
    ('</cf>', ''),
    ('<xr>', ''),
    ('</xr>', ''),
    ('<x>', ''),
    ('</x>', ''),
    ('<n>', ' '),
    ('</n>', ''),
    ('<xs>', ''),
    ('</xs>', ''),
]

# Archive-specific character escapes
ARCHIVE_ESCAPES: List[Tuple[str, str]] = [
    ('&oq.', "'"),
    ('&cq.', "'"),
    ('&emac.', 'ē'),
    ('&amac.', 'ā'),
    ('&imac.', 'ī'),
    ('&omac.', 'ō'),
    ('&umac.', 'ū'),
    ('&eacu.', 'é'),
    ('&aacu.', 'á'),
    ('&iacu.', 'í'),
    ('&oacu.', 'ó'),
    ('&uacu.', 'ú'),
]

# Generic XML escapes. &amp; goes last so "&amp;lt;" stays "&lt;".
XML_ENTITIES: List[Tuple[str, str]] = [
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&amp;', '&'),
]

TAG_PATTERN = re.compile(r'<[^>]+>')
WHITESPACE_RUN = re.compile(r'\s+')
HORIZONTAL_RUN = re.compile(r'[^\S\n]+')
SPACE_AROUND_NEWLINE = re.compile(r' *\n *')


def _replace_all(text: str, table: List[Tuple[str, str]]) -> str:
    for old, new in table:
        text = text.replace(old, new)
    return text


def _collapse_spaces(text: str) -> str:
    while '  ' in text:
        text = text.replace('  ', ' ')
    return text


def _normalize_once(text: str) -> str:
    result = _replace_all(text, STRUCTURAL_TAGS)
    result = _replace_all(result, ARCHIVE_ESCAPES)
    return _collapse_spaces(result).strip()


def normalize(text: str) -> str:
    """
    Rewrite archive escapes and structural tags into readable text.

    Removing a tag can join the halves of another tag or escape (e.g.
    "&o<x></x>q."), so the pass is repeated until nothing changes. Every
    replacement shortens the text, which bounds the loop.

    Examples:
        >>> normalize("multiple  <n>  spaces  </n>  here")
        'multiple spaces here'
        >>> normalize("&oq.quote&cq. and &emac.macron&emac.")
        "'quote' and ēmacronē"
    """
    result = _normalize_once(text)
    while True:
        again = _normalize_once(result)
        if again == result:
            return result
        result = again


def decode_archive_escapes(text: str) -> str:
    """Replace only the `&name.` escapes, leaving tags alone."""
    return _replace_all(text, ARCHIVE_ESCAPES)


def decode_xml_entities(text: str) -> str:
    return _replace_all(text, XML_ENTITIES)


def strip_all_tags(text: str, keep_newlines: bool = False) -> str:
    """
    Remove every tag and decode archive and XML escapes.

    With keep_newlines=False all whitespace (line breaks included) collapses
    to single spaces. With keep_newlines=True only horizontal runs collapse,
    so sense markers inserted as line breaks survive.
    """
    text = TAG_PATTERN.sub('', text)
    if keep_newlines:
        text = HORIZONTAL_RUN.sub(' ', text)
        text = SPACE_AROUND_NEWLINE.sub('\n', text)
    else:
        text = WHITESPACE_RUN.sub(' ', text)
    text = text.strip()
    text = decode_archive_escapes(text)
    return decode_xml_entities(text)
