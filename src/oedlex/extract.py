"""
extract.py - Pull the headword and etymology out of decoded record text.

Matching is first-opening tag, then first closing tag after it. Tag pairs
are not validated; a missing closing tag yields an empty field.
"""

from typing import NamedTuple, Optional

from oedlex.normalize import normalize


HEADWORD_OPEN = '<hw>'
HEADWORD_CLOSE = '</hw>'
ETYMOLOGY_OPEN = '<etym>'
ETYMOLOGY_CLOSE = '</etym>'

# Trailing sense numbers and punctuation on a bare first line
FIRST_LINE_NOISE = '.,;:0123456789 '


class Extracted(NamedTuple):
    headword: str
    etymology: str


def find_tagged(text: str, open_tag: str, close_tag: str) -> Optional[str]:
    """Return the text between the first open_tag and the next close_tag."""
    start = text.find(open_tag)
    if start == -1:
        return None
    content_start = start + len(open_tag)
    end = text.find(close_tag, content_start)
    if end == -1:
        return None
    return text[content_start:end]


def extract_headword(text: str) -> str:
    headword = find_tagged(text, HEADWORD_OPEN, HEADWORD_CLOSE)
    if headword is not None:
        headword = headword.strip()
        if headword:
            return headword

    first_line = text.split('\n', 1)[0].strip()
    return first_line.rstrip(FIRST_LINE_NOISE)


def extract_etymology(text: str) -> str:
    etymology = find_tagged(text, ETYMOLOGY_OPEN, ETYMOLOGY_CLOSE)
    if etymology is None:
        return ''
    return normalize(etymology)


def extract(text: str) -> Extracted:
    return Extracted(extract_headword(text), extract_etymology(text))
