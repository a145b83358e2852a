"""Pytest configuration and shared fixtures."""
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from oedlex.dictionary import OEDDictionary


TEST_RECORD = (
    '<e><hg><hw>test</hw> <pr><ph>tEst</ph></pr></hg>. '
    '<etym>f. Latin testum earthen pot</etym> '
    '<s4>A procedure for critical evaluation; a means of determining the presence, '
    'quality, or truth of something.</s4></e>'
)

EXAMPLE_RECORD = (
    '<e><hg><hw>example</hw> <pr><ph>Ig"zA:mp@l</ph></pr></hg>. '
    '<etym>f. Latin exemplum</etym> '
    '<s4>A thing characteristic of its kind or illustrating a general rule.</s4></e>'
)

TESSELLATE_RECORD = (
    '<e><hg><hw>tessellate</hw></hg> '
    '<etym>f. late L. <cf>tessell&amac.t-</cf></etym> '
    '<s4>To make into a mosaic.</s4></e>'
)

RUN_RECORD = (
    '<e><hg><hw>run</hw> <pr><ph>rVn</ph></pr></hg> '
    '<s4 num=1>To move swiftly. <qd>1611</qd> <qt>He ran to the well.</qt> '
    '<a>Bible</a> <w>Genesis</w></s4> '
    '<s4 num=2>To flow. <xr>flow</xr></s4></e>'
)


def build_archive(
    directory: Path,
    records: List[Tuple[str, str]],
    extra_index_lines: Tuple[str, ...] = ()
) -> Tuple[Path, Path, Dict[str, int]]:
    """
    Write a data file of 0x00-terminated records and a matching index.

    Args:
        records: (index word, record text) pairs, written in order
        extra_index_lines: raw lines placed before the generated records

    Returns:
        (data path, index path, word -> offset)
    """
    data = bytearray()
    offsets = {}
    lines = list(extra_index_lines)
    for word, text in records:
        offsets[word] = len(data)
        lines.append(f"{word}\t{len(data)}")
        data += text.encode('latin-1') + b'\x00'

    data_path = directory / 'oed2'
    index_path = directory / 'oed2index'
    data_path.write_bytes(bytes(data))
    index_path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return data_path, index_path, offsets


@pytest.fixture
def archive(tmp_path):
    """Small archive with a few malformed index lines up front."""
    return build_archive(
        tmp_path,
        [
            ('test', TEST_RECORD),
            ('example', EXAMPLE_RECORD),
            ('Tessellate', TESSELLATE_RECORD),
            ('run', RUN_RECORD),
        ],
        extra_index_lines=('garbage line without tab', 'test\tnot-a-number', 'broken\t-5'),
    )


@pytest.fixture
def oed(archive):
    data_path, index_path, _ = archive
    with OEDDictionary(data_path, index_path) as d:
        yield d
