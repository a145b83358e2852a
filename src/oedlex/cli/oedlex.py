#!/usr/bin/env python3
"""
oedlex - Command-line access to a legacy OED archive.

Archive paths come from --data/--index, else from OED_DATA_PATH and
OED_INDEX_PATH, else from a config file (see oedlex.config).

Exit codes: 0 success, 1 error, 2 word not found.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import orjson
from rich.console import Console
from rich.markdown import Markdown

from oedlex import tools
from oedlex.config import Config, load_config
from oedlex.dictionary import OEDDictionary
from oedlex.errors import EntryNotFound, IoFailure, OEDError, ToolError
from oedlex.models import RenderFormat
from oedlex.render import render
from oedlex.trie_index import build_index_trie


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2

FORMAT_CHOICES = [f.value for f in RenderFormat]


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )


def resolve_config(args) -> Config:
    """Command-line paths win; otherwise fall back to load_config()."""
    if args.data or args.index:
        if not (args.data and args.index):
            raise SystemExit("error: --data and --index must be given together")
        return Config(data_path=args.data, index_path=args.index, trie_path=args.trie)
    config = load_config()
    if args.trie:
        config = Config(config.data_path, config.index_path, args.trie)
    return config


def open_dictionary(args) -> OEDDictionary:
    config = resolve_config(args)
    return OEDDictionary.from_config(config)


def emit(text: str, console: Console, markdown: bool = False):
    if markdown and console.is_terminal:
        console.print(Markdown(text))
    else:
        sys.stdout.write(text if text.endswith('\n') else text + '\n')


def emit_json(data):
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode('utf-8') + '\n')


def cmd_lookup(oed: OEDDictionary, args, console: Console) -> int:
    try:
        entry = oed.lookup(args.word)
    except EntryNotFound:
        emit(tools.not_found_message(args.word), console)
        return EXIT_NOT_FOUND

    if args.json:
        emit_json({
            'word': entry.word,
            'etymology': entry.etymology,
            'definition': entry.definition,
            'offset': entry.offset,
            'length': entry.length,
        })
        return EXIT_OK

    fmt = RenderFormat.parse(args.format)
    emit(render(entry, fmt, not args.no_etymology), console, markdown=fmt is RenderFormat.FULL)
    return EXIT_OK


def cmd_search(oed: OEDDictionary, args, console: Console) -> int:
    limit = tools.clamp_limit(args.limit)
    if args.json:
        emit_json(oed.search_prefix(args.prefix, limit))
        return EXIT_OK
    emit(tools.oed_search(oed, args.prefix, limit), console)
    return EXIT_OK


def cmd_etymology(oed: OEDDictionary, args, console: Console) -> int:
    emit(tools.oed_etymology(oed, args.word, clean=not args.raw), console)
    return EXIT_OK


def cmd_random(oed: OEDDictionary, args, console: Console) -> int:
    fmt = RenderFormat.parse(args.format)
    emit(tools.oed_random(oed, fmt.value, not args.no_etymology), console,
         markdown=fmt is RenderFormat.FULL)
    return EXIT_OK


def cmd_multi(oed: OEDDictionary, args, console: Console) -> int:
    emit(tools.oed_multi_lookup(oed, args.words), console)
    return EXIT_OK


def cmd_raw(oed: OEDDictionary, args, console: Console) -> int:
    data = oed.read_raw(args.offset, args.length)
    for pos in range(0, len(data), 16):
        chunk = data[pos:pos + 16]
        hex_part = ' '.join(f"{b:02x}" for b in chunk)
        text_part = ''.join(chr(b) if 0x20 <= b < 0x7f else '.' for b in chunk)
        sys.stdout.write(f"{args.offset + pos:08x}  {hex_part:<47}  {text_part}\n")
    return EXIT_OK


def cmd_serve(oed: OEDDictionary, args, console: Console) -> int:
    from oedlex.server import serve
    serve(oed)
    return EXIT_OK


def cmd_build_trie(args) -> int:
    if args.index:
        index_path = args.index
    else:
        index_path = load_config().index_path
    build_index_trie(index_path, args.output, show_progress=not args.no_progress)
    return EXIT_OK


COMMANDS = {
    'lookup': cmd_lookup,
    'search': cmd_search,
    'etymology': cmd_etymology,
    'random': cmd_random,
    'multi': cmd_multi,
    'raw': cmd_raw,
    'serve': cmd_serve,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='oedlex',
        description='Look up entries in a legacy OED archive',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clean entry with etymology
  oedlex lookup test

  # Markdown rendering, no etymology
  oedlex lookup test --format full --no-etymology

  # First 25 words starting with "anti"
  oedlex search anti --limit 25

  # Build the accelerated index, then use it
  oedlex build-trie oed2index.trie
  oedlex --trie oed2index.trie lookup test

  # Serve the tools over MCP (stdio)
  oedlex serve
        """
    )
    parser.add_argument('--data', type=Path, help='Data file (overrides config)')
    parser.add_argument('--index', type=Path, help='Index file (overrides config)')
    parser.add_argument('--trie', type=Path, help='Prebuilt trie for the index')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('lookup', help='Look up one word')
    p.add_argument('word')
    p.add_argument('-f', '--format', choices=FORMAT_CHOICES, default='clean')
    p.add_argument('--no-etymology', action='store_true', help='Omit etymology')
    p.add_argument('--json', action='store_true', help='Print the decoded entry as JSON')

    p = sub.add_parser('search', help='List words starting with a prefix')
    p.add_argument('prefix')
    p.add_argument('-n', '--limit', type=int, default=tools.DEFAULT_SEARCH_LIMIT,
                   help='Maximum results, clamped to 1..50 (default: 10)')
    p.add_argument('--json', action='store_true', help='Print results as a JSON array')

    p = sub.add_parser('etymology', help='Show the etymology of a word')
    p.add_argument('word')
    p.add_argument('--raw', action='store_true', help='Keep markup tags')

    p = sub.add_parser('random', help='Show the "random" (index midpoint) entry')
    p.add_argument('-f', '--format', choices=FORMAT_CHOICES, default='clean')
    p.add_argument('--no-etymology', action='store_true', help='Omit etymology')

    p = sub.add_parser('multi', help='Brief entries for comma-separated words')
    p.add_argument('words')

    p = sub.add_parser('raw', help='Hex dump of data file bytes')
    p.add_argument('offset', type=int)
    p.add_argument('length', type=int)

    sub.add_parser('serve', help='Serve the tools over MCP stdio')

    p = sub.add_parser('build-trie', help='Build an accelerated index trie')
    p.add_argument('output', type=Path, help='Trie output path')
    p.add_argument('--no-progress', action='store_true', help='Disable the progress panel')

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    console = Console()

    try:
        if args.command == 'build-trie':
            return cmd_build_trie(args)

        with open_dictionary(args) as oed:
            return COMMANDS[args.command](oed, args, console)
    except ToolError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except IoFailure as e:
        logger.error(f"I/O failure: {e}")
        return EXIT_ERROR
    except OEDError as e:
        logger.error(f"Failed to initialize OED dictionary: {e}")
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
