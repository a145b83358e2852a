"""
server.py - Expose the dictionary tools over MCP (stdio).

Run with `oedlex serve`. Logging goes to stderr; stdout belongs to the
transport.
"""

import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as MCPToolError

from oedlex import tools
from oedlex.dictionary import OEDDictionary
from oedlex.errors import ToolError


logger = logging.getLogger(__name__)


SERVER_NAME = "OED MCP Server"

FORMAT_HELP = (
    "Output format: 'full' (comprehensive with all details), 'clean' (standard, no XML), "
    "'brief' (minimal), 'raw' (XML for debugging). Default: 'clean'"
)


def _call(handler, *args, **kwargs) -> str:
    try:
        return handler(*args, **kwargs)
    except ToolError as e:
        raise MCPToolError(str(e)) from e


def build_server(oed: OEDDictionary) -> FastMCP:
    server = FastMCP(SERVER_NAME)

    @server.tool(description=(
        "Look up a word in the user's licensed Oxford English Dictionary 2nd Edition. "
        + FORMAT_HELP
    ))
    def oed_lookup(word: str, include_etymology: bool = True, format: str = "clean") -> str:
        return _call(tools.oed_lookup, oed, word, include_etymology, format)

    @server.tool(description=(
        "Search for words starting with a prefix in the user's licensed OED2 copy. "
        "limit: maximum number of results (default: 10, max: 50)"
    ))
    def oed_search(prefix: str, limit: int = tools.DEFAULT_SEARCH_LIMIT) -> str:
        return _call(tools.oed_search, oed, prefix, limit)

    @server.tool(description=(
        "Get detailed etymology information for a word from the user's licensed OED2 copy. "
        "clean: whether to strip XML tags (default: true)"
    ))
    def oed_etymology(word: str, clean: bool = True) -> str:
        return _call(tools.oed_etymology, oed, word, clean)

    @server.tool(description="Get a random word from the user's licensed OED2 copy. " + FORMAT_HELP)
    def oed_random(format: str = "clean", include_etymology: bool = True) -> str:
        return _call(tools.oed_random, oed, format, include_etymology)

    @server.tool(description=(
        "Look up multiple words in the user's licensed OED2 copy at once. "
        "words: comma-separated list of words"
    ))
    def oed_multi_lookup(words: str) -> str:
        return _call(tools.oed_multi_lookup, oed, words)

    return server


def serve(oed: OEDDictionary):
    """Serve the tools over stdio until the client disconnects."""
    logger.info(f"Starting {SERVER_NAME} (data={oed.data.path}, index={oed.index.path})")
    build_server(oed).run(transport="stdio")
