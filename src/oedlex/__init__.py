"""
oedlex - read-only access to a legacy OED dictionary archive.

The archive is a data blob of 0x00-terminated records plus a tab-separated
index of headwords and byte offsets. This package locates, decodes and
renders entries, and exposes them as tools.
"""

from oedlex.dictionary import OEDDictionary
from oedlex.errors import (
    ConfigurationMissing,
    EntryNotFound,
    IoFailure,
    OEDError,
    ResourceUnavailable,
    ToolError,
)
from oedlex.models import Entry, IndexRecord, RenderFormat
from oedlex.normalize import normalize
from oedlex.render import render

__version__ = "1.0.0"

__all__ = [
    "OEDDictionary",
    "Entry",
    "IndexRecord",
    "RenderFormat",
    "render",
    "normalize",
    "OEDError",
    "ConfigurationMissing",
    "ResourceUnavailable",
    "EntryNotFound",
    "IoFailure",
    "ToolError",
]
