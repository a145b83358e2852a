"""
errors.py - Exception hierarchy for the dictionary engine.

Startup errors (ConfigurationMissing, ResourceUnavailable) are fatal for the
process; EntryNotFound and IoFailure are per-call outcomes and leave the
engine usable. Malformed index lines are not errors at all: they are skipped.
"""


class OEDError(Exception):
    """Base class for all oedlex errors."""


class ConfigurationMissing(OEDError):
    """No data/index path could be resolved."""


class ResourceUnavailable(OEDError):
    """A configured path does not exist or cannot be opened."""


class EntryNotFound(OEDError):
    """The word (or the random-entry probe) matched nothing usable."""


class IoFailure(OEDError):
    """Seek or read failed during an otherwise valid operation."""


class ToolError(OEDError):
    """A tool invocation was rejected (bad arguments or failed operation)."""
