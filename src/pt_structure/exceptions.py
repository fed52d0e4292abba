"""Exception hierarchy for pt-structure."""


class PtStructureError(Exception):
    """Base exception for all pt-structure errors."""


class ParseError(PtStructureError):
    """Raised when a Portable Text document cannot be loaded or validated."""


class OutputError(PtStructureError):
    """Raised when the structured output cannot be written."""


class ConfigError(PtStructureError):
    """Raised when configuration is invalid or missing."""
