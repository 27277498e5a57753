class CalwrapError(Exception):
    """Base error."""

class InvalidInputError(CalwrapError, ValueError):
    """Raised when a value cannot be normalized into a usable instant."""

class FormatError(CalwrapError, ValueError):
    """Raised when text does not match a grammar (duration, strict date, rule)."""

class InvalidArgumentError(CalwrapError, TypeError):
    """Raised for bad units, non-finite amounts or non-numeric coordinates."""

class UnsupportedError(CalwrapError):
    """Raised when an optional capability (formatter, interop library) is not available."""
