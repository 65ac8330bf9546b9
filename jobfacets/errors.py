"""Exception types raised by jobfacets."""

from __future__ import annotations


class JobFacetsError(Exception):
    """Base class for all errors raised by this package."""


class InvalidPatternError(JobFacetsError, ValueError):
    """A keyword pattern could not be compiled as a regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid keyword pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class RecordFormatError(JobFacetsError):
    """Raised when a records file does not have a recognised shape."""


class ConfigError(JobFacetsError):
    """Raised for unreadable or badly typed configuration."""
