"""Exception types raised by the templating engine."""
from __future__ import annotations


class TronError(Exception):
    """Base class for every error raised by :mod:`tron`."""


class ParseError(TronError):
    """Raised when input cannot be interpreted."""


class InvalidSyntaxError(TronError, ValueError):
    """Raised when template text contains a malformed placeholder marker."""


class MissingPlaceholderError(TronError, LookupError):
    """Raised for an undeclared placeholder or an unbound one at render time."""

    def __init__(self, placeholder: str):
        super().__init__(f"Missing placeholder: {placeholder}")
        self.placeholder = placeholder


class ExecutionError(TronError, RuntimeError):
    """Raised when a rendered script cannot be executed successfully."""


class BundleError(ParseError):
    """Raised when a bundle configuration is invalid."""


__all__ = [
    "BundleError",
    "ExecutionError",
    "InvalidSyntaxError",
    "MissingPlaceholderError",
    "ParseError",
    "TronError",
]
