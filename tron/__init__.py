"""Placeholder templates that compose into one another and render as text."""

from .assembler import Assembler
from .errors import (
    BundleError,
    ExecutionError,
    InvalidSyntaxError,
    MissingPlaceholderError,
    ParseError,
    TronError,
)
from .handle import TemplateHandle
from .template import Template, extract_placeholders

__all__ = [
    "Assembler",
    "BundleError",
    "ExecutionError",
    "InvalidSyntaxError",
    "MissingPlaceholderError",
    "ParseError",
    "Template",
    "TemplateHandle",
    "TronError",
    "extract_placeholders",
]
