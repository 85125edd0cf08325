"""Placeholder extraction, binding and rendering for ``@[name]@`` templates."""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping
import re

from .errors import InvalidSyntaxError, MissingPlaceholderError


_PLACEHOLDER_PATTERN = re.compile(r"@\[([^\]]+)\]@")
_OPEN_DELIMITER = "@["


def extract_placeholders(text: str) -> List[str]:
    """Return the distinct placeholder names in *text* in order of first appearance."""

    names: Dict[str, None] = {}
    for match in _PLACEHOLDER_PATTERN.finditer(text):
        names.setdefault(match.group(1).strip(), None)
    return list(names)


def _check_syntax(text: str) -> None:
    covered: List[tuple[int, int]] = []
    for match in _PLACEHOLDER_PATTERN.finditer(text):
        if not match.group(1).strip():
            raise InvalidSyntaxError(f"Empty placeholder name at offset {match.start()}")
        covered.append(match.span())

    position = text.find(_OPEN_DELIMITER)
    while position != -1:
        if not any(start <= position < end for start, end in covered):
            raise InvalidSyntaxError(f"Unterminated placeholder marker at offset {position}")
        position = text.find(_OPEN_DELIMITER, position + 1)


class Template:
    """Raw text plus the closed set of placeholders it declares.

    Placeholders start out unbound (an empty string). :meth:`set` only accepts
    names found in the text, and :meth:`render` refuses to run while any
    placeholder is still unbound.
    """

    __slots__ = ("_content", "_placeholders", "path")

    def __init__(self, content: str, *, strict: bool = False, path: Path | None = None):
        if strict:
            _check_syntax(content)
        self._content = content
        self._placeholders: Dict[str, str] = {name: "" for name in extract_placeholders(content)}
        self.path = path

    @classmethod
    def from_file(cls, path: Path | str, *, strict: bool = False) -> "Template":
        """Load a template from a UTF-8 text file."""

        source = Path(path)
        return cls(source.read_text(encoding="utf-8"), strict=strict, path=source)

    @property
    def content(self) -> str:
        return self._content

    @property
    def placeholders(self) -> Mapping[str, str]:
        return MappingProxyType(self._placeholders)

    def has_placeholder(self, name: str) -> bool:
        return name in self._placeholders

    __contains__ = has_placeholder

    def unbound(self) -> List[str]:
        return [name for name, value in self._placeholders.items() if not value]

    def set(self, name: str, value: str) -> None:
        if name not in self._placeholders:
            raise MissingPlaceholderError(name)
        self._placeholders[name] = value

    def render(self) -> str:
        # Checked in first-appearance order, so the reported name is stable.
        for name, value in self._placeholders.items():
            if not value:
                raise MissingPlaceholderError(name)

        def replacement(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            if name not in self._placeholders:
                return match.group(0)
            return self._placeholders[name]

        return _PLACEHOLDER_PATTERN.sub(replacement, self._content)

    def copy(self) -> "Template":
        clone = Template.__new__(Template)
        clone._content = self._content
        clone._placeholders = dict(self._placeholders)
        clone.path = self.path
        return clone

    def __repr__(self) -> str:
        source = f", path={str(self.path)!r}" if self.path else ""
        return f"Template(placeholders={list(self._placeholders)!r}{source})"


__all__ = ["Template", "extract_placeholders"]
