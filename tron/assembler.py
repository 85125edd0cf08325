"""Aggregate several template handles into one rendered document."""
from __future__ import annotations

from typing import Iterator, List, Tuple

from .handle import TemplateHandle


class Assembler:
    """Ordered collection of handles rendered back to back."""

    def __init__(self) -> None:
        self._templates: List[TemplateHandle] = []

    def add_template(self, handle: TemplateHandle) -> None:
        self._templates.append(handle)

    @property
    def templates(self) -> Tuple[TemplateHandle, ...]:
        return tuple(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[TemplateHandle]:
        return iter(self._templates)

    def set_global(self, name: str, value: str) -> None:
        """Bind *name* on every handle that declares it; others are skipped."""

        for handle in self._templates:
            if handle.declares(name):
                handle.set(name, value)

    def set_ref_global(self, name: str, other: TemplateHandle) -> None:
        """Compose a private copy of *other* into every handle that declares *name*."""

        for handle in self._templates:
            if handle.declares(name):
                handle.set_ref(name, other.copy())

    def dependencies(self) -> List[str]:
        merged: List[str] = []
        for handle in self._templates:
            merged.extend(handle.dependencies)
        return merged

    def render_all(self) -> str:
        parts: List[str] = []
        for handle in self._templates:
            parts.append(handle.render())
            parts.append("\n")
        return "".join(parts)


__all__ = ["Assembler"]
