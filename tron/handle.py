"""Composable template handles carrying dependency declarations."""
from __future__ import annotations

from typing import List, Tuple

from .template import Template


class TemplateHandle:
    """A :class:`Template` plus the ordered dependencies its script needs.

    Dependencies are opaque strings interpreted by the script executor. When
    another handle is composed in with :meth:`set_ref`, its rendered text is
    copied into the placeholder and its dependencies are appended after ours.
    """

    __slots__ = ("_template", "_dependencies")

    def __init__(self, template: Template):
        self._template = template
        self._dependencies: List[str] = []

    @classmethod
    def from_text(cls, content: str, *, strict: bool = False) -> "TemplateHandle":
        return cls(Template(content, strict=strict))

    def with_dependency(self, dependency: str) -> "TemplateHandle":
        self._dependencies.append(dependency)
        return self

    @property
    def inner(self) -> Template:
        return self._template

    @property
    def dependencies(self) -> Tuple[str, ...]:
        return tuple(self._dependencies)

    def declares(self, name: str) -> bool:
        return self._template.has_placeholder(name)

    def set(self, name: str, value: str) -> None:
        self._template.set(name, value)

    def set_ref(self, name: str, other: "TemplateHandle") -> None:
        """Bind *name* to the rendered output of *other* and absorb its dependencies."""

        rendered = other.render()
        self._template.set(name, rendered)
        self._dependencies.extend(other._dependencies)

    def render(self) -> str:
        return self._template.render()

    def copy(self) -> "TemplateHandle":
        clone = TemplateHandle(self._template.copy())
        clone._dependencies = list(self._dependencies)
        return clone

    def __repr__(self) -> str:
        return f"TemplateHandle({self._template!r}, dependencies={self._dependencies!r})"


__all__ = ["TemplateHandle"]
