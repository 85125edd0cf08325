"""Declarative bundles: templates, bindings and compositions described in a file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence
import heapq

from .assembler import Assembler
from .config_loader import (
    load_config_file,
    normalize_string_list,
    normalize_string_mapping,
)
from .console import Console
from .errors import BundleError
from .executor import DEFAULT_INTERPRETER
from .handle import TemplateHandle
from .template import Template


@dataclass(slots=True)
class GlobalSettings:
    log_level: str = "error"
    interpreter: str = DEFAULT_INTERPRETER

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GlobalSettings":
        section = data.get("global", {})
        if not isinstance(section, Mapping):
            raise BundleError("[global] must be a mapping")
        log_level = str(section.get("log_level", "error"))
        if log_level not in Console.LEVELS:
            raise BundleError(
                f"global.log_level must be one of: {', '.join(Console.LEVELS)} (got '{log_level}')"
            )
        return cls(
            log_level=log_level,
            interpreter=str(section.get("interpreter", DEFAULT_INTERPRETER)),
        )


def _flag(data: Mapping[str, Any], key: str, default: bool, *, template: str) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise BundleError(f"templates.{template}.{key} must be true or false")
    return value


@dataclass(slots=True)
class TemplateSpec:
    name: str
    content: str | None = None
    path: Path | None = None
    dependencies: List[str] = field(default_factory=list)
    values: Dict[str, str] = field(default_factory=dict)
    refs: Dict[str, str] = field(default_factory=dict)
    emit: bool = True
    strict: bool = False

    @classmethod
    def from_mapping(cls, name: str, data: Any, *, base_dir: Path) -> "TemplateSpec":
        if not isinstance(data, Mapping):
            raise BundleError(f"templates.{name} must be a mapping")
        content = data.get("content")
        raw_path = data.get("path")
        if (content is None) == (raw_path is None):
            raise BundleError(f"templates.{name} requires exactly one of 'content' or 'path'")
        if content is not None and not isinstance(content, str):
            raise BundleError(f"templates.{name}.content must be a string")
        path: Path | None = None
        if raw_path is not None:
            path = Path(str(raw_path))
            if not path.is_absolute():
                path = base_dir / path
        return cls(
            name=name,
            content=content,
            path=path,
            dependencies=normalize_string_list(
                data.get("dependencies"), field_name=f"templates.{name}.dependencies"
            ),
            values=normalize_string_mapping(data.get("values"), field_name=f"templates.{name}.values"),
            refs=normalize_string_mapping(data.get("refs"), field_name=f"templates.{name}.refs"),
            emit=_flag(data, "emit", True, template=name),
            strict=_flag(data, "strict", False, template=name),
        )

    def load(self) -> Template:
        if self.path is not None:
            return Template.from_file(self.path, strict=self.strict)
        return Template(self.content or "", strict=self.strict)


@dataclass(slots=True)
class BundleConfig:
    settings: GlobalSettings
    globals: Dict[str, str]
    templates: Dict[str, TemplateSpec]
    source: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: Path | None = None) -> "BundleConfig":
        base = base_dir or Path.cwd()
        raw_templates = data.get("templates")
        if not isinstance(raw_templates, Mapping) or not raw_templates:
            raise BundleError("Bundle must define at least one entry under [templates]")

        templates: Dict[str, TemplateSpec] = {}
        for raw_name, raw_spec in raw_templates.items():
            name = str(raw_name)
            templates[name] = TemplateSpec.from_mapping(name, raw_spec, base_dir=base)

        for spec in templates.values():
            for placeholder, target in spec.refs.items():
                if target not in templates:
                    raise BundleError(
                        f"templates.{spec.name}.refs.{placeholder} references unknown template '{target}'"
                    )

        return cls(
            settings=GlobalSettings.from_mapping(data),
            globals=normalize_string_mapping(data.get("globals"), field_name="globals"),
            templates=templates,
        )

    @classmethod
    def from_file(cls, path: Path) -> "BundleConfig":
        config = cls.from_mapping(load_config_file(path), base_dir=path.resolve().parent)
        config.source = path
        return config


def build_reference_map(templates: Mapping[str, TemplateSpec]) -> Dict[str, List[str]]:
    """Map each template to the templates it composes in, sorted by name."""

    return {name: sorted(set(spec.refs.values())) for name, spec in templates.items()}


def _find_cycle(reference_map: Mapping[str, Sequence[str]]) -> list[str]:
    visited: set[str] = set()
    active: set[str] = set()
    path: list[str] = []

    def _dfs(node: str) -> list[str] | None:
        visited.add(node)
        active.add(node)
        path.append(node)
        for dep in reference_map.get(node, ()):
            if dep in active:
                return path[path.index(dep):] + [dep]
            if dep not in visited:
                found = _dfs(dep)
                if found:
                    return found
        active.remove(node)
        path.pop()
        return None

    for node in reference_map:
        if node not in visited:
            cycle = _dfs(node)
            if cycle:
                return cycle
    return []


def composition_order(reference_map: Mapping[str, Sequence[str]]) -> list[str]:
    """Order templates so every referenced template precedes the ones that use it."""

    dependents: Dict[str, List[str]] = {node: [] for node in reference_map}
    indegree: Dict[str, int] = {}
    for node, deps in reference_map.items():
        indegree[node] = len(deps)
        for dep in deps:
            dependents[dep].append(node)

    ready = [node for node, degree in indegree.items() if degree == 0]
    heapq.heapify(ready)
    order: list[str] = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for dependent in dependents[node]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) != len(reference_map):
        cycle = _find_cycle(reference_map)
        raise BundleError(f"Circular template reference detected: {' -> '.join(cycle)}")
    return order


class Bundle:
    """Materialise a :class:`BundleConfig` into handles and an :class:`Assembler`."""

    def __init__(self, config: BundleConfig, *, console: Console | None = None) -> None:
        self.config = config
        self._console = console or Console(config.settings.log_level)

    @classmethod
    def from_file(cls, path: Path, *, console: Console | None = None) -> "Bundle":
        return cls(BundleConfig.from_file(path), console=console)

    def build(self, overrides: Mapping[str, str] | None = None) -> Assembler:
        specs = self.config.templates
        handles: Dict[str, TemplateHandle] = {}
        broadcast = Assembler()
        for name, spec in specs.items():
            handle = TemplateHandle(spec.load())
            for dependency in spec.dependencies:
                handle.with_dependency(dependency)
            handles[name] = handle
            broadcast.add_template(handle)
            self._console.debug(f"Loaded template '{name}' with placeholders {list(handle.inner.placeholders)}")

        for placeholder, value in self.config.globals.items():
            broadcast.set_global(placeholder, value)
        for name, spec in specs.items():
            for placeholder, value in spec.values.items():
                handles[name].set(placeholder, value)
        for placeholder, value in (overrides or {}).items():
            if not any(handle.declares(placeholder) for handle in broadcast):
                self._console.info(f"Override '{placeholder}' matches no placeholder in any template")
            broadcast.set_global(placeholder, value)

        for name in composition_order(build_reference_map(specs)):
            for placeholder, target in specs[name].refs.items():
                self._console.debug(f"Composing '{target}' into {name}.{placeholder}")
                handles[name].set_ref(placeholder, handles[target])

        assembler = Assembler()
        for name, spec in specs.items():
            if spec.emit:
                assembler.add_template(handles[name])
        self._console.info(f"Assembled {len(assembler)} of {len(specs)} templates")
        return assembler


__all__ = [
    "Bundle",
    "BundleConfig",
    "GlobalSettings",
    "TemplateSpec",
    "build_reference_map",
    "composition_order",
]
