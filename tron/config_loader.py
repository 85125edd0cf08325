"""Decode bundle configuration files by suffix."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence
import json
import tomllib

import yaml

from .errors import ParseError


ConfigLoader = Callable[[Any], Any]


FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": lambda stream: tomllib.load(stream),
    ".json": lambda stream: json.load(stream),
    ".yaml": lambda stream: yaml.safe_load(stream),
    ".yml": lambda stream: yaml.safe_load(stream),
}
"""Mapping of file suffixes to loader callables."""

_DECODE_ERRORS = (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError)


def register_loader(suffix: str, loader: ConfigLoader) -> None:
    """Register ``loader`` for files ending with ``suffix``."""

    normalized = suffix.lower()
    if not normalized.startswith("."):
        raise ValueError("Suffix must start with '.'")
    FILE_LOADERS[normalized] = loader


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Load and decode a configuration mapping from ``path``.

    ``OSError`` from opening the file propagates unchanged; undecodable
    content and non-mapping documents raise :class:`ParseError`.
    """

    suffix = path.suffix.lower()
    loader = FILE_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(FILE_LOADERS)) or "<none>"
        raise ParseError(f"Unsupported configuration file extension: {suffix}. Supported: {supported}")

    mode = "rb" if suffix == ".toml" else "r"
    kwargs: Dict[str, Any] = {}
    if mode == "r":
        kwargs["encoding"] = "utf-8"

    with path.open(mode, **kwargs) as handle:
        try:
            data = loader(handle)
        except _DECODE_ERRORS as exc:
            raise ParseError(f"Failed to parse '{path}': {exc}") from exc

    if not isinstance(data, Mapping):
        raise ParseError(f"Configuration file '{path}' must contain a mapping at the root")
    return data


def normalize_string_list(value: Any, *, field_name: str | None = None) -> List[str]:
    """Coerce ``value`` into a list of strings, dropping blank entries."""

    label = f"{field_name} " if field_name else ""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, Sequence):
        items: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ParseError(f"{label}entries must be strings")
            if item.strip():
                items.append(item)
        return items
    raise ParseError(f"{label}must be a string or sequence of strings")


def normalize_string_mapping(value: Any, *, field_name: str) -> Dict[str, str]:
    """Validate that ``value`` maps strings to scalar values and stringify them."""

    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ParseError(f"{field_name} must be a mapping")
    result: Dict[str, str] = {}
    for key, item in value.items():
        if isinstance(item, (Mapping, list, tuple)) or item is None:
            raise ParseError(f"{field_name}.{key} must be a scalar value")
        if isinstance(item, bool):
            item = "true" if item else "false"
        result[str(key)] = str(item)
    return result


__all__ = [
    "ConfigLoader",
    "FILE_LOADERS",
    "load_config_file",
    "normalize_string_list",
    "normalize_string_mapping",
    "register_loader",
]
