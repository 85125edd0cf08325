"""Levelled console output used by the executor, bundle builder and CLI."""
from __future__ import annotations

from typing import TextIO
import sys


class Console:
    """Print diagnostics filtered by level.

    Levels: none < error < info < debug
    Default: 'error'
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(
        self,
        level: str = "error",
        *,
        stream: TextIO | None = None,
    ):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Choose from: {', '.join(self.LEVELS)}")
        self.level_name = level
        self.level = self.LEVELS[level]
        self._stream = stream

    def _err(self) -> TextIO:
        return self._stream or sys.stderr

    def info(self, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(f"[INFO] {message}", file=self._err())

    def error(self, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"[ERROR] {message}", file=self._err())

    def debug(self, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[DEBUG] {message}", file=self._err())


__all__ = ["Console"]
