"""Run external commands and capture their output."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence
import os
import shlex
import subprocess


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


@dataclass
class CommandResult:
    """Outcome of one command invocation."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandError(RuntimeError):
    """Raised when a checked command exits with a non-zero status."""

    def __init__(self, result: CommandResult):
        super().__init__(
            f"Command failed with exit code {result.returncode}: {format_command(result.command)}\n"
            f"stderr: {result.stderr}"
        )
        self.result = result


class CommandRunner:
    """Interface shared by the real and the recording runner."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        raise NotImplementedError

    @staticmethod
    def _checked(result: CommandResult, *, check: bool) -> CommandResult:
        if check and not result.ok:
            raise CommandError(result)
        return result


class SubprocessCommandRunner(CommandRunner):
    """Runs commands through :func:`subprocess.run` with captured text output."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        merged_env: Dict[str, str] | None = None
        if env is not None:
            merged_env = os.environ.copy()
            merged_env.update(env)
        process = subprocess.run(
            [str(part) for part in command],
            cwd=str(cwd) if cwd else None,
            env=merged_env,
            capture_output=True,
            text=True,
            check=False,
        )
        result = CommandResult(
            command=list(command),
            returncode=process.returncode,
            stdout=process.stdout,
            stderr=process.stderr,
        )
        return self._checked(result, check=check)


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str] = field(default_factory=dict)


class RecordingCommandRunner(CommandRunner):
    """Records commands instead of running them and replies with a canned result."""

    def __init__(self, *, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.commands: List[RecordedCommand] = []
        self._stdout = stdout
        self._stderr = stderr
        self._returncode = returncode

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=[str(part) for part in command],
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else {},
            )
        )
        result = CommandResult(
            command=list(command),
            returncode=self._returncode,
            stdout=self._stdout,
            stderr=self._stderr,
        )
        return self._checked(result, check=check)

    def iter_formatted(self) -> Iterable[str]:
        for record in self.commands:
            parts = ["[dry-run]"]
            if record.cwd:
                parts.append(f"(cwd={record.cwd})")
            parts.append(format_command(record.command))
            yield " ".join(parts)


__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "format_command",
]
