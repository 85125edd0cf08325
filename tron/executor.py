"""Execute rendered templates with an external script runner."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
import contextlib
import os
import shutil
import tempfile

from .command_runner import CommandRunner, SubprocessCommandRunner, format_command
from .console import Console
from .errors import ExecutionError
from .handle import TemplateHandle


DEFAULT_INTERPRETER = "rust-script"


def build_script(rendered: str, dependencies: Iterable[str]) -> str:
    """Prefix *rendered* with one embedded cargo manifest block per dependency."""

    lines: List[str] = []
    for dependency in dependencies:
        lines.append("//! ```cargo\n")
        lines.append("//! [dependencies]\n")
        lines.append(f"//! {dependency} \n")
        lines.append("//! ```\n")
    lines.append(rendered)
    return "".join(lines)


class ScriptExecutor:
    """Write a rendered handle to a temporary script and run it.

    The interpreter receives the script path as its only argument. Standard
    output is returned on success; a non-zero exit raises
    :class:`ExecutionError` carrying the captured standard error.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        interpreter: str = DEFAULT_INTERPRETER,
        console: Console | None = None,
        suffix: str = ".rs",
        require_interpreter: bool = True,
    ) -> None:
        self._runner = runner or SubprocessCommandRunner()
        self._interpreter = interpreter
        self._console = console or Console()
        self._suffix = suffix
        self._require_interpreter = require_interpreter

    @property
    def interpreter(self) -> str:
        return self._interpreter

    def _ensure_interpreter(self) -> None:
        if not self._require_interpreter:
            return
        if shutil.which(self._interpreter) is None:
            raise ExecutionError(
                f"{self._interpreter} not found. Install with: cargo install {self._interpreter}"
            )

    def execute(self, handle: TemplateHandle) -> str:
        self._ensure_interpreter()
        return self._run(handle.render(), handle.dependencies)

    def execute_text(self, rendered: str, dependencies: Iterable[str] = ()) -> str:
        self._ensure_interpreter()
        return self._run(rendered, dependencies)

    def _run(self, rendered: str, dependencies: Iterable[str]) -> str:
        dependencies = list(dependencies)
        script = build_script(rendered, dependencies)
        try:
            with tempfile.NamedTemporaryFile(
                "w", suffix=self._suffix, encoding="utf-8", delete=False
            ) as handle:
                handle.write(script)
                script_path = Path(handle.name)
        except OSError as exc:
            raise ExecutionError(f"Failed to write temp file: {exc}") from exc

        command = [self._interpreter, str(script_path)]
        self._console.debug(f"Script written to {script_path} with {len(dependencies)} dependencies")
        self._console.info(f"Running {format_command(command)}")
        try:
            result = self._runner.run(command, check=False)
        except OSError as exc:
            raise ExecutionError(f"Failed to execute script: {exc}") from exc
        finally:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(script_path)

        if not result.ok:
            self._console.error(f"{self._interpreter} exited with status {result.returncode}")
            raise ExecutionError(result.stderr)
        return result.stdout


__all__ = ["DEFAULT_INTERPRETER", "ScriptExecutor", "build_script"]
