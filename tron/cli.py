"""Command line interface for rendering and running template bundles."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Dict, Iterable, List
import sys

from .bundle import Bundle, BundleConfig
from .command_runner import RecordingCommandRunner
from .console import Console
from .errors import TronError
from .executor import ScriptExecutor


def parse_assignment(text: str) -> tuple[str, str]:
    """Split a ``NAME=VALUE`` argument; the name is trimmed, the value kept verbatim."""

    if "=" not in text:
        raise ValueError(f"Invalid assignment (expected NAME=VALUE): {text}")
    name, value = text.split("=", 1)
    name = name.strip()
    if not name:
        raise ValueError(f"Empty placeholder name in: {text}")
    return name, value


def parse_assignments(values: Iterable[str]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for raw in values:
        name, value = parse_assignment(raw)
        result[name] = value
    return result


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="tron", description="Compose and render @[placeholder]@ templates")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = ArgumentParser(add_help=False)
    common.add_argument("bundle", type=Path, help="Bundle file (.toml, .json, .yaml)")
    common.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Bind a placeholder in every template that declares it (repeatable)",
    )
    common.add_argument(
        "--log-level",
        choices=list(Console.LEVELS),
        help="Diagnostic output level (defaults to the bundle's global.log_level)",
    )

    render_parser = subparsers.add_parser("render", parents=[common], help="Render all emitted templates")
    render_parser.add_argument("-o", "--output", type=Path, help="Write the result to a file instead of stdout")

    run_parser = subparsers.add_parser("run", parents=[common], help="Render and execute with the script runner")
    run_parser.add_argument("--interpreter", help="Override the bundle's script runner")
    run_parser.add_argument("--dry-run", action="store_true", help="Print the command without executing it")

    subparsers.add_parser("inspect", parents=[common], help="List templates, placeholders and dependencies")

    return parser.parse_args(list(argv))


def _handle_render(bundle: Bundle, args: Namespace, overrides: Dict[str, str]) -> int:
    output = bundle.build(overrides).render_all()
    if args.output:
        args.output.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return 0


def _handle_run(bundle: Bundle, args: Namespace, console: Console, overrides: Dict[str, str]) -> int:
    assembler = bundle.build(overrides)
    interpreter = args.interpreter or bundle.config.settings.interpreter
    if args.dry_run:
        recorder = RecordingCommandRunner()
        executor = ScriptExecutor(
            runner=recorder, interpreter=interpreter, console=console, require_interpreter=False
        )
        executor.execute_text(assembler.render_all(), assembler.dependencies())
        for line in recorder.iter_formatted():
            print(line)
        return 0

    executor = ScriptExecutor(interpreter=interpreter, console=console)
    sys.stdout.write(executor.execute_text(assembler.render_all(), assembler.dependencies()))
    return 0


def _handle_inspect(config: BundleConfig) -> int:
    for name, spec in config.templates.items():
        template = spec.load()
        source = str(spec.path) if spec.path else "<inline>"
        marker = "" if spec.emit else " (composed only)"
        print(f"{name}{marker}: {source}")
        placeholders: List[str] = list(template.placeholders)
        print(f"  placeholders: {', '.join(placeholders) if placeholders else '-'}")
        if spec.refs:
            refs = ", ".join(f"{key} <- {target}" for key, target in spec.refs.items())
            print(f"  refs: {refs}")
        if spec.dependencies:
            print(f"  dependencies: {'; '.join(spec.dependencies)}")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)

    try:
        overrides = parse_assignments(args.assignments)
        config = BundleConfig.from_file(args.bundle)
        console = Console(args.log_level or config.settings.log_level)
        bundle = Bundle(config, console=console)

        if args.command == "render":
            return _handle_render(bundle, args, overrides)
        if args.command == "run":
            return _handle_run(bundle, args, console, overrides)
        if args.command == "inspect":
            return _handle_inspect(config)
    except (TronError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 2


__all__ = ["main", "parse_assignment", "parse_assignments"]
