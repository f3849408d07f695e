"""Command line interface for the Windows platform builder."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List
import json
import sys

from core.command_runner import CommandRunner, RecordingCommandRunner, SubprocessCommandRunner

from .build import BuildEngine, default_probe
from .errors import BuildError, ConflictingOptions
from .options import build_request, split_architectures
from .reporter import Reporter
from .settings import BuildSettings, load_settings


_EXAMPLES = """\
examples:
    winbuilder build
    winbuilder build --debug
    winbuilder build --release
    winbuilder build --release --archs="arm x86"
    winbuilder build --phone --archs="x86 arm"
"""


def _add_build_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("--debug", action="store_true", help="Build the project in debug mode (default)")
    parser.add_argument("-r", "--release", action="store_true", help="Build the project in release mode")
    parser.add_argument(
        "--archs",
        action="append",
        default=[],
        metavar="ARCHS",
        help="Space separated chip architectures to build for: anycpu, arm, x86, x64 (default: anycpu)",
    )
    parser.add_argument("--phone", action="store_true", help="Build the Windows Phone target only")
    parser.add_argument("--store", action="store_true", help="Build the Windows Store target only")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Print commands without executing them")
    parser.add_argument("--verbose", action="store_true", help="Show tool output and debug messages")
    parser.add_argument("--silent", action="store_true", help="Only show warnings and errors")
    parser.add_argument("--project-dir", metavar="PATH", help="Platform project root (default: current directory)")
    parser.add_argument("--config", metavar="PATH", help="Settings file (default: winbuilder.* in the project root)")


def _parse_arguments(argv: Iterable[str]) -> tuple[Namespace, List[str]]:
    parser = ArgumentParser(prog="winbuilder", description="Windows Store and Windows Phone platform builder")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Build the platform project",
        epilog=_EXAMPLES,
        formatter_class=RawDescriptionHelpFormatter,
    )
    _add_build_arguments(build_parser)

    plan_parser = subparsers.add_parser("plan", help="Print the resolved build jobs as JSON without building")
    _add_build_arguments(plan_parser)

    return parser.parse_known_args(list(argv))


def _log_level(args: Namespace, settings: BuildSettings) -> str:
    if args.verbose:
        return "verbose"
    if args.silent:
        return "error"
    return settings.log_level or "normal"


def _make_runner(dry_run: bool, reporter: Reporter) -> SubprocessCommandRunner | RecordingCommandRunner:
    if dry_run:
        return RecordingCommandRunner()
    return SubprocessCommandRunner(stdout_sink=reporter.verbose, stderr_sink=reporter.error)


def _emit_dry_run_output(runner: RecordingCommandRunner, *, workspace: Path) -> None:
    for line in runner.iter_formatted(workspace=workspace):
        print(line)


def main(argv: Iterable[str] | None = None) -> int:
    args, extra = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()

    if args.command in {"build", "plan"}:
        return _handle_build(args, extra, workspace)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_build(args: Namespace, extra: List[str], workspace: Path) -> int:
    project_root = workspace
    if getattr(args, "project_dir", None):
        project_root = Path(args.project_dir)
        if not project_root.is_absolute():
            project_root = workspace / project_root

    settings_path: Path | None = None
    if getattr(args, "config", None):
        settings_path = Path(args.config)
        if not settings_path.is_absolute():
            settings_path = workspace / settings_path

    try:
        request = build_request(
            debug=args.debug,
            release=args.release,
            phone=args.phone,
            store=args.store,
            archs=args.archs,
            dry_run=args.dry_run,
            ignored_arguments=extra,
        )
    except ConflictingOptions as exc:
        print(f"Error: {exc}")
        return 2

    try:
        settings = load_settings(project_root, settings_path)
    except (OSError, TypeError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1

    if settings.architectures and not split_architectures(args.archs):
        request = replace(request, architectures=tuple(settings.architectures))

    # Keep stdout clean for the JSON document printed by "plan".
    reporter = Reporter(_log_level(args, settings), stream=sys.stderr if args.command == "plan" else None)

    if request.ignored_arguments:
        reporter.verbose(f"Ignoring unrecognized arguments: {' '.join(request.ignored_arguments)}")

    runner: CommandRunner = _make_runner(request.dry_run, reporter)
    engine = BuildEngine(
        project_root=project_root,
        command_runner=runner,
        probe=default_probe(settings),
        reporter=reporter,
        settings=settings,
    )

    try:
        if args.command == "plan":
            plan = engine.plan(request)
            print(json.dumps(plan.to_mapping(), indent=2))
            return 0
        results = engine.run(request)
    except BuildError as exc:
        print(f"Error: {exc}")
        return 1

    if request.dry_run and isinstance(runner, RecordingCommandRunner):
        _emit_dry_run_output(runner, workspace=project_root)
    elif results:
        reporter.info(f"Build succeeded ({len(results)} job{'s' if len(results) != 1 else ''})")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
