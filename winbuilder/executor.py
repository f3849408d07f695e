"""Serial execution of build jobs against MSBuild."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from core.command_runner import CommandError, CommandResult, CommandRunner

from .errors import JobFailure
from .options import BuildType
from .planner import BuildJob
from .reporter import Reporter
from .toolchain import ToolchainCapability


class BuildExecutor:
    """Runs jobs one at a time and stops at the first failing job.

    Jobs that completed before a failure are left as they are; the failure is
    raised as :class:`JobFailure` and the rest of the queue is never started.
    """

    def __init__(
        self,
        *,
        command_runner: CommandRunner,
        toolchain: ToolchainCapability,
        project_root: Path,
        build_type: BuildType,
        reporter: Reporter,
    ) -> None:
        self._command_runner = command_runner
        self._toolchain = toolchain
        self._project_root = project_root
        self._build_type = build_type
        self._reporter = reporter

    def command_for(self, job: BuildJob) -> List[str]:
        project = self._project_root / job.target.project_file
        return self._toolchain.build_command(project, self._build_type.value, job.architecture)

    def run(self, jobs: Sequence[BuildJob]) -> List[CommandResult]:
        results: List[CommandResult] = []
        for index, job in enumerate(jobs, start=1):
            self._reporter.normal(
                f"Building {job.target.project_file} ({self._build_type.value}, {job.architecture}) "
                f"[{index}/{len(jobs)}]"
            )
            command = self.command_for(job)
            self._reporter.verbose(f"Running {self._command_runner.format_command(command)}")
            try:
                result = self._command_runner.run(
                    command,
                    cwd=self._project_root,
                    note=f"Build {job.target.project_file} ({job.architecture})",
                    stream=True,
                )
            except (CommandError, OSError) as exc:
                raise JobFailure(job, exc) from exc
            results.append(result)
        return results


__all__ = ["BuildExecutor"]
