"""Core build planning and execution logic."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from core.command_runner import CommandResult, CommandRunner, SubprocessCommandRunner

from .executor import BuildExecutor
from .options import BuildRequest
from .planner import BuildJob, BuildPlanner
from .preferences import ConfigXmlPreferences, PreferenceSource
from .project import apply_platform_config, ensure_platform_project, platform_config_script
from .reporter import Reporter
from .settings import BuildSettings
from .targets import DegradedTargetSet, TargetResolver, TargetSpec
from .toolchain import RegistryToolchainProbe, StaticToolchainProbe, ToolchainCapability, ToolchainProbe


@dataclass(frozen=True, slots=True)
class BuildContext:
    project_root: Path
    request: BuildRequest
    toolchain: ToolchainCapability
    settings: BuildSettings


@dataclass(slots=True)
class BuildPlan:
    context: BuildContext
    targets: List[TargetSpec]
    jobs: List[BuildJob]
    degraded: DegradedTargetSet | None
    platform_config_script: Path

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "project_root": str(self.context.project_root),
            "build_type": self.context.request.build_type.value,
            "scope": self.context.request.scope.value,
            "toolchain": {
                "version": self.context.toolchain.version,
                "path": self.context.toolchain.path,
            },
            "targets": [target.project_file for target in self.targets],
            "jobs": [
                {"target": job.target.project_file, "architecture": job.architecture}
                for job in self.jobs
            ],
            "skipped": [target.project_file for target in self.degraded.skipped] if self.degraded else [],
        }


def default_probe(settings: BuildSettings, runner: CommandRunner | None = None) -> ToolchainProbe:
    if settings.toolchain is not None:
        return StaticToolchainProbe(settings.toolchain.version, settings.toolchain.path)
    return RegistryToolchainProbe(runner or SubprocessCommandRunner())


class BuildEngine:
    """Plans and runs one platform build.

    The toolchain is probed at most once per engine, after the project check,
    and the result is shared by target resolution, planning and execution.
    """

    def __init__(
        self,
        *,
        project_root: Path,
        command_runner: CommandRunner,
        probe: ToolchainProbe,
        reporter: Reporter,
        settings: BuildSettings | None = None,
        preferences: PreferenceSource | None = None,
    ) -> None:
        self._project_root = project_root
        self._command_runner = command_runner
        self._probe = probe
        self._reporter = reporter
        self._settings = settings or BuildSettings()
        self._preferences = preferences
        self._toolchain: ToolchainCapability | None = None

    def toolchain(self) -> ToolchainCapability:
        if self._toolchain is None:
            self._toolchain = self._probe.detect()
            self._reporter.normal(f"MSBuildToolsPath: {self._toolchain.path}")
        return self._toolchain

    def _load_preferences(self) -> PreferenceSource:
        if self._preferences is None:
            self._preferences = ConfigXmlPreferences(self._project_root / self._settings.preferences_file)
        return self._preferences

    def plan(self, request: BuildRequest) -> BuildPlan:
        ensure_platform_project(self._project_root)
        toolchain = self.toolchain()
        context = BuildContext(
            project_root=self._project_root,
            request=request,
            toolchain=toolchain,
            settings=self._settings,
        )
        script = platform_config_script(self._project_root, self._settings.platform_config_script)

        resolver = TargetResolver(
            preferences=self._load_preferences(),
            toolchain=toolchain,
            reporter=self._reporter,
        )
        targets = resolver.resolve(request.scope)
        jobs = BuildPlanner(toolchain).plan(targets, request.architectures)
        return BuildPlan(
            context=context,
            targets=targets,
            jobs=jobs,
            degraded=resolver.degraded,
            platform_config_script=script,
        )

    def execute(self, plan: BuildPlan) -> List[CommandResult]:
        context = plan.context
        self._reporter.verbose(f"Applying platform config via {plan.platform_config_script}")
        apply_platform_config(self._command_runner, context.project_root, plan.platform_config_script)

        executor = BuildExecutor(
            command_runner=self._command_runner,
            toolchain=context.toolchain,
            project_root=context.project_root,
            build_type=context.request.build_type,
            reporter=self._reporter,
        )
        return executor.run(plan.jobs)

    def run(self, request: BuildRequest) -> List[CommandResult]:
        return self.execute(self.plan(request))


__all__ = ["BuildContext", "BuildEngine", "BuildPlan", "default_probe"]
