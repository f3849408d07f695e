"""Expansion of resolved targets into ordered build jobs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .targets import LEGACY_SOLUTION_TARGET, TargetSpec
from .toolchain import ToolchainCapability


LEGACY_ANY_CPU = "any cpu"
ANY_CPU = "anycpu"


@dataclass(frozen=True, slots=True)
class BuildJob:
    target: TargetSpec
    architecture: str


def normalize_architecture(architecture: str) -> str:
    """Accept "any cpu" spelled with a space; pass everything else through."""

    if architecture == LEGACY_ANY_CPU:
        return ANY_CPU
    return architecture


class BuildPlanner:
    def __init__(self, toolchain: ToolchainCapability) -> None:
        self._toolchain = toolchain

    def job_target(self, target: TargetSpec) -> TargetSpec:
        # MSBuild 4.0 cannot build store .jsproj files directly, only the solution.
        if self._toolchain.is_legacy and target.platform == "store" and target.project_file.endswith(".jsproj"):
            return LEGACY_SOLUTION_TARGET
        return target

    def plan(self, targets: Sequence[TargetSpec], architectures: Sequence[str]) -> List[BuildJob]:
        jobs: List[BuildJob] = []
        for target in targets:
            for architecture in architectures:
                jobs.append(
                    BuildJob(
                        target=self.job_target(target),
                        architecture=normalize_architecture(architecture),
                    )
                )
        return jobs


__all__ = ["ANY_CPU", "BuildJob", "BuildPlanner", "normalize_architecture"]
