"""MSBuild tools discovery and project invocation."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple
import os
import re

from core.command_runner import CommandResult, CommandRunner

from .errors import ToolchainNotFound


KNOWN_VERSIONS: Tuple[str, ...] = ("12.0", "4.0")
"""MSBuild tools versions this builder understands, newest first."""

LEGACY_VERSION = "4.0"

_REGISTRY_KEY = r"HKLM\SOFTWARE\Microsoft\MSBuild\ToolsVersions"
_TOOLS_PATH_PATTERN = re.compile(r"^\s*MSBuildToolsPath\s+REG_\w+\s+(?P<path>.+?)\s*$", re.M)

_MSBUILD_FLAGS: Tuple[str, ...] = (
    "/clp:NoSummary;NoItemAndPropertyList;Verbosity=minimal",
    "/nologo",
)


@dataclass(frozen=True, slots=True)
class ToolchainCapability:
    version: str
    path: str

    @property
    def is_legacy(self) -> bool:
        return self.version == LEGACY_VERSION

    @property
    def executable(self) -> str:
        return os.path.join(self.path, "msbuild")

    def build_command(self, project: Path, build_type: str, architecture: str) -> List[str]:
        return [
            self.executable,
            str(project),
            *_MSBUILD_FLAGS,
            f"/p:Configuration={build_type}",
            f"/p:Platform={architecture}",
        ]


class ToolchainProbe:
    """Locates the MSBuild tools to build with."""

    def detect(self) -> ToolchainCapability:
        raise NotImplementedError


class StaticToolchainProbe(ToolchainProbe):
    """Probe returning a toolchain pinned in the project settings."""

    def __init__(self, version: str, path: str) -> None:
        self._version = version
        self._path = path

    def detect(self) -> ToolchainCapability:
        if self._version not in KNOWN_VERSIONS:
            raise ToolchainNotFound(
                f"MSBuild tools version '{self._version}' is not supported. "
                f"Supported: {', '.join(KNOWN_VERSIONS)}"
            )
        return ToolchainCapability(version=self._version, path=self._path)


class RegistryToolchainProbe(ToolchainProbe):
    """Query the Windows registry for installed MSBuild tools versions."""

    def __init__(self, runner: CommandRunner, versions: Sequence[str] = KNOWN_VERSIONS) -> None:
        self._runner = runner
        self._versions = tuple(versions)

    def query_command(self, version: str) -> List[str]:
        return ["reg", "query", f"{_REGISTRY_KEY}\\{version}", "/v", "MSBuildToolsPath"]

    @staticmethod
    def parse_tools_path(result: CommandResult) -> str | None:
        if result.returncode != 0:
            return None
        match = _TOOLS_PATH_PATTERN.search(result.stdout)
        if not match:
            return None
        return match.group("path")

    def detect(self) -> ToolchainCapability:
        for version in self._versions:
            try:
                result = self._runner.run(self.query_command(version), check=False)
            except OSError:
                # reg.exe is unavailable outside Windows.
                break
            path = self.parse_tools_path(result)
            if path:
                return ToolchainCapability(version=version, path=path)
        raise ToolchainNotFound(
            "MSBuild tools not found. Please install Visual Studio 2013 Update 2 or Visual Studio 2012 "
            f"(looked for versions: {', '.join(self._versions)})"
        )


__all__ = [
    "KNOWN_VERSIONS",
    "LEGACY_VERSION",
    "RegistryToolchainProbe",
    "StaticToolchainProbe",
    "ToolchainCapability",
    "ToolchainProbe",
]
