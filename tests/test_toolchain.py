from __future__ import annotations

from pathlib import Path
import os
import textwrap
import unittest

from core.command_runner import CommandResult, CommandRunner
from winbuilder.errors import ToolchainNotFound
from winbuilder.toolchain import (
    KNOWN_VERSIONS,
    RegistryToolchainProbe,
    StaticToolchainProbe,
    ToolchainCapability,
)


def _registry_output(version: str, path: str) -> str:
    return textwrap.dedent(
        f"""

        HKEY_LOCAL_MACHINE\\SOFTWARE\\Microsoft\\MSBuild\\ToolsVersions\\{version}
            MSBuildToolsPath    REG_SZ    {path}

        """
    )


class FakeRegistryRunner(CommandRunner):
    def __init__(self, installed: dict[str, str]) -> None:
        self.installed = installed
        self.history: list[list[str]] = []

    def run(self, command, *, cwd=None, env=None, check=True, note=None, stream=False):  # type: ignore[override]
        cmd_list = list(command)
        self.history.append(cmd_list)
        version = cmd_list[2].rsplit("\\", 1)[-1]
        if version in self.installed:
            return CommandResult(
                command=cmd_list,
                returncode=0,
                stdout=_registry_output(version, self.installed[version]),
                stderr="",
            )
        return CommandResult(
            command=cmd_list,
            returncode=1,
            stdout="",
            stderr="ERROR: The system was unable to find the specified registry key or value.",
        )


class NoRegRunner(CommandRunner):
    def run(self, command, *, cwd=None, env=None, check=True, note=None, stream=False):  # type: ignore[override]
        raise FileNotFoundError(2, "No such file or directory", "reg")


class RegistryToolchainProbeTests(unittest.TestCase):
    def test_prefers_newest_installed_version(self) -> None:
        runner = FakeRegistryRunner(
            {
                "12.0": "C:\\Program Files (x86)\\MSBuild\\12.0\\bin\\",
                "4.0": "C:\\Windows\\Microsoft.NET\\Framework\\v4.0.30319\\",
            }
        )
        capability = RegistryToolchainProbe(runner).detect()
        self.assertEqual(capability.version, "12.0")
        self.assertEqual(capability.path, "C:\\Program Files (x86)\\MSBuild\\12.0\\bin\\")
        self.assertFalse(capability.is_legacy)
        self.assertEqual(len(runner.history), 1)

    def test_falls_back_to_legacy_version(self) -> None:
        runner = FakeRegistryRunner({"4.0": "C:\\Windows\\Microsoft.NET\\Framework\\v4.0.30319\\"})
        capability = RegistryToolchainProbe(runner).detect()
        self.assertEqual(capability.version, "4.0")
        self.assertTrue(capability.is_legacy)
        self.assertEqual(
            [command[2] for command in runner.history],
            [
                "HKLM\\SOFTWARE\\Microsoft\\MSBuild\\ToolsVersions\\12.0",
                "HKLM\\SOFTWARE\\Microsoft\\MSBuild\\ToolsVersions\\4.0",
            ],
        )

    def test_query_command(self) -> None:
        probe = RegistryToolchainProbe(FakeRegistryRunner({}))
        self.assertEqual(
            probe.query_command("12.0"),
            ["reg", "query", "HKLM\\SOFTWARE\\Microsoft\\MSBuild\\ToolsVersions\\12.0", "/v", "MSBuildToolsPath"],
        )

    def test_no_installed_version_raises(self) -> None:
        runner = FakeRegistryRunner({})
        with self.assertRaises(ToolchainNotFound):
            RegistryToolchainProbe(runner).detect()
        self.assertEqual(len(runner.history), len(KNOWN_VERSIONS))

    def test_missing_reg_tool_raises(self) -> None:
        with self.assertRaises(ToolchainNotFound):
            RegistryToolchainProbe(NoRegRunner()).detect()

    def test_output_without_tools_path_is_ignored(self) -> None:
        result = CommandResult(command=["reg"], returncode=0, stdout="HKEY_LOCAL_MACHINE\\...\n", stderr="")
        self.assertIsNone(RegistryToolchainProbe.parse_tools_path(result))


class StaticToolchainProbeTests(unittest.TestCase):
    def test_known_version(self) -> None:
        capability = StaticToolchainProbe("4.0", "C:/legacy").detect()
        self.assertEqual(capability, ToolchainCapability(version="4.0", path="C:/legacy"))

    def test_unknown_version(self) -> None:
        with self.assertRaises(ToolchainNotFound):
            StaticToolchainProbe("14.0", "C:/MSBuild").detect()


class ToolchainCapabilityTests(unittest.TestCase):
    def test_build_command(self) -> None:
        capability = ToolchainCapability(version="12.0", path="C:/MSBuild")
        command = capability.build_command(Path("proj") / "CordovaApp.Phone.jsproj", "debug", "x86")
        self.assertEqual(command[0], os.path.join("C:/MSBuild", "msbuild"))
        self.assertEqual(command[1], str(Path("proj") / "CordovaApp.Phone.jsproj"))
        self.assertEqual(command[-2:], ["/p:Configuration=debug", "/p:Platform=x86"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
