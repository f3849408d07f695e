from __future__ import annotations

from pathlib import Path
import io
import os
import unittest

from core.command_runner import CommandError, CommandResult, CommandRunner
from winbuilder.errors import JobFailure
from winbuilder.executor import BuildExecutor
from winbuilder.options import BuildType
from winbuilder.planner import BuildJob
from winbuilder.reporter import Reporter
from winbuilder.targets import PHONE_TARGET, STORE_TARGET
from winbuilder.toolchain import ToolchainCapability


class ScriptedRunner(CommandRunner):
    """Fails every MSBuild call whose platform is listed in ``failing_archs``."""

    def __init__(self, failing_archs: set[str] | None = None) -> None:
        self.failing_archs = failing_archs or set()
        self.history: list[dict] = []

    def run(self, command, *, cwd=None, env=None, check=True, note=None, stream=False):  # type: ignore[override]
        cmd_list = list(command)
        self.history.append({"command": cmd_list, "cwd": cwd, "stream": stream})
        platform = cmd_list[-1].partition("=")[2]
        if platform in self.failing_archs:
            result = CommandResult(command=cmd_list, returncode=1, stdout="", stderr="error MSB4126")
            if check:
                raise CommandError(result)
            return result
        return CommandResult(command=cmd_list, returncode=0, stdout="", stderr="")


class MissingToolRunner(CommandRunner):
    def run(self, command, *, cwd=None, env=None, check=True, note=None, stream=False):  # type: ignore[override]
        raise FileNotFoundError(2, "No such file or directory", command[0])


class BuildExecutorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.root = Path("/projects/app/platforms/windows")
        self.toolchain = ToolchainCapability(version="12.0", path="C:/MSBuild/12.0/bin")
        self.out = io.StringIO()
        self.reporter = Reporter(stream=self.out, error_stream=io.StringIO())

    def _executor(self, runner: CommandRunner, build_type: BuildType = BuildType.DEBUG) -> BuildExecutor:
        return BuildExecutor(
            command_runner=runner,
            toolchain=self.toolchain,
            project_root=self.root,
            build_type=build_type,
            reporter=self.reporter,
        )

    def test_runs_jobs_in_order_with_msbuild_arguments(self) -> None:
        runner = ScriptedRunner()
        jobs = [BuildJob(STORE_TARGET, "anycpu"), BuildJob(PHONE_TARGET, "arm")]
        results = self._executor(runner, BuildType.RELEASE).run(jobs)

        self.assertEqual(len(results), 2)
        self.assertEqual(
            runner.history[0]["command"],
            [
                os.path.join("C:/MSBuild/12.0/bin", "msbuild"),
                str(self.root / "CordovaApp.Store.jsproj"),
                "/clp:NoSummary;NoItemAndPropertyList;Verbosity=minimal",
                "/nologo",
                "/p:Configuration=release",
                "/p:Platform=anycpu",
            ],
        )
        self.assertEqual(runner.history[1]["command"][1], str(self.root / "CordovaApp.Phone.jsproj"))
        self.assertEqual(runner.history[1]["command"][-1], "/p:Platform=arm")
        self.assertTrue(all(entry["cwd"] == self.root for entry in runner.history))
        self.assertTrue(all(entry["stream"] for entry in runner.history))
        self.assertIn("Building CordovaApp.Store.jsproj (release, anycpu) [1/2]", self.out.getvalue())

    def test_stops_at_first_failure(self) -> None:
        runner = ScriptedRunner(failing_archs={"arm"})
        jobs = [
            BuildJob(STORE_TARGET, "x86"),
            BuildJob(STORE_TARGET, "arm"),
            BuildJob(PHONE_TARGET, "x86"),
        ]
        with self.assertRaises(JobFailure) as ctx:
            self._executor(runner).run(jobs)

        self.assertEqual(len(runner.history), 2)
        self.assertEqual(ctx.exception.job, jobs[1])
        self.assertIsInstance(ctx.exception.cause, CommandError)
        message = str(ctx.exception)
        self.assertIn("CordovaApp.Store.jsproj (arm)", message)
        self.assertIn("exit code 1", message)
        self.assertNotIn("\n", message)

    def test_missing_msbuild_is_a_job_failure(self) -> None:
        with self.assertRaises(JobFailure) as ctx:
            self._executor(MissingToolRunner()).run([BuildJob(PHONE_TARGET, "arm")])
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)

    def test_empty_job_list_runs_nothing(self) -> None:
        runner = ScriptedRunner()
        self.assertEqual(self._executor(runner).run([]), [])
        self.assertEqual(runner.history, [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
