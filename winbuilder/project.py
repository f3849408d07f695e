"""Platform project checks and the platform-config pre-build step."""
from __future__ import annotations

from pathlib import Path
from typing import List

from core.command_runner import CommandError, CommandResult, CommandRunner

from .errors import BuildError, NotAProject, first_line


PROJECT_MARKER_SUFFIX = ".shproj"
DEFAULT_PLATFORM_CONFIG_SCRIPT = Path("cordova") / "lib" / "ApplyPlatformConfig.ps1"


def is_platform_project(root: Path) -> bool:
    """Return True when ``root`` holds the shared project file of a platform project."""

    if not root.is_dir():
        return False
    return any(
        path.is_file() and path.suffix.lower() == PROJECT_MARKER_SUFFIX
        for path in root.iterdir()
    )


def ensure_platform_project(root: Path) -> None:
    if not is_platform_project(root):
        raise NotAProject(f"Could not find project at {root}")


def platform_config_script(root: Path, configured: str | None = None) -> Path:
    script = Path(configured) if configured else DEFAULT_PLATFORM_CONFIG_SCRIPT
    if not script.is_absolute():
        script = root / script
    if not script.is_file():
        raise BuildError(f"Platform config script not found: {script}")
    return script


def platform_config_command(script: Path, root: Path) -> List[str]:
    return ["Powershell", "-File", str(script), str(root)]


def apply_platform_config(runner: CommandRunner, root: Path, script: Path) -> CommandResult:
    """Run the platform-config script once against the project root."""

    try:
        return runner.run(
            platform_config_command(script, root),
            cwd=root,
            note="Apply platform config",
            stream=True,
        )
    except (CommandError, OSError) as exc:
        raise BuildError(f"Applying platform config failed: {first_line(exc)}") from exc


__all__ = [
    "DEFAULT_PLATFORM_CONFIG_SCRIPT",
    "PROJECT_MARKER_SUFFIX",
    "apply_platform_config",
    "ensure_platform_project",
    "is_platform_project",
    "platform_config_command",
    "platform_config_script",
]
