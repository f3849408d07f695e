"""Exceptions raised while planning and running platform builds."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .planner import BuildJob


def first_line(exc: BaseException) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


class BuildError(RuntimeError):
    """Base class for fatal build conditions."""


class ConflictingOptions(BuildError):
    """Raised when mutually exclusive build flags are combined."""


class NotAProject(BuildError):
    """Raised when the working directory is not a platform project."""


class PreferenceFileError(BuildError):
    """Raised when the preference file cannot be read."""


class UnsupportedTargetVersion(BuildError):
    """Raised when a target-version preference has no known target."""

    def __init__(self, preference: str, value: str | None):
        shown = value if value is not None else "<unset>"
        super().__init__(f"Unsupported {preference} value: {shown}")
        self.preference = preference
        self.value = value


class ToolchainNotFound(BuildError):
    """Raised when no compatible MSBuild tools are installed."""


class JobFailure(BuildError):
    """Raised when a native build invocation fails; later jobs are abandoned."""

    def __init__(self, job: "BuildJob", cause: Exception):
        super().__init__(
            f"Build of {job.target.project_file} ({job.architecture}) failed: {first_line(cause)}"
        )
        self.job = job
        self.cause = cause


__all__ = [
    "BuildError",
    "ConflictingOptions",
    "JobFailure",
    "NotAProject",
    "PreferenceFileError",
    "ToolchainNotFound",
    "UnsupportedTargetVersion",
]
