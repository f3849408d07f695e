"""Shared core utilities for command execution and configuration loading."""

from .command_runner import (
    CommandError,
    CommandResult,
    CommandRunner,
    OutputSink,
    RecordedCommand,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)
from .config_loader import (
    ConfigLoader,
    FILE_LOADERS,
    find_config_file,
    load_config_file,
    normalize_string_list,
)

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "OutputSink",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "ConfigLoader",
    "FILE_LOADERS",
    "find_config_file",
    "load_config_file",
    "normalize_string_list",
]
