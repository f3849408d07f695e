"""Level-gated console output for build commands."""
from __future__ import annotations

from typing import Dict, TextIO
import sys


LEVELS: Dict[str, int] = {
    "verbose": 1000,
    "normal": 2000,
    "info": 5000,
    "error": 5000,
}

_PREFIXES: Dict[str, str] = {
    "verbose": "DEBUG",
    "error": "ERROR",
}


class Reporter:
    """Prints messages whose level is at or above the configured threshold.

    Warnings are never gated: like errors they go to ``error_stream`` so that
    ``--silent`` still shows why targets were skipped.
    """

    def __init__(
        self,
        level: str = "normal",
        *,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        self.level = "normal"
        self.set_level(level)
        self._stream = stream
        self._error_stream = error_stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream if self._error_stream is not None else sys.stderr

    def set_level(self, level: str) -> None:
        normalized = level.strip().lower()
        if normalized not in LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Expected one of: {', '.join(LEVELS)}")
        self.level = normalized

    def enabled(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS[self.level]

    def log(self, level: str, message: str) -> None:
        if not self.enabled(level):
            return
        prefix = _PREFIXES.get(level)
        text = f"{prefix}: {message}" if prefix else message
        target = self.error_stream if level == "error" else self.stream
        print(text, file=target)

    def verbose(self, message: str) -> None:
        self.log("verbose", message)

    def normal(self, message: str) -> None:
        self.log("normal", message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def error(self, message: str) -> None:
        self.log("error", message)

    def warning(self, message: str) -> None:
        print(f"Warning: {message}", file=self.error_stream)


__all__ = ["LEVELS", "Reporter"]
